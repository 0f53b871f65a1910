"""
CareTrack Test Suite
====================

This package contains all tests for the CareTrack caregiving tracker.

Test Structure:
- test_api/: API endpoint tests for FastAPI routes
- test_services/: Service layer tests against an in-memory database
- test_tools/: Unit tests for scheduling, completion and reorder logic
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_api/

    # Run with verbose output
    pytest -v

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"

# Common test data
SAMPLE_MEDICATIONS = [
    {"name": "Metformin", "dosage": "500mg", "current_quantity": 60},
    {"name": "Lisinopril", "dosage": "10mg", "current_quantity": 30},
    {"name": "Atorvastatin", "dosage": "20mg", "current_quantity": 90},
]

__all__ = [
    "TEST_DATABASE_URL",
    "SAMPLE_MEDICATIONS",
]
