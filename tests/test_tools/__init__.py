"""
Test Tools Package
Tests for the tools module (recurrence, expansion, completion, reorder forecast)
"""

__all__ = [
    "test_recurrence",
    "test_schedule_expander",
    "test_completion_resolver",
    "test_reorder_forecast",
]
