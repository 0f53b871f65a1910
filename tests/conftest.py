"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all CareTrack tests.
Fixtures include database sessions, test clients, a fixed clock and sample data.
"""

import os
import sys
from datetime import datetime, timedelta
from typing import Generator, Dict, Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep the app's own engine off disk while tests run
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from database import Base, build_engine, get_db
from models import (
    CareRecipient, Medication, MedicationSchedule, MedicationLog
)
from api.deps import get_clock, get_daily_state_service
from services.daily_state_service import DailyStateService
from tools.clock import FixedClock
from app import app


# Monday 2024-06-03, 07:00
FIXED_NOW = datetime(2024, 6, 3, 7, 0)


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = build_engine("sqlite:///:memory:")

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ==================== CLOCK FIXTURES ====================

@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock frozen at Monday 2024-06-03 07:00"""
    return FixedClock(FIXED_NOW)


@pytest.fixture
def daily_state(fixed_clock: FixedClock) -> DailyStateService:
    """Daily state driven by the fixed clock, picking the first message"""
    return DailyStateService(fixed_clock, chooser=lambda messages: messages[0])


@pytest.fixture(scope="function")
def client(db_session: Session, fixed_clock: FixedClock, daily_state: DailyStateService) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database and clock overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    app.dependency_overrides[get_daily_state_service] = lambda: daily_state

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def sample_medication_data() -> Dict[str, Any]:
    """Sample medication data for creating test medications"""
    return {
        "name": "Lisinopril",
        "dosage": "10mg",
        "instructions": "Take in the morning",
        "current_quantity": 30,
        "reorder_threshold": 5,
        "days_to_reorder": 7,
        "refills_remaining": 2,
    }


@pytest.fixture
def test_care_recipient(db_session: Session) -> CareRecipient:
    """Create and return a test care recipient"""
    recipient = CareRecipient(name="Grandma Rose")
    db_session.add(recipient)
    db_session.commit()
    db_session.refresh(recipient)
    return recipient


@pytest.fixture
def test_medication(db_session: Session, test_care_recipient: CareRecipient, sample_medication_data: Dict) -> Medication:
    """Create and return a test medication linked to the test care recipient"""
    medication = Medication(
        care_recipient_id=test_care_recipient.id,
        **sample_medication_data
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def test_schedule(db_session: Session, test_medication: Medication) -> MedicationSchedule:
    """Daily 08:00 schedule of one tablet"""
    schedule = MedicationSchedule(
        medication_id=test_medication.id,
        time="08:00",
        days_of_week=[0, 1, 2, 3, 4, 5, 6],
        quantity="1 tablet",
        as_needed=False
    )
    db_session.add(schedule)
    db_session.commit()
    db_session.refresh(schedule)
    return schedule


@pytest.fixture
def test_medication_log(db_session: Session, test_medication: Medication, test_schedule: MedicationSchedule) -> MedicationLog:
    """Dose for the test schedule taken at 08:05 on the fixed day"""
    log = MedicationLog(
        medication_id=test_medication.id,
        schedule_id=test_schedule.id,
        care_recipient_id=test_medication.care_recipient_id,
        taken=True,
        taken_at=FIXED_NOW.replace(hour=8, minute=5)
    )
    db_session.add(log)
    db_session.commit()
    db_session.refresh(log)
    return log


@pytest.fixture
def week_of(fixed_clock: FixedClock):
    """Sunday-to-Saturday window containing the fixed day"""
    today = fixed_clock.today()
    sunday = today - timedelta(days=(today.isoweekday() % 7))
    return [sunday + timedelta(days=offset) for offset in range(7)]


# ==================== PYTEST CONFIGURATION ====================

def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
