"""
Tests for Care Event Service
Tests generic CRUD and day filtering over care records
"""

import pytest
from datetime import datetime, date

from services.care_event_service import CareEventService, EVENT_MODELS, get_event_model


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def care_event_service():
    """Create care event service instance"""
    return CareEventService()


# =============================================================================
# CRUD Tests
# =============================================================================

class TestCareEvents:
    """Tests for care event records"""

    @pytest.mark.unit
    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown care event kind"):
            get_event_model("vaccines")

    @pytest.mark.unit
    def test_every_kind_has_event_time(self):
        for model in EVENT_MODELS.values():
            assert model.__event_time__ in model.__table__.c

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_create_and_update(self, care_event_service, db_session, test_care_recipient):
        record = await care_event_service.create_event(
            "blood-pressure",
            test_care_recipient.id,
            {"systolic": 130, "diastolic": 85, "time_of_reading": datetime(2024, 6, 3, 9, 0)},
            db=db_session
        )

        updated = await care_event_service.update_event(
            "blood-pressure", record.id, {"pulse": 72, "care_recipient_id": 999}, db=db_session
        )

        assert updated.pulse == 72
        assert updated.systolic == 130
        assert updated.care_recipient_id == test_care_recipient.id

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_create_for_unknown_care_recipient(self, care_event_service, db_session):
        with pytest.raises(ValueError, match="not found"):
            await care_event_service.create_event(
                "notes", 999, {"title": "Hello", "content": "World"}, db=db_session
            )

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_timestamp_defaults_to_now(self, care_event_service, db_session, test_care_recipient):
        record = await care_event_service.create_event(
            "urination", test_care_recipient.id, {"color": "pale", "occurred_at": None}, db=db_session
        )

        assert record.occurred_at is not None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_list_filters_to_day_newest_first(self, care_event_service, db_session, test_care_recipient):
        for stamp in (datetime(2024, 6, 2, 23, 59), datetime(2024, 6, 3, 0, 0), datetime(2024, 6, 3, 18, 0)):
            await care_event_service.create_event(
                "glucose",
                test_care_recipient.id,
                {"level": 110, "reading_type": "fasting", "time_of_reading": stamp},
                db=db_session
            )

        records = await care_event_service.list_events(
            "glucose", test_care_recipient.id, day=date(2024, 6, 3), db=db_session
        )

        assert [r.time_of_reading.hour for r in records] == [18, 0]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_appointments_soonest_first(self, care_event_service, db_session, test_care_recipient):
        for day, time in ((date(2024, 6, 5), "10:00"), (date(2024, 6, 4), "15:00"), (date(2024, 6, 4), "09:00")):
            await care_event_service.create_event(
                "appointments",
                test_care_recipient.id,
                {"title": "Visit", "date": day, "time": time},
                db=db_session
            )

        records = await care_event_service.list_events("appointments", test_care_recipient.id, db=db_session)

        assert [(r.date.day, r.time) for r in records] == [(4, "09:00"), (4, "15:00"), (5, "10:00")]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_delete(self, care_event_service, db_session, test_care_recipient):
        record = await care_event_service.create_event(
            "notes", test_care_recipient.id, {"title": "Call", "content": "Pharmacy"}, db=db_session
        )

        assert await care_event_service.delete_event("notes", record.id, db=db_session) is True
        assert await care_event_service.get_event("notes", record.id, db=db_session) is None
        assert await care_event_service.delete_event("notes", record.id, db=db_session) is False
