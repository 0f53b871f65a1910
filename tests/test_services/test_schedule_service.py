"""
Tests for Schedule and Medication Log Services
Tests schedule normalization, dose logging and unmarking
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from zoneinfo import ZoneInfo

from config import settings
from services.schedule_service import ScheduleService
from services.medication_log_service import MedicationLogService
from services.stats_service import StatsService
from tools.clock import FixedClock
from models import MedicationLog


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def schedule_service():
    """Create schedule service instance"""
    return ScheduleService()


@pytest.fixture
def log_service():
    """Create medication log service instance"""
    return MedicationLogService()


# =============================================================================
# Schedule Tests
# =============================================================================

class TestCreateSchedule:
    """Tests for creating schedules"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_fields_normalized(self, schedule_service, db_session, test_medication):
        schedule = await schedule_service.create_schedule(
            test_medication.id,
            "8:00",
            days_of_week=[5, 1, 3, 1],
            db=db_session,
            quantity="2 tablets"
        )

        assert schedule.time == "08:00"
        assert schedule.days_of_week == [1, 3, 5]
        assert schedule.quantity == "2 tablets"
        assert schedule.specific_days == []

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_specific_days_stored_as_iso(self, schedule_service, db_session, test_medication):
        schedule = await schedule_service.create_schedule(
            test_medication.id,
            "09:00",
            db=db_session,
            specific_days=[date(2024, 6, 5), "06/01/2024"]
        )

        assert schedule.specific_days == ["2024-06-01", "2024-06-05"]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_tapering_stored_camel_case(self, schedule_service, db_session, test_medication):
        schedule = await schedule_service.create_schedule(
            test_medication.id,
            "09:00",
            days_of_week=[0, 1, 2, 3, 4, 5, 6],
            db=db_session,
            is_tapering=True,
            tapering_schedule=[{"start_date": date(2024, 6, 1), "end_date": date(2024, 6, 7), "quantity": "1"}]
        )

        assert schedule.tapering_schedule == [
            {"startDate": "2024-06-01", "endDate": "2024-06-07", "quantity": "1"}
        ]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_no_days_rejected(self, schedule_service, db_session, test_medication):
        with pytest.raises(ValueError, match="at least one day"):
            await schedule_service.create_schedule(test_medication.id, "09:00", db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_as_needed_needs_no_days(self, schedule_service, db_session, test_medication):
        schedule = await schedule_service.create_schedule(
            test_medication.id, "09:00", db=db_session, as_needed=True
        )

        assert schedule.as_needed is True

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unknown_medication(self, schedule_service, db_session):
        with pytest.raises(ValueError, match="not found"):
            await schedule_service.create_schedule(999, "09:00", days_of_week=[1], db=db_session)


class TestUpdateSchedule:
    """Tests for updating and deleting schedules"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_update_days(self, schedule_service, db_session, test_schedule):
        schedule = await schedule_service.update_schedule(
            test_schedule.id, {"days_of_week": [6, 0]}, db=db_session
        )

        assert schedule.days_of_week == [0, 6]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_clearing_all_days_rejected(self, schedule_service, db_session, test_schedule):
        with pytest.raises(ValueError):
            await schedule_service.update_schedule(test_schedule.id, {"days_of_week": []}, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_update_missing(self, schedule_service, db_session):
        assert await schedule_service.update_schedule(999, {"quantity": "2"}, db=db_session) is None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_delete_keeps_logs_as_manual(self, schedule_service, db_session, test_medication_log):
        """Logs outlive their schedule without a schedule reference"""
        log_id = test_medication_log.id

        assert await schedule_service.delete_schedule(test_medication_log.schedule_id, db=db_session) is True

        db_session.expire_all()
        log = db_session.query(MedicationLog).filter(MedicationLog.id == log_id).first()
        assert log is not None
        assert log.schedule_id is None


# =============================================================================
# Medication Log Tests
# =============================================================================

class TestLogDose:
    """Tests for marking and unmarking doses"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_log_scheduled_dose(self, log_service, db_session, test_schedule):
        log = await log_service.log_dose(
            test_schedule.medication_id,
            taken_at=datetime(2024, 6, 3, 8, 2),
            schedule_id=test_schedule.id,
            db=db_session
        )

        assert log.taken is True
        assert log.schedule_id == test_schedule.id
        assert log.care_recipient_id is not None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_schedule_must_belong_to_medication(self, log_service, db_session, test_schedule, test_care_recipient):
        from models import Medication
        other = Medication(care_recipient_id=test_care_recipient.id, name="Aspirin", dosage="81mg")
        db_session.add(other)
        db_session.commit()

        with pytest.raises(ValueError, match="not found"):
            await log_service.log_dose(other.id, schedule_id=test_schedule.id, db=db_session)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_care_recipient_must_match(self, log_service, db_session, test_medication):
        with pytest.raises(ValueError, match="does not belong"):
            await log_service.log_dose(
                test_medication.id, care_recipient_id=test_medication.care_recipient_id + 1, db=db_session
            )

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_aware_timestamp_stored_naive(self, log_service, db_session, test_medication, monkeypatch):
        monkeypatch.setattr(settings, "TIMEZONE", None)
        aware = datetime(2024, 6, 3, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        log = await log_service.log_dose(test_medication.id, taken_at=aware, db=db_session)

        assert log.taken_at.tzinfo is None
        assert log.taken_at == aware.astimezone().replace(tzinfo=None)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_late_evening_dose_stays_on_configured_day(self, log_service, db_session, test_schedule, monkeypatch):
        """22:00 in the configured zone is filed under that day, whatever the host zone"""
        monkeypatch.setattr(settings, "TIMEZONE", "America/New_York")
        evening = datetime(2024, 6, 3, 22, 0, tzinfo=ZoneInfo("America/New_York"))

        log = await log_service.log_dose(
            test_schedule.medication_id,
            taken_at=evening,
            schedule_id=test_schedule.id,
            db=db_session
        )

        assert log.taken_at == datetime(2024, 6, 3, 22, 0)

        stats = await StatsService().get_date_stats(
            log.care_recipient_id, date(2024, 6, 3), now=datetime(2024, 6, 3, 23, 0), db=db_session
        )
        assert stats["medications"]["completed"] == 1

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_utc_timestamp_converted_with_clock_zone(self, log_service, db_session, test_medication):
        clock = FixedClock(datetime(2024, 6, 3, 23, 0), timezone="America/New_York")

        log = await log_service.log_dose(
            test_medication.id,
            taken_at=datetime(2024, 6, 4, 2, 0, tzinfo=timezone.utc),
            clock=clock,
            db=db_session
        )

        assert log.taken_at == datetime(2024, 6, 3, 22, 0)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_missing_timestamp_uses_clock(self, log_service, db_session, test_medication):
        clock = FixedClock(datetime(2024, 6, 3, 9, 30))

        log = await log_service.log_dose(test_medication.id, clock=clock, db=db_session)

        assert log.taken_at == datetime(2024, 6, 3, 9, 30)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unmark(self, log_service, db_session, test_medication_log):
        assert await log_service.delete_log(test_medication_log.id, db=db_session) is True
        assert await log_service.delete_log(test_medication_log.id, db=db_session) is False

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_get_logs_for_day(self, log_service, db_session, test_medication_log):
        recipient_id = test_medication_log.care_recipient_id

        assert len(await log_service.get_logs(recipient_id, day=date(2024, 6, 3), db=db_session)) == 1
        assert await log_service.get_logs(recipient_id, day=date(2024, 6, 4), db=db_session) == []

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_recent_logs_limited(self, log_service, db_session, test_medication):
        for minute in range(12):
            await log_service.log_dose(
                test_medication.id, taken_at=datetime(2024, 6, 3, 9, minute), db=db_session
            )

        logs = await log_service.get_logs(test_medication.care_recipient_id, db=db_session)

        assert len(logs) == 10
        assert logs[0].taken_at == datetime(2024, 6, 3, 9, 11)
