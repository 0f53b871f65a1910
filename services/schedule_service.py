"""
Schedule Service
Business logic for medication schedule management
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime
from sqlalchemy.orm import Session, selectinload

from config import CareConfig
from database import get_db_context
import models
from tools.clock import day_bounds
from tools.recurrence import (
    parse_calendar_date,
    parse_days_of_week,
    parse_time_of_day,
    serialize_tapering,
)
from tools.schedule_expander import DoseInstance, schedule_expander


logger = logging.getLogger(__name__)


SCHEDULE_FIELDS = {
    'time', 'days_of_week', 'specific_days', 'as_needed', 'quantity',
    'with_food', 'active', 'reminder_enabled', 'is_tapering', 'tapering_schedule'
}


def _normalize_fields(values: Dict[str, Any]) -> Dict[str, Any]:
    """Convert incoming schedule fields to their stored form.

    Raises ValueError for an unreadable time or days-of-week value.
    """
    normalized = {}
    for field, value in values.items():
        if field not in SCHEDULE_FIELDS:
            continue

        if field == 'time':
            parsed = parse_time_of_day(value)
            if parsed is None:
                raise ValueError(f"Invalid schedule time: {value!r}")
            value = parsed.strftime("%H:%M")
        elif field == 'days_of_week':
            days = parse_days_of_week(value if value is not None else [])
            if days is None:
                raise ValueError(f"Invalid days of week: {value!r}")
            value = sorted(days)
        elif field == 'specific_days':
            value = sorted({d.isoformat() for d in (parse_calendar_date(v) for v in value or []) if d})
        elif field == 'tapering_schedule':
            value = serialize_tapering(value)
        elif field == 'quantity':
            value = str(value) if value not in (None, "") else "1"

        normalized[field] = value
    return normalized


def _check_recurrence(schedule: models.MedicationSchedule) -> None:
    if schedule.as_needed:
        return
    if not schedule.days_of_week and not schedule.specific_days:
        raise ValueError("A schedule needs at least one day unless it is as needed")


class ScheduleService:
    """
    Service for medication schedule management
    """

    async def create_schedule(
        self,
        medication_id: int,
        time: Any,
        days_of_week: Optional[List[int]] = None,
        db: Optional[Session] = None,
        **fields: Any
    ) -> models.MedicationSchedule:
        """
        Create a medication schedule

        Args:
            medication_id: Medication ID
            time: Due time of day ("HH:MM")
            days_of_week: Days of week (0=Sunday, 6=Saturday)
            db: Database session
            **fields: specific_days, as_needed, quantity, with_food, active,
                reminder_enabled, is_tapering, tapering_schedule

        Returns:
            Created MedicationSchedule object
        """
        def _create(session: Session) -> models.MedicationSchedule:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                raise ValueError(f"Medication {medication_id} not found")

            values = {k: v for k, v in fields.items() if v is not None}
            values['time'] = time
            values['days_of_week'] = days_of_week or []
            values.setdefault('specific_days', [])
            values.setdefault('tapering_schedule', [])

            schedule = models.MedicationSchedule(
                medication_id=medication_id,
                **_normalize_fields(values)
            )
            _check_recurrence(schedule)

            session.add(schedule)
            session.commit()
            session.refresh(schedule)

            logger.info(f"Created schedule {schedule.id} for medication {medication_id} at {schedule.time}")
            return schedule

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_schedule(
        self,
        schedule_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.MedicationSchedule]:
        """Get schedule by ID"""
        def _get(session: Session) -> Optional[models.MedicationSchedule]:
            return session.query(models.MedicationSchedule).filter(
                models.MedicationSchedule.id == schedule_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_medication_schedules(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> List[models.MedicationSchedule]:
        """Get all schedules for a medication ordered by time"""
        def _get(session: Session) -> List[models.MedicationSchedule]:
            return session.query(models.MedicationSchedule).filter(
                models.MedicationSchedule.medication_id == medication_id
            ).order_by(models.MedicationSchedule.time).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_schedule(
        self,
        schedule_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.MedicationSchedule]:
        """Update schedule fields; returns None when not found"""
        def _update(session: Session) -> Optional[models.MedicationSchedule]:
            schedule = session.query(models.MedicationSchedule).filter(
                models.MedicationSchedule.id == schedule_id
            ).first()

            if not schedule:
                return None

            for field, value in _normalize_fields(updates).items():
                setattr(schedule, field, value)
            _check_recurrence(schedule)

            schedule.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(schedule)

            return schedule

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_schedule(
        self,
        schedule_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """Delete a schedule; its logs are kept as unscheduled logs"""
        def _delete(session: Session) -> bool:
            schedule = session.query(models.MedicationSchedule).filter(
                models.MedicationSchedule.id == schedule_id
            ).first()

            if not schedule:
                return False

            session.delete(schedule)
            session.commit()

            logger.info(f"Deleted schedule {schedule_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    async def get_upcoming_doses(
        self,
        care_recipient_id: int,
        now: datetime,
        lookahead_days: int = CareConfig.UPCOMING_LOOKAHEAD_DAYS,
        db: Optional[Session] = None
    ) -> List[Tuple[DoseInstance, models.Medication]]:
        """
        Dose instances still to come for a care recipient

        Args:
            care_recipient_id: Care recipient ID
            now: Current local time from the injected clock
            lookahead_days: Days after today to include
            db: Database session

        Returns:
            (dose instance, medication) pairs sorted by date and time
        """
        def _get(session: Session) -> List[Tuple[DoseInstance, models.Medication]]:
            medications = session.query(models.Medication).options(
                selectinload(models.Medication.schedules)
            ).filter(
                models.Medication.care_recipient_id == care_recipient_id
            ).all()

            start, end = day_bounds(now.date())
            taken_rows = session.query(models.MedicationLog.schedule_id).filter(
                models.MedicationLog.care_recipient_id == care_recipient_id,
                models.MedicationLog.taken == True,
                models.MedicationLog.schedule_id.isnot(None),
                models.MedicationLog.taken_at >= start,
                models.MedicationLog.taken_at < end
            ).all()
            taken_today = {row.schedule_id for row in taken_rows}

            by_id = {m.id: m for m in medications}
            schedules = [s for m in medications for s in m.schedules]
            instances = schedule_expander.upcoming(
                schedules,
                now,
                lookahead_days=lookahead_days,
                taken_today=taken_today
            )

            logger.debug(f"{len(instances)} upcoming doses for care recipient {care_recipient_id}")
            return [(instance, by_id[instance.medication_id]) for instance in instances]

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
schedule_service = ScheduleService()
