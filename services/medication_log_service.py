"""
Medication Log Service
Recording and removing dose intake events
"""

import logging
from typing import List, Optional
from datetime import datetime, date
from sqlalchemy.orm import Session

from config import CareConfig, settings
from database import get_db_context
import models
from tools.clock import Clock, SystemClock, day_bounds


logger = logging.getLogger(__name__)


class MedicationLogService:
    """
    Service for medication intake logs

    Marking a dose creates a log; unmarking deletes it. Completion is
    always recomputed from the logs, so the two are symmetric.
    """

    async def log_dose(
        self,
        medication_id: int,
        taken_at: Optional[datetime] = None,
        schedule_id: Optional[int] = None,
        taken: bool = True,
        notes: Optional[str] = None,
        care_recipient_id: Optional[int] = None,
        clock: Optional[Clock] = None,
        db: Optional[Session] = None
    ) -> models.MedicationLog:
        """
        Record a dose for a medication

        Args:
            medication_id: Medication ID
            taken_at: When the dose was taken (defaults to now)
            schedule_id: Schedule the dose satisfies; None for a manual log
            taken: False records a skipped dose
            notes: Free-form notes
            care_recipient_id: Must match the medication's owner when given
            clock: Source of now and of the local zone (defaults to the
                configured TIMEZONE)
            db: Database session

        Returns:
            Created MedicationLog object
        """
        def _log(session: Session) -> models.MedicationLog:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                raise ValueError(f"Medication {medication_id} not found")

            if care_recipient_id is not None and care_recipient_id != medication.care_recipient_id:
                raise ValueError(
                    f"Medication {medication_id} does not belong to care recipient {care_recipient_id}"
                )

            if schedule_id is not None:
                schedule = session.query(models.MedicationSchedule).filter(
                    models.MedicationSchedule.id == schedule_id
                ).first()
                if not schedule or schedule.medication_id != medication_id:
                    raise ValueError(f"Schedule {schedule_id} not found for medication {medication_id}")

            # Stored timestamps are naive local time in the configured zone
            local_clock = clock or SystemClock(settings.TIMEZONE)
            logged_at = local_clock.to_local(taken_at) if taken_at else local_clock.now()

            log = models.MedicationLog(
                medication_id=medication_id,
                schedule_id=schedule_id,
                care_recipient_id=medication.care_recipient_id,
                taken=taken,
                taken_at=logged_at,
                notes=notes
            )

            session.add(log)
            session.commit()
            session.refresh(log)

            logger.info(
                f"Logged dose for medication {medication_id}"
                f"{f' (schedule {schedule_id})' if schedule_id else ''} at {log.taken_at}"
            )
            return log

        if db:
            return _log(db)

        with get_db_context() as session:
            return _log(session)

    async def delete_log(
        self,
        log_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """Unmark a dose; returns False when the log does not exist"""
        def _delete(session: Session) -> bool:
            log = session.query(models.MedicationLog).filter(
                models.MedicationLog.id == log_id
            ).first()

            if not log:
                return False

            session.delete(log)
            session.commit()

            logger.info(f"Deleted medication log {log_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    async def get_logs(
        self,
        care_recipient_id: int,
        day: Optional[date] = None,
        medication_id: Optional[int] = None,
        limit: Optional[int] = CareConfig.RECENT_LOG_LIMIT,
        db: Optional[Session] = None
    ) -> List[models.MedicationLog]:
        """
        Logs for a care recipient, newest first

        Without a day only the most recent ``limit`` logs are returned.
        """
        def _get(session: Session) -> List[models.MedicationLog]:
            query = session.query(models.MedicationLog).filter(
                models.MedicationLog.care_recipient_id == care_recipient_id
            )

            if medication_id is not None:
                query = query.filter(models.MedicationLog.medication_id == medication_id)

            if day is not None:
                start, end = day_bounds(day)
                query = query.filter(
                    models.MedicationLog.taken_at >= start,
                    models.MedicationLog.taken_at < end
                )

            query = query.order_by(models.MedicationLog.taken_at.desc(), models.MedicationLog.id.desc())
            if day is None and limit:
                query = query.limit(limit)

            return query.all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
medication_log_service = MedicationLogService()
