"""
Stats Service
Daily care summaries and the upcoming events feed
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Any
from datetime import datetime, date, timedelta
from sqlalchemy.orm import Session, selectinload

from config import CareConfig
from database import get_db_context
import models
from services.care_event_service import filter_to_day, order_events, serialize
from services.schedule_service import schedule_service
from tools.clock import Clock, day_bounds
from tools.completion_resolver import completion_resolver, progress_percent


logger = logging.getLogger(__name__)


# Payload key -> model listed for the day
DAILY_RECORDS = {
    "bowel_movements": models.BowelMovement,
    "urination": models.Urination,
    "sleep_records": models.Sleep,
    "blood_pressure": models.BloodPressure,
    "glucose": models.Glucose,
    "insulin": models.Insulin,
    "notes": models.Note,
}


def format_sleep_duration(start: datetime, end: Optional[datetime], now: datetime) -> str:
    """'Xh Ym' or 'Ym', suffixed with ' (ongoing)' while no end time is recorded"""
    ongoing = end is None
    seconds = max(((now if ongoing else end) - start).total_seconds(), 0)
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)

    duration = f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
    return f"{duration} (ongoing)" if ongoing else duration


def log_payload(log: models.MedicationLog) -> Dict[str, Any]:
    payload = serialize(log)
    payload["medication_name"] = log.medication.name if log.medication else None
    return payload


class StatsService:
    """
    Service for daily statistics
    """

    async def get_date_stats(
        self,
        care_recipient_id: int,
        day: date,
        now: datetime,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Summary of everything recorded for a care recipient on one day

        Args:
            care_recipient_id: Care recipient ID
            day: Calendar day
            now: Current time, used for ongoing sleep
            db: Database session

        Returns:
            Stats payload with medication completion, meals, records and sleep
        """
        def _get(session: Session) -> Dict[str, Any]:
            medications = session.query(models.Medication).options(
                selectinload(models.Medication.schedules)
            ).filter(
                models.Medication.care_recipient_id == care_recipient_id
            ).all()

            start, end = day_bounds(day)
            day_logs = session.query(models.MedicationLog).options(
                selectinload(models.MedicationLog.medication)
            ).filter(
                models.MedicationLog.care_recipient_id == care_recipient_id,
                models.MedicationLog.taken_at >= start,
                models.MedicationLog.taken_at < end
            ).order_by(models.MedicationLog.taken_at.desc()).all()

            logs_by_medication = defaultdict(list)
            for log in day_logs:
                logs_by_medication[log.medication_id].append(log)

            completion = completion_resolver.summarize(
                medications,
                {m.id: list(m.schedules) for m in medications},
                logs_by_medication
            )

            meals = self._records_for_day(session, models.Meal, care_recipient_id, day)
            meal_total = len(CareConfig.MEAL_TYPES)

            stats = {
                "date": day.isoformat(),
                "medications": {
                    "completed": completion.completed,
                    "total": completion.total,
                    "progress": completion.progress,
                    "completed_medication_ids": completion.completed_medication_ids,
                    "logs": [log_payload(log) for log in day_logs],
                },
                "meals": {
                    "completed": len(meals),
                    "total": meal_total,
                    "progress": progress_percent(min(len(meals), meal_total), meal_total),
                    "logs": [serialize(meal) for meal in meals],
                },
            }

            for key, model in DAILY_RECORDS.items():
                rows = self._records_for_day(session, model, care_recipient_id, day)
                stats[key] = [serialize(row) for row in rows]

            sleep_rows = stats["sleep_records"]
            if sleep_rows:
                latest = sleep_rows[0]
                stats["sleep"] = {
                    "duration": format_sleep_duration(latest["start_time"], latest["end_time"], now),
                    "quality": latest["quality"] or "",
                }
            else:
                stats["sleep"] = {"duration": "No data", "quality": ""}

            logger.debug(
                f"Stats for care recipient {care_recipient_id} on {day}: "
                f"medications {completion.completed}/{completion.total}, meals {len(meals)}"
            )
            return stats

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_today_stats(
        self,
        care_recipient_id: int,
        clock: Clock,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """Date stats for the clock's current day"""
        now = clock.now()
        return await self.get_date_stats(care_recipient_id, now.date(), now=now, db=db)

    async def get_upcoming_events(
        self,
        care_recipient_id: int,
        now: datetime,
        db: Optional[Session] = None
    ) -> List[Dict[str, Any]]:
        """
        Upcoming medication doses and appointments, soonest first

        Doses cover today (still to come) and tomorrow; appointments cover
        the next week.
        """
        if db:
            return await self._upcoming_events(db, care_recipient_id, now)

        with get_db_context() as session:
            return await self._upcoming_events(session, care_recipient_id, now)

    async def _upcoming_events(
        self,
        session: Session,
        care_recipient_id: int,
        now: datetime
    ) -> List[Dict[str, Any]]:
        doses = await schedule_service.get_upcoming_doses(care_recipient_id, now, db=session)

        today = now.date()
        appointments = session.query(models.Appointment).filter(
            models.Appointment.care_recipient_id == care_recipient_id,
            models.Appointment.date >= today,
            models.Appointment.date <= today + timedelta(days=CareConfig.APPOINTMENT_LOOKAHEAD_DAYS)
        ).order_by(
            models.Appointment.date, models.Appointment.time
        ).limit(CareConfig.APPOINTMENT_LIMIT).all()

        events = []
        for instance, medication in doses:
            events.append({
                "id": f"med_{instance.schedule_id}_{instance.date.isoformat()}",
                "type": "medication",
                "title": medication.name,
                "date": instance.date.isoformat(),
                "time": instance.time_label,
                "details": medication.dosage or "Take as directed",
                "notes": medication.instructions or "",
                "quantity": instance.quantity,
                "reminder": True,
                "source": "schedule",
                "can_edit": False,
            })

        for appointment in appointments:
            events.append({
                "id": f"apt_{appointment.id}",
                "type": "appointment",
                "title": appointment.title,
                "date": appointment.date.isoformat(),
                "time": appointment.time,
                "details": appointment.location or "",
                "notes": appointment.notes or "",
                "quantity": None,
                "reminder": bool(appointment.reminder_enabled),
                "source": "manual",
                "can_edit": True,
            })

        events.sort(key=lambda e: (e["date"], _time_sort_key(e["time"])))
        logger.debug(f"{len(events)} upcoming events for care recipient {care_recipient_id}")
        return events

    def _records_for_day(self, session: Session, model, care_recipient_id: int, day: date) -> List[Any]:
        query = session.query(model).filter(model.care_recipient_id == care_recipient_id)
        return order_events(filter_to_day(query, model, day), model).all()


def _time_sort_key(value: str) -> str:
    # Zero-pad single-digit hours so "9:00" sorts before "10:00"
    if value and len(value.split(":")[0]) == 1:
        return "0" + value
    return value or ""


# Singleton instance
stats_service = StatsService()
