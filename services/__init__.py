"""
Services Module
Business logic layer for the CareTrack application
"""

from services.care_recipient_service import CareRecipientService, care_recipient_service
from services.medication_service import MedicationService, medication_service
from services.schedule_service import ScheduleService, schedule_service
from services.medication_log_service import MedicationLogService, medication_log_service
from services.care_event_service import CareEventService, care_event_service
from services.stats_service import StatsService, stats_service
from services.daily_state_service import DailyStateService, daily_state_service


__all__ = [
    # Service classes
    "CareRecipientService",
    "MedicationService",
    "ScheduleService",
    "MedicationLogService",
    "CareEventService",
    "StatsService",
    "DailyStateService",
    # Singleton instances
    "care_recipient_service",
    "medication_service",
    "schedule_service",
    "medication_log_service",
    "care_event_service",
    "stats_service",
    "daily_state_service",
]
