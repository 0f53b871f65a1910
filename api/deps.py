"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from datetime import date
from functools import lru_cache

from fastapi import HTTPException, Query, status

from config import settings
from database import get_db
from tools.clock import Clock, SystemClock


@lru_cache()
def _system_clock() -> SystemClock:
    return SystemClock(settings.TIMEZONE)


def get_clock() -> Clock:
    """
    Clock dependency
    Tests override this with a FixedClock
    """
    return _system_clock()


def get_daily_state_service():
    """Process-wide daily state (inspiration cache, rollover)"""
    from services.daily_state_service import daily_state_service
    return daily_state_service


def parse_date_param(value: str = Query(..., alias="date", description="Date as YYYY-MM-DD")) -> date:
    """
    Parse a required ``date`` query parameter
    Raises HTTPException 400 when malformed
    """
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date format: {value!r}. Use YYYY-MM-DD."
        )


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def value_error_response(error: ValueError) -> HTTPException:
    """404 for missing rows, 400 for anything else the services reject"""
    message = str(error)
    if "not found" in message:
        return not_found(message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_care_recipient_service():
        from services.care_recipient_service import care_recipient_service
        return care_recipient_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_schedule_service():
        from services.schedule_service import schedule_service
        return schedule_service

    @staticmethod
    def get_medication_log_service():
        from services.medication_log_service import medication_log_service
        return medication_log_service

    @staticmethod
    def get_care_event_service():
        from services.care_event_service import care_event_service
        return care_event_service

    @staticmethod
    def get_stats_service():
        from services.stats_service import stats_service
        return stats_service


# Service dependency instances
services = ServiceDependency()
