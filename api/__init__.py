"""
API Module
FastAPI routers for the CareTrack application
"""

from api.care_recipients import router as care_recipients_router
from api.medications import router as medications_router
from api.schedules import router as schedules_router
from api.medication_logs import router as medication_logs_router
from api.stats import router as stats_router
from api.care_events import router as care_events_router

from api.deps import (
    get_db,
    get_clock,
    get_daily_state_service,
    services,
)
from config import settings


__all__ = [
    # Routers
    "care_recipients_router",
    "medications_router",
    "schedules_router",
    "medication_logs_router",
    "stats_router",
    "care_events_router",
    # Dependencies
    "get_db",
    "get_clock",
    "get_daily_state_service",
    "services",
]


def include_routers(app):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(care_recipients_router, prefix=settings.API_PREFIX)
    app.include_router(medications_router, prefix=settings.API_PREFIX)
    app.include_router(schedules_router, prefix=settings.API_PREFIX)
    app.include_router(medication_logs_router, prefix=settings.API_PREFIX)
    app.include_router(stats_router, prefix=settings.API_PREFIX)
    app.include_router(care_events_router, prefix=settings.API_PREFIX)
