"""
Stats API Router
Endpoints for daily care summaries, upcoming events and daily inspiration
"""

from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import (
    get_clock,
    get_daily_state_service,
    get_db,
    parse_date_param,
    services,
)
from api.schemas.stats import (
    DateStatsResponse,
    UpcomingEvent,
    InspirationResponse,
)
from tools.clock import Clock


router = APIRouter(tags=["stats"])


@router.get("/care-stats/today", response_model=DateStatsResponse)
async def get_today_stats(
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock)
):
    """
    Today's medication completion, meals and records
    """
    stats_service = services.get_stats_service()
    return await stats_service.get_today_stats(care_recipient_id, clock, db=db)


@router.get("/care-stats/date", response_model=DateStatsResponse)
async def get_date_stats(
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    day: date = Depends(parse_date_param),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock)
):
    """
    Medication completion, meals and records for a given day

    - **date**: YYYY-MM-DD (400 when malformed)
    """
    stats_service = services.get_stats_service()
    return await stats_service.get_date_stats(care_recipient_id, day, now=clock.now(), db=db)


@router.get("/events/upcoming", response_model=List[UpcomingEvent])
async def get_upcoming_events(
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock)
):
    """
    Doses still to come today and tomorrow, plus appointments in the next week
    """
    stats_service = services.get_stats_service()
    return await stats_service.get_upcoming_events(care_recipient_id, clock.now(), db=db)


@router.get("/inspiration", response_model=InspirationResponse)
async def get_daily_inspiration(
    db: Session = Depends(get_db),
    daily_state=Depends(get_daily_state_service)
):
    """
    Today's inspirational quote; stays the same until the day changes
    """
    return await daily_state.get_inspiration(db=db)
