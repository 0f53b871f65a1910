"""
Medication Schedules API Router
Endpoints for medication schedule management
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.deps import get_db, not_found, services, value_error_response
from api.schemas.schedule import (
    ScheduleCreate,
    ScheduleUpdate,
    ScheduleResponse,
)


router = APIRouter(prefix="/medication-schedules", tags=["schedules"])


@router.get("/", response_model=List[ScheduleResponse])
async def list_schedules(
    medication_id: int = Query(..., description="Medication ID"),
    db: Session = Depends(get_db)
):
    """
    Get all schedules for a medication, ordered by time
    """
    schedule_service = services.get_schedule_service()
    return await schedule_service.get_medication_schedules(medication_id, db=db)


@router.post("/", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule_data: ScheduleCreate,
    db: Session = Depends(get_db)
):
    """
    Create a medication schedule

    - **time**: Due time ("HH:MM")
    - **days_of_week**: 0=Sunday .. 6=Saturday
    - **specific_days**: Calendar dates; override days_of_week when present
    - **as_needed**: PRN dose, never required
    - **tapering_schedule**: Date ranges overriding the quantity
    """
    schedule_service = services.get_schedule_service()

    fields = schedule_data.model_dump(exclude={"medication_id", "time", "days_of_week"})
    try:
        return await schedule_service.create_schedule(
            medication_id=schedule_data.medication_id,
            time=schedule_data.time,
            days_of_week=schedule_data.days_of_week,
            db=db,
            **fields
        )
    except ValueError as e:
        raise value_error_response(e)


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    updates: ScheduleUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a medication schedule
    """
    schedule_service = services.get_schedule_service()

    try:
        schedule = await schedule_service.update_schedule(
            schedule_id,
            updates.model_dump(exclude_unset=True),
            db=db
        )
    except ValueError as e:
        raise value_error_response(e)

    if not schedule:
        raise not_found(f"Schedule {schedule_id} not found")
    return schedule


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a medication schedule
    """
    schedule_service = services.get_schedule_service()

    deleted = await schedule_service.delete_schedule(schedule_id, db=db)
    if not deleted:
        raise not_found(f"Schedule {schedule_id} not found")
    return {"success": True}
