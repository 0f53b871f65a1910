"""
Medication Logs API Router
Endpoints for marking and unmarking doses
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.deps import get_clock, get_db, not_found, services, value_error_response
from api.schemas.medication_log import (
    MedicationLogCreate,
    MedicationLogResponse,
    MedicationLogList,
)
from tools.clock import Clock


router = APIRouter(prefix="/medication-logs", tags=["medication-logs"])


@router.get("/", response_model=MedicationLogList)
async def list_medication_logs(
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    day: Optional[date] = Query(None, alias="date", description="Only logs for this day"),
    medication_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Medication logs for a care recipient, newest first

    Without a date, only the most recent logs are returned.
    """
    medication_log_service = services.get_medication_log_service()

    logs = await medication_log_service.get_logs(
        care_recipient_id,
        day=day,
        medication_id=medication_id,
        db=db
    )
    return MedicationLogList(
        logs=[MedicationLogResponse.model_validate(log) for log in logs],
        total=len(logs)
    )


@router.post("/", response_model=MedicationLogResponse, status_code=status.HTTP_201_CREATED)
async def create_medication_log(
    log_data: MedicationLogCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock)
):
    """
    Mark a dose as taken (or skipped with **taken** = false)

    - **schedule_id**: The schedule this dose satisfies; omit for a manual dose
    - **taken_at**: Defaults to now
    """
    medication_log_service = services.get_medication_log_service()

    try:
        return await medication_log_service.log_dose(
            medication_id=log_data.medication_id,
            taken_at=log_data.taken_at,
            schedule_id=log_data.schedule_id,
            taken=log_data.taken,
            notes=log_data.notes,
            care_recipient_id=log_data.care_recipient_id,
            clock=clock,
            db=db
        )
    except ValueError as e:
        raise value_error_response(e)


@router.delete("/{log_id}")
async def delete_medication_log(
    log_id: int,
    db: Session = Depends(get_db)
):
    """
    Unmark a dose
    """
    medication_log_service = services.get_medication_log_service()

    deleted = await medication_log_service.delete_log(log_id, db=db)
    if not deleted:
        raise not_found(f"Medication log {log_id} not found")
    return {"success": True}
