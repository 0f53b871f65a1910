"""
Medications API Router
Endpoints for medication management and inventory
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.deps import get_clock, get_db, not_found, services, value_error_response
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    InventoryUpdate,
    RefillRequest,
    MedicationResponse,
    MedicationWithSchedules,
    ReorderAlert,
    ReorderAlertList,
    ReorderForecastResponse,
)
from tools.clock import Clock


router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("/", response_model=List[MedicationWithSchedules])
async def list_medications(
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    db: Session = Depends(get_db)
):
    """
    Get all medications for a care recipient, with schedules, by name
    """
    medication_service = services.get_medication_service()
    return await medication_service.get_care_recipient_medications(care_recipient_id, db=db)


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    db: Session = Depends(get_db)
):
    """
    Add a new medication for a care recipient

    - **care_recipient_id**: Care recipient ID
    - **name**: Medication name
    - **dosage**: Dosage (e.g., "10mg")
    """
    medication_service = services.get_medication_service()

    fields = medication_data.model_dump(exclude={"care_recipient_id", "name", "dosage"})
    try:
        return await medication_service.create_medication(
            care_recipient_id=medication_data.care_recipient_id,
            name=medication_data.name,
            dosage=medication_data.dosage,
            db=db,
            **fields
        )
    except ValueError as e:
        raise value_error_response(e)


@router.get("/reorder-alerts", response_model=ReorderAlertList)
async def get_reorder_alerts(
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    db: Session = Depends(get_db)
):
    """
    Medications at or below their threshold, or forecast to reach it
    within their reorder lead time
    """
    medication_service = services.get_medication_service()

    alerts = await medication_service.get_reorder_alerts(care_recipient_id, db=db)
    return ReorderAlertList(
        alerts=[
            ReorderAlert(
                medication=MedicationResponse.model_validate(medication),
                forecast=ReorderForecastResponse.model_validate(forecast)
            ) for medication, forecast in alerts
        ],
        total=len(alerts)
    )


@router.get("/{medication_id}", response_model=MedicationWithSchedules)
async def get_medication(
    medication_id: int,
    db: Session = Depends(get_db)
):
    """
    Get a medication with its schedules
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.get_medication(medication_id, db=db)
    if not medication:
        raise not_found(f"Medication {medication_id} not found")
    return medication


@router.patch("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: int,
    updates: MedicationUpdate,
    db: Session = Depends(get_db)
):
    """
    Update medication name, dosage, instructions and display fields
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.update_medication(
        medication_id,
        updates.model_dump(exclude_unset=True),
        db=db
    )
    if not medication:
        raise not_found(f"Medication {medication_id} not found")
    return medication


@router.delete("/{medication_id}")
async def delete_medication(
    medication_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a medication with its schedules and logs
    """
    medication_service = services.get_medication_service()

    deleted = await medication_service.delete_medication(medication_id, db=db)
    if not deleted:
        raise not_found(f"Medication {medication_id} not found")
    return {"success": True}


@router.patch("/{medication_id}/inventory", response_model=MedicationResponse)
async def update_inventory(
    medication_id: int,
    inventory: InventoryUpdate,
    db: Session = Depends(get_db)
):
    """
    Update inventory counters

    Only the fields sent are changed; **days_to_reorder** is clamped to 1-30.
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.update_inventory(
        medication_id,
        inventory.model_dump(exclude_unset=True),
        db=db
    )
    if not medication:
        raise not_found(f"Medication {medication_id} not found")
    return medication


@router.post("/{medication_id}/refill", response_model=MedicationResponse)
async def refill_medication(
    medication_id: int,
    refill: RefillRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock)
):
    """
    Record a refill: adds to the current quantity and uses up one refill
    """
    medication_service = services.get_medication_service()

    try:
        return await medication_service.refill_medication(
            medication_id,
            refill.refill_amount,
            refill_date=refill.refill_date or clock.today(),
            db=db
        )
    except ValueError as e:
        raise value_error_response(e)
