"""
Care Recipients API Router
Endpoints for managing the people receiving care
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, not_found, services
from api.schemas.care_recipient import (
    CareRecipientCreate,
    CareRecipientUpdate,
    CareRecipientResponse,
)


router = APIRouter(prefix="/care-recipients", tags=["care-recipients"])


@router.get("/", response_model=List[CareRecipientResponse])
async def list_care_recipients(db: Session = Depends(get_db)):
    """
    List care recipients, newest first
    """
    care_recipient_service = services.get_care_recipient_service()
    return await care_recipient_service.get_care_recipients(db=db)


@router.post("/", response_model=CareRecipientResponse, status_code=status.HTTP_201_CREATED)
async def create_care_recipient(
    recipient_data: CareRecipientCreate,
    db: Session = Depends(get_db)
):
    """
    Create a care recipient

    - **name**: Display name
    - **color**: Tab color (hex)
    """
    care_recipient_service = services.get_care_recipient_service()
    return await care_recipient_service.create_care_recipient(
        name=recipient_data.name,
        color=recipient_data.color,
        db=db
    )


@router.patch("/{care_recipient_id}", response_model=CareRecipientResponse)
async def update_care_recipient(
    care_recipient_id: int,
    updates: CareRecipientUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a care recipient
    """
    care_recipient_service = services.get_care_recipient_service()

    recipient = await care_recipient_service.update_care_recipient(
        care_recipient_id,
        updates.model_dump(exclude_unset=True),
        db=db
    )
    if not recipient:
        raise not_found(f"Care recipient {care_recipient_id} not found")
    return recipient


@router.delete("/{care_recipient_id}")
async def delete_care_recipient(
    care_recipient_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a care recipient and all associated data
    """
    care_recipient_service = services.get_care_recipient_service()

    deleted = await care_recipient_service.delete_care_recipient(care_recipient_id, db=db)
    if not deleted:
        raise not_found(f"Care recipient {care_recipient_id} not found")

    return {
        "success": True,
        "message": "Care recipient and all associated data deleted successfully"
    }
