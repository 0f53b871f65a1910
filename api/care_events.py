"""
Care Events API Router
Generic endpoints for appointments, meals, bodily functions, readings and notes
"""

from datetime import date
from typing import Any, Dict, List, Optional, Type
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from api.deps import get_clock, get_db, not_found, services, value_error_response
from api.schemas.care_event import EVENT_SCHEMAS
from services.care_event_service import serialize
from tools.clock import Clock


router = APIRouter(prefix="/care-events", tags=["care-events"])


def get_event_schema(kind: str) -> Type[BaseModel]:
    """Create schema for a kind; 404 for unknown kinds"""
    schema = EVENT_SCHEMAS.get(kind)
    if schema is None:
        raise not_found(f"Unknown care event kind: {kind}")
    return schema


def validate_payload(schema: Type[BaseModel], payload: Dict[str, Any]) -> BaseModel:
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False, include_input=False)
        )


@router.get("/{kind}", response_model=List[Dict[str, Any]])
async def list_care_events(
    kind: str,
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    day: Optional[date] = Query(None, alias="date", description="Only records for this day"),
    db: Session = Depends(get_db)
):
    """
    List a care recipient's records of one kind

    Kinds: appointments, meals, bowel-movements, urination, sleep,
    blood-pressure, glucose, insulin, notes
    """
    get_event_schema(kind)
    care_event_service = services.get_care_event_service()

    records = await care_event_service.list_events(kind, care_recipient_id, day=day, db=db)
    return [serialize(record) for record in records]


@router.post("/{kind}", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_care_event(
    kind: str,
    care_recipient_id: int = Query(..., description="Care recipient ID"),
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock)
):
    """
    Create a record of one kind for a care recipient

    The record's timestamp defaults to now when not sent.
    """
    schema = get_event_schema(kind)
    data = validate_payload(schema, payload).model_dump(exclude_none=True)
    care_event_service = services.get_care_event_service()

    try:
        record = await care_event_service.create_event(
            kind, care_recipient_id, data, now=clock.now(), db=db
        )
    except ValueError as e:
        raise value_error_response(e)
    return serialize(record)


@router.patch("/{kind}/{event_id}", response_model=Dict[str, Any])
async def update_care_event(
    kind: str,
    event_id: int,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db)
):
    """
    Update a record; only the fields sent are changed
    """
    schema = get_event_schema(kind)
    care_event_service = services.get_care_event_service()

    record = await care_event_service.get_event(kind, event_id, db=db)
    if not record:
        raise not_found(f"{kind} record {event_id} not found")

    # Validate the merged record so partial updates obey the same rules as creates
    merged = validate_payload(schema, {**serialize(record), **payload})
    updates = {field: getattr(merged, field) for field in payload if field in schema.model_fields}

    record = await care_event_service.update_event(kind, event_id, updates, db=db)
    return serialize(record)


@router.delete("/{kind}/{event_id}")
async def delete_care_event(
    kind: str,
    event_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a record
    """
    get_event_schema(kind)
    care_event_service = services.get_care_event_service()

    deleted = await care_event_service.delete_event(kind, event_id, db=db)
    if not deleted:
        raise not_found(f"{kind} record {event_id} not found")
    return {"success": True}
