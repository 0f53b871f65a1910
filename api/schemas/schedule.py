"""
Schedule Schemas
Pydantic models for medication schedule requests and responses
"""

from typing import Optional, List, Any
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict


class TaperingStepSchema(BaseModel):
    """Dose override for an inclusive date range"""
    startDate: date
    endDate: date
    quantity: str = Field(..., min_length=1)


class ScheduleCreate(BaseModel):
    """Schema for creating a medication schedule"""
    medication_id: int
    time: str = Field(..., pattern=r"^\d{1,2}:\d{2}(:\d{2})?$", examples=["08:00"])
    days_of_week: List[int] = Field(default_factory=list, description="0=Sunday .. 6=Saturday")
    specific_days: List[date] = Field(default_factory=list)
    as_needed: bool = False
    quantity: str = Field(default="1", max_length=100)
    with_food: bool = False
    active: bool = True
    reminder_enabled: bool = True
    is_tapering: bool = False
    tapering_schedule: List[TaperingStepSchema] = Field(default_factory=list)


class ScheduleUpdate(BaseModel):
    """Schema for updating a medication schedule"""
    time: Optional[str] = Field(None, pattern=r"^\d{1,2}:\d{2}(:\d{2})?$")
    days_of_week: Optional[List[int]] = None
    specific_days: Optional[List[date]] = None
    as_needed: Optional[bool] = None
    quantity: Optional[str] = Field(None, max_length=100)
    with_food: Optional[bool] = None
    active: Optional[bool] = None
    reminder_enabled: Optional[bool] = None
    is_tapering: Optional[bool] = None
    tapering_schedule: Optional[List[TaperingStepSchema]] = None


class ScheduleResponse(BaseModel):
    """Medication schedule response"""
    id: int
    medication_id: int
    time: str
    days_of_week: Optional[Any] = None
    specific_days: Optional[Any] = None
    as_needed: bool = False
    quantity: str = "1"
    with_food: bool = False
    active: bool = True
    reminder_enabled: bool = True
    is_tapering: bool = False
    tapering_schedule: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
