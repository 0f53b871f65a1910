"""
Medication Log Schemas
Pydantic models for dose intake logs
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class MedicationLogCreate(BaseModel):
    """Schema for marking a dose"""
    medication_id: int
    care_recipient_id: Optional[int] = None
    schedule_id: Optional[int] = None
    taken: bool = True
    taken_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=1000)


class MedicationLogResponse(BaseModel):
    """Medication log response"""
    id: int
    medication_id: int
    schedule_id: Optional[int] = None
    care_recipient_id: int
    taken: bool
    taken_at: datetime
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicationLogList(BaseModel):
    """List of medication logs"""
    logs: List[MedicationLogResponse]
    total: int
