"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict

from api.schemas.schedule import ScheduleResponse


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(..., min_length=1, max_length=100)


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""
    care_recipient_id: int
    instructions: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)
    icon_color: Optional[str] = Field(None, max_length=20)
    prescription_number: Optional[str] = Field(None, max_length=100)
    expiration_date: Optional[date] = None
    current_quantity: Optional[int] = Field(None, ge=0)
    reorder_threshold: Optional[int] = Field(None, ge=0)
    days_to_reorder: Optional[int] = None
    original_quantity: Optional[int] = Field(None, ge=0)
    refills_remaining: Optional[int] = Field(None, ge=0)


class MedicationUpdate(BaseModel):
    """Schema for updating display fields of a medication"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dosage: Optional[str] = Field(None, min_length=1, max_length=100)
    instructions: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)
    icon_color: Optional[str] = Field(None, max_length=20)
    prescription_number: Optional[str] = Field(None, max_length=100)
    expiration_date: Optional[date] = None


class InventoryUpdate(BaseModel):
    """Schema for updating inventory counters; only sent fields change"""
    current_quantity: Optional[int] = Field(None, ge=0)
    reorder_threshold: Optional[int] = Field(None, ge=0)
    days_to_reorder: Optional[int] = Field(None, description="Clamped to 1-30")
    original_quantity: Optional[int] = Field(None, ge=0)
    refills_remaining: Optional[int] = Field(None, ge=0)
    last_refill_date: Optional[date] = None


class RefillRequest(BaseModel):
    """Schema for recording a refill"""
    refill_amount: int = Field(..., gt=0)
    refill_date: Optional[date] = None


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Medication response"""
    id: int
    care_recipient_id: int
    instructions: Optional[str] = None
    icon: Optional[str] = None
    icon_color: Optional[str] = None
    prescription_number: Optional[str] = None
    expiration_date: Optional[date] = None
    current_quantity: Optional[int] = None
    reorder_threshold: Optional[int] = None
    days_to_reorder: Optional[int] = None
    original_quantity: Optional[int] = None
    refills_remaining: Optional[int] = None
    last_refill_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicationWithSchedules(MedicationResponse):
    """Medication with its schedules"""
    schedules: List[ScheduleResponse] = []


class ReorderForecastResponse(BaseModel):
    """Why a medication was flagged"""
    needs_reorder: bool
    reason: str
    estimated_daily_usage: float = 0.0
    days_until_threshold: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ReorderAlert(BaseModel):
    """Medication that needs reordering"""
    medication: MedicationResponse
    forecast: ReorderForecastResponse


class ReorderAlertList(BaseModel):
    """Reorder alerts for a care recipient"""
    alerts: List[ReorderAlert]
    total: int
