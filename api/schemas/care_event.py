"""
Care Event Schemas
Pydantic models for appointments, meals, bodily functions, readings and notes
"""

from typing import Optional, Dict, Type
from datetime import datetime, date
from pydantic import BaseModel, Field


# ==================== REQUEST SCHEMAS ====================

class AppointmentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    date: date
    time: str = Field(..., pattern=r"^\d{1,2}:\d{2}(:\d{2})?$")
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    reminder_enabled: bool = True


class MealCreate(BaseModel):
    type: str = Field(..., pattern="^(breakfast|lunch|dinner|snack)$")
    food: str = Field(..., min_length=1)
    notes: Optional[str] = None
    consumed_at: Optional[datetime] = None


class BowelMovementCreate(BaseModel):
    type: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    occurred_at: Optional[datetime] = None


class UrinationCreate(BaseModel):
    color: Optional[str] = Field(None, max_length=50)
    frequency: Optional[str] = Field(None, max_length=50)
    volume: Optional[int] = Field(None, ge=0)
    urgency: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    occurred_at: Optional[datetime] = None


class SleepCreate(BaseModel):
    start_time: datetime
    end_time: Optional[datetime] = None
    quality: Optional[str] = Field(None, max_length=20)
    interruptions: int = Field(default=0, ge=0)
    notes: Optional[str] = None


class BloodPressureCreate(BaseModel):
    systolic: int = Field(..., gt=0, le=300)
    diastolic: int = Field(..., gt=0, le=200)
    pulse: Optional[int] = Field(None, gt=0, le=250)
    oxygen_level: Optional[int] = Field(None, ge=0, le=100)
    position: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    time_of_reading: Optional[datetime] = None


class GlucoseCreate(BaseModel):
    level: int = Field(..., gt=0)
    reading_type: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = None
    time_of_reading: Optional[datetime] = None


class InsulinCreate(BaseModel):
    units: int = Field(..., gt=0)
    insulin_type: str = Field(..., min_length=1, max_length=50)
    site: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    time_administered: Optional[datetime] = None


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


# Event kind -> create schema
EVENT_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "appointments": AppointmentCreate,
    "meals": MealCreate,
    "bowel-movements": BowelMovementCreate,
    "urination": UrinationCreate,
    "sleep": SleepCreate,
    "blood-pressure": BloodPressureCreate,
    "glucose": GlucoseCreate,
    "insulin": InsulinCreate,
    "notes": NoteCreate,
}
