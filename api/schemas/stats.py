"""
Stats Schemas
Pydantic models for daily stats, upcoming events and inspiration
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict


class MedicationStats(BaseModel):
    """Medication completion for a day"""
    completed: int
    total: int
    progress: int
    completed_medication_ids: List[int] = []
    logs: List[Dict[str, Any]] = []


class MealStats(BaseModel):
    """Meals recorded for a day"""
    completed: int
    total: int
    progress: int
    logs: List[Dict[str, Any]] = []


class SleepSummary(BaseModel):
    """Latest sleep of the day"""
    duration: str
    quality: str = ""


class DateStatsResponse(BaseModel):
    """Everything recorded for a care recipient on one day"""
    date: str
    medications: MedicationStats
    meals: MealStats
    bowel_movements: List[Dict[str, Any]] = []
    urination: List[Dict[str, Any]] = []
    sleep_records: List[Dict[str, Any]] = []
    blood_pressure: List[Dict[str, Any]] = []
    glucose: List[Dict[str, Any]] = []
    insulin: List[Dict[str, Any]] = []
    notes: List[Dict[str, Any]] = []
    sleep: SleepSummary


class UpcomingEvent(BaseModel):
    """Medication dose or appointment in the upcoming feed"""
    id: str
    type: str
    title: str
    date: str
    time: str
    details: str = ""
    notes: str = ""
    quantity: Optional[str] = None
    reminder: bool = True
    source: str
    can_edit: bool = False


class InspirationResponse(BaseModel):
    """Daily inspiration"""
    message: str
    author: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
