"""
Database Models
SQLAlchemy ORM models for CareTrack
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Index, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from database import Base


# ==================== ENUMS ====================

class CareRecipientStatus(str, PyEnum):
    """Lifecycle status of a care recipient"""
    ACTIVE = "active"
    INACTIVE = "inactive"


# ==================== MODELS ====================

class CareRecipient(Base):
    """Person receiving care; owns every tracked record"""
    __tablename__ = "care_recipients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    color = Column(String(20), nullable=False, default="#4F46E5")
    status = Column(String(20), nullable=False, default=CareRecipientStatus.ACTIVE.value)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="care_recipient", cascade="all, delete-orphan")
    medication_logs = relationship("MedicationLog", back_populates="care_recipient", cascade="all, delete-orphan")
    appointments = relationship("Appointment", cascade="all, delete-orphan")
    meals = relationship("Meal", cascade="all, delete-orphan")
    bowel_movements = relationship("BowelMovement", cascade="all, delete-orphan")
    urination_records = relationship("Urination", cascade="all, delete-orphan")
    sleep_records = relationship("Sleep", cascade="all, delete-orphan")
    blood_pressure_readings = relationship("BloodPressure", cascade="all, delete-orphan")
    glucose_readings = relationship("Glucose", cascade="all, delete-orphan")
    insulin_records = relationship("Insulin", cascade="all, delete-orphan")
    notes = relationship("Note", cascade="all, delete-orphan")


class Medication(Base):
    """Medication with inventory counters for reorder alerts"""
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)

    # Display
    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g., "10mg"
    instructions = Column(Text)
    icon = Column(String(50), default="pills")
    icon_color = Column(String(20), default="#4F46E5")
    prescription_number = Column(String(100))
    expiration_date = Column(Date)

    # Inventory
    current_quantity = Column(Integer, default=0)
    reorder_threshold = Column(Integer, default=5)
    days_to_reorder = Column(Integer, default=7)  # lead time, 1-30 days
    original_quantity = Column(Integer, default=0)
    refills_remaining = Column(Integer, default=0)
    last_refill_date = Column(Date)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    care_recipient = relationship("CareRecipient", back_populates="medications")
    schedules = relationship(
        "MedicationSchedule",
        back_populates="medication",
        cascade="all, delete-orphan",
        order_by="MedicationSchedule.time"
    )
    logs = relationship("MedicationLog", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medications_recipient_name", "care_recipient_id", "name"),
    )


class MedicationSchedule(Base):
    """One recurrence rule for a medication"""
    __tablename__ = "medication_schedules"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)

    time = Column(String(8), nullable=False)  # "08:00" or "08:00:00"
    days_of_week = Column(JSON, default=list)  # 0-6, Sunday=0
    specific_days = Column(JSON, default=list)  # ["2024-06-01", ...]
    as_needed = Column(Boolean, default=False)

    quantity = Column(String(100), nullable=False, default="1")  # "1 tablet"
    with_food = Column(Boolean, default=False)
    active = Column(Boolean, default=True)
    reminder_enabled = Column(Boolean, default=True)

    # Tapering: [{"startDate", "endDate", "quantity"}]
    is_tapering = Column(Boolean, default=False)
    tapering_schedule = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medication = relationship("Medication", back_populates="schedules")
    logs = relationship("MedicationLog", back_populates="schedule")


class MedicationLog(Base):
    """A dose marked taken (or skipped) at a point in time"""
    __tablename__ = "medication_logs"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)
    schedule_id = Column(Integer, ForeignKey("medication_schedules.id", ondelete="SET NULL"))
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)

    taken = Column(Boolean, nullable=False, default=True)
    taken_at = Column(DateTime, nullable=False, default=datetime.now)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medication = relationship("Medication", back_populates="logs")
    schedule = relationship("MedicationSchedule", back_populates="logs")
    care_recipient = relationship("CareRecipient", back_populates="medication_logs")

    __table_args__ = (
        Index("ix_medication_logs_recipient_taken", "care_recipient_id", "taken_at"),
    )


# ==================== CARE EVENTS ====================
# Flat per-event records. ``__event_time__`` names the column used for
# per-day filtering.

class Appointment(Base):
    """Doctor or care appointment"""
    __tablename__ = "appointments"
    __event_time__ = "date"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(8), nullable=False)
    location = Column(String(255))
    notes = Column(Text)
    reminder_enabled = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Meal(Base):
    """Meal consumed"""
    __tablename__ = "meals"
    __event_time__ = "consumed_at"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    type = Column(String(20), nullable=False)  # breakfast, lunch, dinner, snack
    food = Column(Text, nullable=False)
    notes = Column(Text)
    consumed_at = Column(DateTime, nullable=False, default=datetime.now)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BowelMovement(Base):
    """Bowel movement record"""
    __tablename__ = "bowel_movements"
    __event_time__ = "occurred_at"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    type = Column(String(50))
    notes = Column(Text)
    occurred_at = Column(DateTime, nullable=False, default=datetime.now)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Urination(Base):
    """Urination record"""
    __tablename__ = "urination"
    __event_time__ = "occurred_at"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    color = Column(String(50))
    frequency = Column(String(50))
    volume = Column(Integer)  # ml
    urgency = Column(String(50))
    notes = Column(Text)
    occurred_at = Column(DateTime, nullable=False, default=datetime.now)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Sleep(Base):
    """Sleep period; open-ended while ongoing"""
    __tablename__ = "sleep"
    __event_time__ = "start_time"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime)
    quality = Column(String(20))  # good, fair, poor
    interruptions = Column(Integer, default=0)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BloodPressure(Base):
    """Blood pressure reading"""
    __tablename__ = "blood_pressure"
    __event_time__ = "time_of_reading"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    systolic = Column(Integer, nullable=False)
    diastolic = Column(Integer, nullable=False)
    pulse = Column(Integer)
    oxygen_level = Column(Integer)  # SpO2 %
    position = Column(String(20))  # standing, sitting, lying
    notes = Column(Text)
    time_of_reading = Column(DateTime, nullable=False, default=datetime.now)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Glucose(Base):
    """Blood glucose reading"""
    __tablename__ = "glucose"
    __event_time__ = "time_of_reading"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    level = Column(Integer, nullable=False)  # mg/dL
    reading_type = Column(String(50), nullable=False)  # fasting, before meal, ...
    notes = Column(Text)
    time_of_reading = Column(DateTime, nullable=False, default=datetime.now)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Insulin(Base):
    """Insulin administration"""
    __tablename__ = "insulin"
    __event_time__ = "time_administered"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    units = Column(Integer, nullable=False)
    insulin_type = Column(String(50), nullable=False)
    site = Column(String(50))
    notes = Column(Text)
    time_administered = Column(DateTime, nullable=False, default=datetime.now)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Note(Base):
    """Free-form caregiver note"""
    __tablename__ = "notes"
    __event_time__ = "created_at"

    id = Column(Integer, primary_key=True, index=True)
    care_recipient_id = Column(Integer, ForeignKey("care_recipients.id"), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class InspirationMessage(Base):
    """Quote shown as the daily inspiration"""
    __tablename__ = "inspiration_messages"

    id = Column(Integer, primary_key=True, index=True)
    message = Column(Text, nullable=False)
    author = Column(String(255))
    active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
