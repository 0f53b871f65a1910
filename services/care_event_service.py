"""
Care Event Service
Generic CRUD over the flat per-event records (meals, sleep, readings, ...)
"""

import logging
from typing import Dict, List, Optional, Any, Type
from datetime import datetime, date
from sqlalchemy import DateTime
from sqlalchemy.orm import Session

from database import Base, get_db_context
import models
from services.care_recipient_service import care_recipient_service
from tools.clock import day_bounds


logger = logging.getLogger(__name__)


# URL kind -> model
EVENT_MODELS: Dict[str, Type[Base]] = {
    "appointments": models.Appointment,
    "meals": models.Meal,
    "bowel-movements": models.BowelMovement,
    "urination": models.Urination,
    "sleep": models.Sleep,
    "blood-pressure": models.BloodPressure,
    "glucose": models.Glucose,
    "insulin": models.Insulin,
    "notes": models.Note,
}

PROTECTED_FIELDS = {"id", "care_recipient_id", "updated_at"}


def get_event_model(kind: str) -> Type[Base]:
    model = EVENT_MODELS.get(kind)
    if model is None:
        raise ValueError(f"Unknown care event kind: {kind}")
    return model


def serialize(row: Base) -> Dict[str, Any]:
    """Column values of a row as a plain dict"""
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


def event_time_column(model: Type[Base]):
    return getattr(model, model.__event_time__)


def _is_datetime_column(model: Type[Base]) -> bool:
    return isinstance(model.__table__.c[model.__event_time__].type, DateTime)


def filter_to_day(query, model: Type[Base], day: date):
    """Restrict a query to records falling on one calendar day"""
    column = event_time_column(model)
    if _is_datetime_column(model):
        start, end = day_bounds(day)
        return query.filter(column >= start, column < end)
    return query.filter(column == day)


def order_events(query, model: Type[Base]):
    """Timestamped records newest first; dated records (appointments) soonest first"""
    column = event_time_column(model)
    if _is_datetime_column(model):
        return query.order_by(column.desc(), model.id.desc())
    if hasattr(model, "time"):
        return query.order_by(column.asc(), model.time.asc())
    return query.order_by(column.asc())


class CareEventService:
    """
    Service for appointments, meals, bodily functions, readings and notes
    """

    async def create_event(
        self,
        kind: str,
        care_recipient_id: int,
        data: Dict[str, Any],
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Base:
        """
        Create a care event record

        Args:
            kind: Event kind (see EVENT_MODELS)
            care_recipient_id: Care recipient ID
            data: Column values
            now: Timestamp used when the record's event time is missing
            db: Database session

        Returns:
            Created row
        """
        model = get_event_model(kind)

        def _create(session: Session):
            care_recipient_service.require_care_recipient(session, care_recipient_id)

            values = {
                k: v for k, v in data.items()
                if k not in PROTECTED_FIELDS and k in model.__table__.c and v is not None
            }
            if now is not None and _is_datetime_column(model):
                values.setdefault(model.__event_time__, now)
            record = model(care_recipient_id=care_recipient_id, **values)

            session.add(record)
            session.commit()
            session.refresh(record)

            logger.info(f"Created {kind} record {record.id} for care recipient {care_recipient_id}")
            return record

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_event(
        self,
        kind: str,
        event_id: int,
        db: Optional[Session] = None
    ):
        """Get one record by ID"""
        model = get_event_model(kind)

        def _get(session: Session):
            return session.query(model).filter(model.id == event_id).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def list_events(
        self,
        kind: str,
        care_recipient_id: int,
        day: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[Any]:
        """List a care recipient's records, optionally for one day only"""
        model = get_event_model(kind)

        def _list(session: Session) -> List[Any]:
            query = session.query(model).filter(model.care_recipient_id == care_recipient_id)
            if day is not None:
                query = filter_to_day(query, model, day)
            return order_events(query, model).all()

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def update_event(
        self,
        kind: str,
        event_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ):
        """Update a record; returns None when not found"""
        model = get_event_model(kind)

        def _update(session: Session):
            record = session.query(model).filter(model.id == event_id).first()
            if not record:
                return None

            for field, value in updates.items():
                if field in PROTECTED_FIELDS or field not in model.__table__.c:
                    continue
                setattr(record, field, value)

            record.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(record)

            return record

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_event(
        self,
        kind: str,
        event_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """Delete a record; returns False when not found"""
        model = get_event_model(kind)

        def _delete(session: Session) -> bool:
            record = session.query(model).filter(model.id == event_id).first()
            if not record:
                return False

            session.delete(record)
            session.commit()

            logger.info(f"Deleted {kind} record {event_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
care_event_service = CareEventService()
