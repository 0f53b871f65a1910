"""
Medication Service
Business logic for medications and their inventory
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, date
from sqlalchemy.orm import Session, selectinload

from config import CareConfig
from database import get_db_context
import models
from services.care_recipient_service import care_recipient_service
from tools.reorder_forecast import ReorderForecast, reorder_forecaster


logger = logging.getLogger(__name__)


INVENTORY_FIELDS = {
    'current_quantity', 'reorder_threshold', 'days_to_reorder',
    'original_quantity', 'refills_remaining', 'last_refill_date'
}


def clamp_days_to_reorder(days: int) -> int:
    """Keep the reorder lead time within the supported range"""
    return max(CareConfig.MIN_DAYS_TO_REORDER, min(CareConfig.MAX_DAYS_TO_REORDER, days))


class MedicationService:
    """
    Service for medication-related operations
    """

    async def create_medication(
        self,
        care_recipient_id: int,
        name: str,
        dosage: str,
        db: Optional[Session] = None,
        **fields: Any
    ) -> models.Medication:
        """
        Add a new medication for a care recipient

        Args:
            care_recipient_id: Care recipient ID
            name: Medication name
            dosage: Dosage (e.g., "10mg")
            db: Database session
            **fields: Optional display and inventory attributes

        Returns:
            Created Medication object
        """
        def _add(session: Session) -> models.Medication:
            care_recipient_service.require_care_recipient(session, care_recipient_id)

            values = {k: v for k, v in fields.items() if v is not None and hasattr(models.Medication, k)}
            if 'days_to_reorder' in values:
                values['days_to_reorder'] = clamp_days_to_reorder(values['days_to_reorder'])

            medication = models.Medication(
                care_recipient_id=care_recipient_id,
                name=name,
                dosage=dosage,
                **values
            )

            session.add(medication)
            session.commit()
            session.refresh(medication)

            logger.info(f"Added medication {name} for care recipient {care_recipient_id}")
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Get medication by ID"""
        def _get(session: Session) -> Optional[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_care_recipient_medications(
        self,
        care_recipient_id: int,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Get all medications for a care recipient with their schedules, by name"""
        def _get(session: Session) -> List[models.Medication]:
            return session.query(models.Medication).options(
                selectinload(models.Medication.schedules)
            ).filter(
                models.Medication.care_recipient_id == care_recipient_id
            ).order_by(models.Medication.name).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_medication(
        self,
        medication_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Update display information"""
        def _update(session: Session) -> Optional[models.Medication]:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                return None

            allowed_fields = {
                'name', 'dosage', 'instructions', 'icon', 'icon_color',
                'prescription_number', 'expiration_date'
            }

            for field, value in updates.items():
                if field in allowed_fields and hasattr(medication, field):
                    setattr(medication, field, value)

            medication.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(medication)

            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_medication(
        self,
        medication_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """Delete a medication with its schedules and logs"""
        def _delete(session: Session) -> bool:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                return False

            session.delete(medication)
            session.commit()

            logger.info(f"Deleted medication {medication_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    # ==================== INVENTORY ====================

    async def update_inventory(
        self,
        medication_id: int,
        inventory: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """
        Set only the provided inventory fields

        Args:
            medication_id: Medication ID
            inventory: Subset of the inventory counters
            db: Database session

        Returns:
            Updated Medication, or None when not found
        """
        def _update(session: Session) -> Optional[models.Medication]:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                return None

            for field, value in inventory.items():
                if field not in INVENTORY_FIELDS:
                    continue
                if field == 'days_to_reorder' and value is not None:
                    value = clamp_days_to_reorder(value)
                setattr(medication, field, value)

            medication.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(medication)

            logger.info(f"Updated inventory for medication {medication_id}: {sorted(inventory)}")
            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def refill_medication(
        self,
        medication_id: int,
        refill_amount: int,
        refill_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Record a refill

        Adds the refill amount to the current quantity, uses up one refill
        and stamps the refill date.

        Raises:
            ValueError: If the medication does not exist
        """
        def _refill(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                raise ValueError(f"Medication {medication_id} not found")

            medication.current_quantity = (medication.current_quantity or 0) + refill_amount
            medication.refills_remaining = max(0, (medication.refills_remaining or 0) - 1)
            medication.last_refill_date = refill_date or date.today()
            medication.updated_at = datetime.utcnow()

            session.commit()
            session.refresh(medication)

            logger.info(
                f"Refilled medication {medication_id} with {refill_amount}; "
                f"now {medication.current_quantity}, {medication.refills_remaining} refills left"
            )
            return medication

        if db:
            return _refill(db)

        with get_db_context() as session:
            return _refill(session)

    async def get_reorder_alerts(
        self,
        care_recipient_id: int,
        db: Optional[Session] = None
    ) -> List[Tuple[models.Medication, ReorderForecast]]:
        """
        Medications that need reordering, by name, with the forecast behind each flag
        """
        def _alerts(session: Session) -> List[Tuple[models.Medication, ReorderForecast]]:
            medications = session.query(models.Medication).options(
                selectinload(models.Medication.schedules)
            ).filter(
                models.Medication.care_recipient_id == care_recipient_id
            ).order_by(models.Medication.name).all()

            alerts = []
            for medication in medications:
                result = reorder_forecaster.forecast(medication, medication.schedules)
                if result.needs_reorder:
                    alerts.append((medication, result))

            logger.info(
                f"{len(alerts)} of {len(medications)} medications need reorder "
                f"for care recipient {care_recipient_id}"
            )
            return alerts

        if db:
            return _alerts(db)

        with get_db_context() as session:
            return _alerts(session)


# Singleton instance
medication_service = MedicationService()
