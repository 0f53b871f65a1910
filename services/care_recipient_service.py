"""
Care Recipient Service
Business logic for the people receiving care
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models


logger = logging.getLogger(__name__)


class CareRecipientService:
    """
    Service for care recipient operations
    """

    async def create_care_recipient(
        self,
        name: str,
        color: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.CareRecipient:
        """
        Create a care recipient

        Args:
            name: Display name
            color: Tab color (hex)
            db: Database session

        Returns:
            Created CareRecipient object
        """
        def _create(session: Session) -> models.CareRecipient:
            recipient = models.CareRecipient(name=name)
            if color:
                recipient.color = color

            session.add(recipient)
            session.commit()
            session.refresh(recipient)

            logger.info(f"Created care recipient {recipient.id} ({name})")
            return recipient

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_care_recipient(
        self,
        care_recipient_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.CareRecipient]:
        """Get care recipient by ID"""
        def _get(session: Session) -> Optional[models.CareRecipient]:
            return session.query(models.CareRecipient).filter(
                models.CareRecipient.id == care_recipient_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_care_recipients(
        self,
        db: Optional[Session] = None
    ) -> List[models.CareRecipient]:
        """List care recipients, newest first"""
        def _get(session: Session) -> List[models.CareRecipient]:
            return session.query(models.CareRecipient).order_by(
                models.CareRecipient.created_at.desc(),
                models.CareRecipient.id.desc()
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_care_recipient(
        self,
        care_recipient_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.CareRecipient]:
        """Update name, color or status"""
        def _update(session: Session) -> Optional[models.CareRecipient]:
            recipient = session.query(models.CareRecipient).filter(
                models.CareRecipient.id == care_recipient_id
            ).first()

            if not recipient:
                return None

            allowed_fields = {'name', 'color', 'status'}
            for field, value in updates.items():
                if field in allowed_fields and value is not None:
                    setattr(recipient, field, value)

            recipient.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(recipient)

            return recipient

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_care_recipient(
        self,
        care_recipient_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """
        Delete a care recipient and everything recorded for them

        Returns:
            False when the care recipient does not exist
        """
        def _delete(session: Session) -> bool:
            recipient = session.query(models.CareRecipient).filter(
                models.CareRecipient.id == care_recipient_id
            ).first()

            if not recipient:
                return False

            session.delete(recipient)
            session.commit()

            logger.info(f"Deleted care recipient {care_recipient_id} and associated records")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    def require_care_recipient(self, session: Session, care_recipient_id: int) -> models.CareRecipient:
        """Fetch a care recipient or raise ValueError"""
        recipient = session.query(models.CareRecipient).filter(
            models.CareRecipient.id == care_recipient_id
        ).first()
        if not recipient:
            raise ValueError(f"Care recipient {care_recipient_id} not found")
        return recipient


# Singleton instance
care_recipient_service = CareRecipientService()
