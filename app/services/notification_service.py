# app/services/notification_service.py
from sqlalchemy.orm import Session
from app.core.clock import local_now
from app.models.notification import Notification, NotificationType, NotificationChannel
from datetime import datetime
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    """In-app notification records for a user"""

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        channel: NotificationChannel = NotificationChannel.IN_APP,
        commit: bool = True,
        sent_at: Optional[datetime] = None,
    ) -> Notification:
        """
        Record a notification. With commit=False the record joins the
        caller's transaction. `sent_at` defaults to the local clock.
        """
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            channel=channel,
            is_read=False,
            sent_at=sent_at or local_now(),
        )
        self.db.add(notification)

        if commit:
            self.db.commit()
            self.db.refresh(notification)
            logger.info(f"Notification {type.value} created for user {user_id}")

        return notification

    def list_for_user(
        self, user_id: int, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read == False)
        return (
            query.order_by(Notification.sent_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    def unread_count(self, user_id: int) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read == False)
            .count()
        )

    def mark_read(self, user_id: int, notification_id: int) -> Optional[Notification]:
        """Mark one of the user's notifications read. None if not found."""
        notification = (
            self.db.query(Notification)
            .filter(
                Notification.id == notification_id, Notification.user_id == user_id
            )
            .first()
        )
        if not notification:
            return None

        notification.is_read = True
        self.db.commit()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read == False)
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated
