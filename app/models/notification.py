# app/models/notification.py
import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Text,
    ForeignKey,
    Enum,
)
from sqlalchemy.orm import relationship
from app.core.clock import local_now
from app.core.database import Base


class NotificationType(str, enum.Enum):
    PERMIT_EXPIRY = "PERMIT_EXPIRY"
    WORK_HOUR_WARNING = "WORK_HOUR_WARNING"
    WORK_HOUR_LIMIT = "WORK_HOUR_LIMIT"
    COMPLIANCE_OVERDUE = "COMPLIANCE_OVERDUE"
    DOCUMENT_REMINDER = "DOCUMENT_REMINDER"
    GENERAL = "GENERAL"


class NotificationChannel(str, enum.Enum):
    IN_APP = "IN_APP"
    EMAIL = "EMAIL"


class Notification(Base):
    __tablename__ = "notifications"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    channel = Column(
        Enum(NotificationChannel), default=NotificationChannel.IN_APP, nullable=False
    )

    is_read = Column(Boolean, default=False, nullable=False, index=True)
    # Naive local time in settings.timezone
    sent_at = Column(DateTime, default=local_now, nullable=False)

    # Relationships
    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"
