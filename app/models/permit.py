# app/models/permit.py
import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Enum,
    JSON,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class PermitStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRING_SOON = "EXPIRING_SOON"
    EXPIRED = "EXPIRED"


class StudyPermit(Base):
    __tablename__ = "study_permits"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # One permit per user
    user_id = Column(
        Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False
    )

    # IRCC data
    permit_number = Column(String(50), nullable=True)
    issue_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=False, index=True)
    status = Column(Enum(PermitStatus), default=PermitStatus.ACTIVE, nullable=False)
    conditions = Column(JSON, default=list, nullable=False)

    # Checkpoint reminders - each flips false -> true exactly once
    reminder_sent_90 = Column(Boolean, default=False, nullable=False)
    reminder_sent_60 = Column(Boolean, default=False, nullable=False)
    reminder_sent_30 = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="study_permit")

    def __repr__(self):
        return f"<StudyPermit(user_id={self.user_id}, expiry_date={self.expiry_date}, status={self.status})>"
