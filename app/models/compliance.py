# app/models/compliance.py
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
    UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class ComplianceCategory(str, enum.Enum):
    STUDY_PERMIT = "STUDY_PERMIT"
    WORK_AUTHORIZATION = "WORK_AUTHORIZATION"
    ENROLLMENT = "ENROLLMENT"
    HEALTH_INSURANCE = "HEALTH_INSURANCE"
    TAXES = "TAXES"
    HOUSING = "HOUSING"
    REPORTING = "REPORTING"


class DeadlineType(str, enum.Enum):
    ONE_TIME = "ONE_TIME"
    FIXED_DATE = "FIXED_DATE"
    RELATIVE_TO_PERMIT = "RELATIVE_TO_PERMIT"
    RECURRING = "RECURRING"


class ComplianceStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"
    NOT_APPLICABLE = "NOT_APPLICABLE"


# Statuses the daily sweep is allowed to move to OVERDUE
OPEN_STATUSES = (ComplianceStatus.PENDING, ComplianceStatus.IN_PROGRESS)


class ComplianceRule(Base):
    __tablename__ = "compliance_rules"

    # Slug id, stable across reseeds
    id = Column(String(50), primary_key=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Enum(ComplianceCategory), nullable=False)

    # Deadline policy
    deadline_type = Column(Enum(DeadlineType), nullable=False)
    deadline_days = Column(
        Integer, nullable=True, comment="Meaning depends on deadline_type"
    )

    priority = Column(Integer, default=5, nullable=False)  # higher = more urgent
    is_active = Column(Boolean, default=True, nullable=False)
    help_url = Column(String(500), nullable=True)

    # System
    catalog_version = Column(String(20), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ComplianceRule(id='{self.id}', type={self.deadline_type}, days={self.deadline_days})>"


class ComplianceItem(Base):
    __tablename__ = "compliance_items"
    __table_args__ = (
        UniqueConstraint("user_id", "rule_id", name="uq_compliance_item_user_rule"),
    )

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rule_id = Column(String(50), ForeignKey("compliance_rules.id"), nullable=False)

    status = Column(
        Enum(ComplianceStatus), default=ComplianceStatus.PENDING, nullable=False
    )
    # Computed once at checklist initialization, never recomputed
    due_date = Column(DateTime, nullable=True, index=True)
    completed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    # Opaque reference into the document store
    document_id = Column(String(64), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    rule = relationship("ComplianceRule")
    user = relationship("User", back_populates="compliance_items")

    def __repr__(self):
        return f"<ComplianceItem(id={self.id}, user_id={self.user_id}, rule='{self.rule_id}', status={self.status})>"
