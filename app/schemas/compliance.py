# app/schemas/compliance.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import List, Literal, Optional

from app.models.compliance import ComplianceCategory, ComplianceStatus, DeadlineType


class ComplianceRuleResponse(BaseModel):
    """Catalog rule as shown to students"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    category: ComplianceCategory
    deadline_type: DeadlineType
    deadline_days: Optional[int] = None
    priority: int
    help_url: Optional[str] = None


class ComplianceItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rule_id: str
    status: ComplianceStatus
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    document_id: Optional[str] = None
    rule: ComplianceRuleResponse


class ComplianceItemUpdate(BaseModel):
    """User-driven status change. OVERDUE is set only by the daily sweep."""

    status: Literal["PENDING", "IN_PROGRESS", "COMPLETED", "NOT_APPLICABLE"] = Field(
        ..., description="New status"
    )
    notes: Optional[str] = Field(None, max_length=2000)
    document_id: Optional[str] = Field(None, max_length=64)


class ChecklistStats(BaseModel):
    total: int
    completed: int
    pending: int
    overdue: int
    in_progress: int
    completion_rate: int


class ChecklistResponse(BaseModel):
    checklist: List[ComplianceItemResponse]
    stats: ChecklistStats


class ChecklistInitializeResponse(BaseModel):
    message: str
    count: int
