# app/schemas/__init__.py
"""
Pydantic schemas for FastAPI request/response validation

This module contains all the Pydantic models used for:
- Request validation
- Response serialization
- API documentation
"""

# Compliance checklist schemas
from .compliance import (
    ComplianceRuleResponse,
    ComplianceItemResponse,
    ComplianceItemUpdate,
    ChecklistStats,
    ChecklistResponse,
    ChecklistInitializeResponse,
)

# Work log schemas
from .work_log import (
    WorkLogCreate,
    WorkLogResponse,
    WeekSummaryResponse,
    WorkHourAlertResponse,
    WorkLogCreateResponse,
    MonthSummary,
    WorkLogDashboardResponse,
    Pagination,
    WorkLogHistoryResponse,
)

# Study permit schemas
from .permit import (
    StudyPermitUpsert,
    StudyPermitResponse,
    StudyPermitUpsertResponse,
    StudyPermitGetResponse,
)

# Notification schemas
from .notification import (
    NotificationResponse,
    NotificationListResponse,
)

__all__ = [
    # Compliance
    "ComplianceRuleResponse",
    "ComplianceItemResponse",
    "ComplianceItemUpdate",
    "ChecklistStats",
    "ChecklistResponse",
    "ChecklistInitializeResponse",
    # Work log
    "WorkLogCreate",
    "WorkLogResponse",
    "WeekSummaryResponse",
    "WorkHourAlertResponse",
    "WorkLogCreateResponse",
    "MonthSummary",
    "WorkLogDashboardResponse",
    "Pagination",
    "WorkLogHistoryResponse",
    # Permit
    "StudyPermitUpsert",
    "StudyPermitResponse",
    "StudyPermitUpsertResponse",
    "StudyPermitGetResponse",
    # Notification
    "NotificationResponse",
    "NotificationListResponse",
]
