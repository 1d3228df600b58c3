from .user import User
from .compliance import (
    ComplianceRule,
    ComplianceItem,
    ComplianceCategory,
    ComplianceStatus,
    DeadlineType,
)
from .permit import StudyPermit, PermitStatus
from .work_log import WorkLog
from .notification import Notification, NotificationType, NotificationChannel


__all__ = [
    "User",
    "ComplianceRule",
    "ComplianceItem",
    "ComplianceCategory",
    "ComplianceStatus",
    "DeadlineType",
    "StudyPermit",
    "PermitStatus",
    "WorkLog",
    "Notification",
    "NotificationType",
    "NotificationChannel",
]
