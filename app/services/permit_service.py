# app/services/permit_service.py - Study permit upsert and status classification

import math
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.clock import start_of_day
from app.models.permit import StudyPermit, PermitStatus
from app.models.notification import NotificationType
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

EXPIRING_SOON_DAYS = 90


def days_until_expiry(expiry_date: date, now: datetime) -> int:
    """Whole days until the permit expires, rounded up; <= 0 once expired"""
    remaining = start_of_day(expiry_date) - now
    return math.ceil(remaining.total_seconds() / 86400)


def classify_permit(expiry_date: date, now: datetime) -> Tuple[PermitStatus, int]:
    days = days_until_expiry(expiry_date, now)
    if days <= 0:
        return PermitStatus.EXPIRED, days
    if days <= EXPIRING_SOON_DAYS:
        return PermitStatus.EXPIRING_SOON, days
    return PermitStatus.ACTIVE, days


class PermitService:
    def __init__(self, db: Session):
        self.db = db

    def get_permit(self, user_id: int) -> Optional[StudyPermit]:
        return self.db.query(StudyPermit).filter(StudyPermit.user_id == user_id).first()

    def upsert(
        self,
        user_id: int,
        expiry_date: date,
        now: datetime,
        permit_number: Optional[str] = None,
        issue_date: Optional[date] = None,
        conditions: Optional[List[str]] = None,
    ) -> Tuple[StudyPermit, int, PermitStatus]:
        """
        Create or update the user's permit and recompute its status.
        A None permit_number or issue_date keeps the stored value; conditions
        are always replaced (None clears them).

        Reminder flags are left as they are. An EXPIRING_SOON permit gets one
        immediate in-app notification, committed together with the permit.
        Existing checklist due dates are not recomputed.
        """
        status, days = classify_permit(expiry_date, now)

        permit = self.get_permit(user_id)
        if permit is None:
            permit = StudyPermit(user_id=user_id)
            self.db.add(permit)

        if permit_number is not None:
            permit.permit_number = permit_number
        if issue_date is not None:
            permit.issue_date = issue_date
        permit.expiry_date = expiry_date
        permit.conditions = list(conditions or [])
        permit.status = status

        if status == PermitStatus.EXPIRING_SOON:
            NotificationService(self.db).notify(
                user_id=user_id,
                type=NotificationType.PERMIT_EXPIRY,
                title="Study Permit Expiring Soon",
                message=(
                    f"Your study permit expires in {days} days "
                    f"({expiry_date.strftime('%B %d, %Y')}). "
                    "Begin your renewal process now."
                ),
                commit=False,
                sent_at=now,
            )

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save study permit for user {user_id}: {e}")
            raise

        self.db.refresh(permit)
        logger.info(f"Study permit saved for user {user_id}: {status.value}, {days} days left")
        return permit, days, status
