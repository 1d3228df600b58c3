# app/services/due_dates.py - Due date policy for compliance rules

from datetime import date, datetime
from dateutil.relativedelta import relativedelta
from typing import Optional
import logging

from app.core.clock import start_of_day
from app.core.config import settings
from app.models.compliance import ComplianceRule, DeadlineType

logger = logging.getLogger(__name__)


def compute_due_date(
    rule: ComplianceRule, permit_expiry_date: Optional[date], now: datetime
) -> Optional[datetime]:
    """
    Due date for a compliance item created from `rule` at `now`.

    None means "no deadline": the item is tracked but never goes overdue.
    Uses calendar-day arithmetic, so leap years are counted exactly.
    """
    deadline_type = rule.deadline_type
    days = rule.deadline_days

    if deadline_type == DeadlineType.ONE_TIME:
        return None

    if deadline_type == DeadlineType.FIXED_DATE:
        if days is None:
            return None
        return now + relativedelta(days=days)

    if deadline_type == DeadlineType.RELATIVE_TO_PERMIT:
        if permit_expiry_date is None:
            logger.info(f"No permit on file - rule '{rule.id}' has no deadline")
            return None
        if days is None:
            return None
        return start_of_day(permit_expiry_date) - relativedelta(days=days)

    if deadline_type == DeadlineType.RECURRING:
        # Only the first instance; renewal after completion is not modelled
        return now + relativedelta(days=days or settings.recurring_default_days)

    logger.warning(f"Unknown deadline type {deadline_type!r} on rule '{rule.id}'")
    return None
