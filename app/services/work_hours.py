# app/services/work_hours.py - Weekly work hour tracking against the IRCC cap

import enum
import logging
from datetime import date, datetime
from dateutil.relativedelta import relativedelta
from typing import Dict, List, Any, Optional, Tuple
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.work_log import WorkLog
from app.models.notification import NotificationType
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class AlertLevel(str, enum.Enum):
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass
class WeekSummary:
    """Hours logged in one Monday-Sunday week"""
    week_start: date  # Monday
    week_end: date    # Sunday
    total_hours: float
    remaining: float
    is_over_limit: bool
    is_near_limit: bool
    logs: List[WorkLog] = field(default_factory=list)


@dataclass
class WorkHourAlert:
    level: AlertLevel
    message: str


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing `day` (a Sunday closes its week)"""
    if isinstance(day, datetime):
        day = day.date()
    monday = day - relativedelta(days=day.weekday())
    return monday, monday + relativedelta(days=6)


def _hours(value: float) -> str:
    # 21.0 -> "21", 20.5 -> "20.5"
    return f"{value:g}"


def sum_hours(logs: List[WorkLog]) -> float:
    """Sum of logged hours, rounded to the hundredth so 23.1 + 0.6 + 0.3 is 24"""
    return round(sum(log.hours_worked for log in logs), 2)


def classify_week_total(total_hours: float) -> Optional[WorkHourAlert]:
    """WARNING from the warning threshold up to the cap, CRITICAL above it"""
    cap = settings.work_hour_cap_per_week
    warning = settings.work_hour_warning_threshold

    if total_hours > cap:
        return WorkHourAlert(
            level=AlertLevel.CRITICAL,
            message=(
                f"You have exceeded the {_hours(cap)}-hour weekly work limit! "
                f"Current total: {_hours(total_hours)}h. "
                "This puts your study permit at risk."
            ),
        )

    if total_hours >= warning:
        return WorkHourAlert(
            level=AlertLevel.WARNING,
            message=(
                f"You are approaching the {_hours(cap)}-hour weekly limit. "
                f"Current total: {_hours(total_hours)}h. "
                f"Remaining: {_hours(round(cap - total_hours, 2))}h."
            ),
        )

    return None


class WorkHourService:
    """Work log aggregation for a single user"""

    def __init__(self, db: Session):
        self.db = db

    def _logs_between(self, user_id: int, start: date, end: date) -> List[WorkLog]:
        return (
            self.db.query(WorkLog)
            .filter(
                WorkLog.user_id == user_id,
                WorkLog.date >= start,
                WorkLog.date <= end,
            )
            .order_by(WorkLog.date.asc(), WorkLog.id.asc())
            .all()
        )

    def week_total(self, user_id: int, day: date) -> WeekSummary:
        """Totals for the week containing `day`. Read only."""
        week_start, week_end = week_bounds(day)
        logs = self._logs_between(user_id, week_start, week_end)
        total = sum_hours(logs)
        cap = settings.work_hour_cap_per_week

        return WeekSummary(
            week_start=week_start,
            week_end=week_end,
            total_hours=total,
            remaining=max(0, round(cap - total, 2)),
            is_over_limit=total > cap,
            is_near_limit=total >= settings.work_hour_warning_threshold,
            logs=logs,
        )

    def month_total(self, user_id: int, day: date) -> Dict[str, Any]:
        """Calendar month aggregate for the month containing `day`"""
        if isinstance(day, datetime):
            day = day.date()
        month_start = day.replace(day=1)
        month_end = month_start + relativedelta(months=1, days=-1)
        logs = self._logs_between(user_id, month_start, month_end)

        return {
            "total_hours": sum_hours(logs),
            "log_count": len(logs),
            "period": f"{month_start.isoformat()} to {month_end.isoformat()}",
        }

    def log_hours(
        self,
        user_id: int,
        day: date,
        hours_worked: float,
        employer: str,
        notes: Optional[str] = None,
    ) -> WorkLog:
        work_log = WorkLog(
            user_id=user_id,
            date=day,
            hours_worked=hours_worked,
            employer=employer,
            notes=notes,
        )
        self.db.add(work_log)
        self.db.commit()
        self.db.refresh(work_log)

        logger.info(f"Logged {hours_worked}h at {employer} on {day} for user {user_id}")
        return work_log

    def classify_after_log(
        self, user_id: int, entry_date: date
    ) -> Tuple[WeekSummary, Optional[WorkHourAlert]]:
        """
        Re-total the entry's week and raise an alert if needed.

        Called after the entry is committed. Over-cap weeks notify on every
        entry, not only on the crossing. A notification that cannot be
        saved is logged and the alert is still returned.
        """
        summary = self.week_total(user_id, entry_date)
        alert = classify_week_total(summary.total_hours)
        if alert is None:
            return summary, None

        cap = settings.work_hour_cap_per_week
        total = summary.total_hours
        if alert.level == AlertLevel.CRITICAL:
            notification_type = NotificationType.WORK_HOUR_LIMIT
            title = "Work Hour Limit Exceeded!"
            message = f"You have logged {_hours(total)} hours this week, exceeding the {_hours(cap)}-hour cap."
        else:
            notification_type = NotificationType.WORK_HOUR_WARNING
            title = "Approaching Work Hour Limit"
            message = f"You have logged {_hours(total)} hours this week. Only {_hours(round(cap - total, 2))}h remaining."

        try:
            NotificationService(self.db).notify(
                user_id=user_id,
                type=notification_type,
                title=title,
                message=message,
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to record work hour alert for user {user_id}: {e}")

        return summary, alert

    def history(self, user_id: int, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        query = self.db.query(WorkLog).filter(WorkLog.user_id == user_id)
        total = query.count()
        logs = (
            query.order_by(WorkLog.date.desc(), WorkLog.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return {
            "logs": logs,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": -(-total // limit),
            },
        }

    def delete_log(self, user_id: int, log_id: int) -> bool:
        work_log = (
            self.db.query(WorkLog)
            .filter(WorkLog.id == log_id, WorkLog.user_id == user_id)
            .first()
        )
        if not work_log:
            return False

        self.db.delete(work_log)
        self.db.commit()
        return True
