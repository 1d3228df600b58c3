"""Local wall-clock helpers.

All stored datetimes are naive and expressed in the deployment timezone
(settings.timezone), so "today" for a Winnipeg student is the Winnipeg
calendar day regardless of the server's own zone.
"""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from app.core.config import settings


def local_now() -> datetime:
    """Current local time in the deployment timezone, as a naive datetime"""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)
