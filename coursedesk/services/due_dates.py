"""
Due-date proximity rules shared by course cards, the assignments table and
the dashboard stats.

Both timestamps are truncated to calendar days in the local zone before they
are compared, so an assignment due at exactly midnight today is "today" and
never "overdue". Nothing here reads the clock: callers pass ``now``.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum

from coursedesk.core.config import UPCOMING_WINDOW_DAYS


class Proximity(str, Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    THIS_WEEK = "this-week"
    FUTURE = "future"


@dataclass(frozen=True)
class Classification:
    is_overdue: bool
    proximity: Proximity


def local_day(value: date | datetime, tz: tzinfo | None = None) -> date:
    """
    Calendar day of ``value`` in the local zone.

    - aware datetime -> converted to ``tz`` (system local zone when None)
    - naive datetime -> already local wall-clock time
    - date -> itself
    """
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(tz).date()


def days_until(due_date: date | datetime, now: date | datetime, tz: tzinfo | None = None) -> int:
    return (local_day(due_date, tz) - local_day(now, tz)).days


def classify(due_date: date | datetime, now: date | datetime, tz: tzinfo | None = None) -> Classification:
    diff_days = days_until(due_date, now, tz)

    if diff_days < 0:
        return Classification(is_overdue=True, proximity=Proximity.OVERDUE)
    if diff_days == 0:
        return Classification(is_overdue=False, proximity=Proximity.TODAY)
    if diff_days <= UPCOMING_WINDOW_DAYS:
        return Classification(is_overdue=False, proximity=Proximity.THIS_WEEK)
    return Classification(is_overdue=False, proximity=Proximity.FUTURE)


def format_due_date(due_date: date | datetime, now: date | datetime, tz: tzinfo | None = None) -> str:
    due_day = local_day(due_date, tz)
    today = local_day(now, tz)

    if due_day < today:
        return "Overdue"
    if due_day == today:
        return "Today"
    if due_day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{due_day:%A, %B} {due_day.day}"
