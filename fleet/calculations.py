"""Helper functions for service due calculations."""

import math
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .config import DEFAULT_POLICY, DuePolicy
from .status import Status

SECONDS_PER_DAY = 24 * 60 * 60


def parse_date(value: Union[str, date]) -> date:
    """Accept an ISO 'YYYY-MM-DD' string or a date (datetimes are truncated)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def calc_due_date(last_date: date, interval_months: int) -> date:
    """
    Calculate next due date: last + interval calendar months.

    The day of month is kept where possible and clamped to the last day of
    the resulting month otherwise (Jan 31 + 1 month = Feb 28/29).
    """
    return last_date + relativedelta(months=int(interval_months))


def calc_due_odometer(last_odometer: int, interval_distance: int) -> int:
    """Calculate next due odometer reading: last + interval."""
    return last_odometer + interval_distance


def calc_days_until(due_date: date, now: Union[date, datetime]) -> int:
    """
    Whole days from now until midnight of due_date, rounded up.

    A due date a few hours ahead counts as 1 day; any time past it
    gives zero or less.
    """
    if not isinstance(now, datetime):
        now = datetime.combine(now, time())
    due = datetime.combine(due_date, time(), tzinfo=now.tzinfo)
    return math.ceil((due - now).total_seconds() / SECONDS_PER_DAY)


def check_status(
    days_until: int, distance_until: int, policy: Optional[DuePolicy] = None
) -> Status:
    """Determine status from remaining days and distance, whichever is worse."""
    policy = policy or DEFAULT_POLICY
    if days_until < 0 or distance_until < 0:
        return Status.OVERDUE
    if days_until < policy.warning_days or distance_until < policy.warning_distance:
        return Status.WARNING
    return Status.OK
