"""Schedule evaluation: one interval against the current odometer and date."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from .calculations import (
    calc_days_until,
    calc_due_date,
    calc_due_odometer,
    check_status,
    parse_date,
)
from .config import DuePolicy
from .interval import MaintenanceInterval
from .status import Status


@dataclass(frozen=True)
class EvaluationResult:
    """Calculated due information for a single interval."""

    next_due_date: date
    next_due_odometer: int
    days_until: int
    distance_until: int
    status: Status

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.WARNING)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nextDueDate": self.next_due_date.isoformat(),
            "nextDueOdometer": self.next_due_odometer,
            "daysUntil": self.days_until,
            "distanceUntil": self.distance_until,
            "status": self.status.label,
        }


def evaluate(
    last_service_date: Union[str, date],
    last_service_odometer: int,
    interval_months: int,
    interval_distance: int,
    current_odometer: int,
    now: Optional[Union[date, datetime]] = None,
    policy: Optional[DuePolicy] = None,
) -> EvaluationResult:
    """
    Predict the next service point for one interval and classify it.

    Logic:
    - Due date: last service date + interval months (calendar months)
    - Due odometer: last service odometer + interval distance
    - OVERDUE if either remaining value is negative
    - WARNING if under policy.warning_days or policy.warning_distance
    - OK otherwise

    Args:
        now: Evaluation time; defaults to the wall clock. Pass it explicitly
            for repeatable results.
    """
    if now is None:
        now = datetime.now()

    next_due_date = calc_due_date(parse_date(last_service_date), interval_months)
    next_due_odometer = calc_due_odometer(last_service_odometer, interval_distance)
    days_until = calc_days_until(next_due_date, now)
    distance_until = next_due_odometer - current_odometer

    return EvaluationResult(
        next_due_date=next_due_date,
        next_due_odometer=next_due_odometer,
        days_until=days_until,
        distance_until=distance_until,
        status=check_status(days_until, distance_until, policy),
    )


def evaluate_interval(
    interval: MaintenanceInterval,
    current_odometer: int,
    now: Optional[Union[date, datetime]] = None,
    policy: Optional[DuePolicy] = None,
) -> EvaluationResult:
    """Evaluate a MaintenanceInterval value."""
    return evaluate(
        interval.last_service_date,
        interval.last_service_odometer,
        interval.interval_months,
        interval.interval_distance,
        current_odometer,
        now=now,
        policy=policy,
    )
