"""Fold a truck's general and per-item intervals into one worst-case view."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import DuePolicy
from .evaluation import evaluate_interval
from .interval import MaintenanceInterval
from .status import Status, worst_status

GENERAL_SERVICE_LABEL = "General Service"


@dataclass(frozen=True)
class VehicleSnapshot:
    """Read-only projection of a truck used for evaluation."""

    current_odometer: int
    general_interval: MaintenanceInterval
    item_intervals: List[Tuple[str, MaintenanceInterval]] = field(
        default_factory=list
    )


@dataclass(frozen=True)
class AggregatedResult:
    """Worst status plus the nearest due point across all of a truck's intervals."""

    status: Status
    items_due: List[str]
    nearest_distance: int
    nearest_date: date

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.WARNING)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.label,
            "itemsDue": list(self.items_due),
            "nearestDistance": self.nearest_distance,
            "nearestDate": self.nearest_date.isoformat(),
        }


def general_label(status: Status) -> str:
    """Label for a general interval that is not OK."""
    suffix = "Overdue" if status == Status.OVERDUE else "Due Soon"
    return f"{GENERAL_SERVICE_LABEL} ({suffix})"


def aggregate(
    snapshot: VehicleSnapshot,
    now: Optional[Union[date, datetime]] = None,
    policy: Optional[DuePolicy] = None,
) -> AggregatedResult:
    """
    Evaluate every interval of a truck and merge the results.

    - Status: most urgent across general + items (OVERDUE > WARNING > OK)
    - items_due: general label first, then item names in stored order
    - nearest_distance / nearest_date: minimum across all intervals,
      whatever their status

    The general interval is mandatory, so the nearest values are always
    taken from at least one interval.
    """
    if now is None:
        now = datetime.now()

    status = Status.OK
    items_due: List[str] = []
    nearest_distance = float("inf")
    nearest_date = date.max

    general = evaluate_interval(
        snapshot.general_interval, snapshot.current_odometer, now, policy
    )
    if general.is_due:
        items_due.append(general_label(general.status))
        status = worst_status(status, general.status)
    nearest_distance = min(nearest_distance, general.distance_until)
    nearest_date = min(nearest_date, general.next_due_date)

    for name, interval in snapshot.item_intervals:
        result = evaluate_interval(interval, snapshot.current_odometer, now, policy)
        if result.is_due:
            items_due.append(name)
            status = worst_status(status, result.status)
        nearest_distance = min(nearest_distance, result.distance_until)
        nearest_date = min(nearest_date, result.next_due_date)

    return AggregatedResult(
        status=status,
        items_due=items_due,
        nearest_distance=nearest_distance,
        nearest_date=nearest_date,
    )
