"""MaintenanceInterval value type."""

from datetime import date
from typing import Union

from .calculations import parse_date


class MaintenanceInterval:
    """
    Serviced at an odometer reading on a date; service again after
    interval_months or interval_distance, whichever comes first.
    """

    def __init__(
        self,
        last_service_date: Union[str, date],
        last_service_odometer: int,
        interval_months: int,
        interval_distance: int,
    ):
        self.last_service_date = parse_date(last_service_date)
        self.last_service_odometer = last_service_odometer
        self.interval_months = interval_months
        self.interval_distance = interval_distance

    def __eq__(self, other):
        if not isinstance(other, MaintenanceInterval):
            return NotImplemented
        return (
            self.last_service_date == other.last_service_date
            and self.last_service_odometer == other.last_service_odometer
            and self.interval_months == other.interval_months
            and self.interval_distance == other.interval_distance
        )

    def __repr__(self):
        return (
            f"MaintenanceInterval({self.last_service_date.isoformat()!r}, "
            f"{self.last_service_odometer}, {self.interval_months}, "
            f"{self.interval_distance})"
        )
