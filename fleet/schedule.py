"""ServiceSchedule class for named per-item intervals."""

from datetime import date
from typing import Union

from .interval import MaintenanceInterval


class ServiceSchedule:
    """A named maintenance item on a truck (e.g. 'Oil Change', 'Tire Change')."""

    def __init__(
        self,
        id: str,
        service_name: str,
        interval_km: int,
        interval_months: int,
        last_service_date: Union[str, date],
        last_service_odometer: int = 0,
    ):
        self.id = id
        self.service_name = service_name
        self.interval = MaintenanceInterval(
            last_service_date, last_service_odometer or 0, interval_months, interval_km
        )

    @property
    def interval_km(self) -> int:
        return self.interval.interval_distance

    @property
    def interval_months(self) -> int:
        return self.interval.interval_months

    @property
    def last_service_date(self) -> date:
        return self.interval.last_service_date

    @property
    def last_service_odometer(self) -> int:
        return self.interval.last_service_odometer

    def reset(self, service_date: Union[str, date], odometer: int) -> None:
        """Restart the interval from a new service."""
        self.interval = MaintenanceInterval(
            service_date, odometer, self.interval_months, self.interval_km
        )
