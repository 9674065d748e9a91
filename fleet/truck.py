"""Truck class - a fleet vehicle with its general interval and item schedules."""

from datetime import date
from typing import List, Optional, Union

from .aggregate import VehicleSnapshot
from .config import DEFAULT_POLICY
from .interval import MaintenanceInterval
from .schedule import ServiceSchedule

TRUCK_SIZES = ("Small", "Big")


class Truck:
    """A truck, the client it serves, and its maintenance intervals."""

    def __init__(
        self,
        id: str,
        plate_number: str,
        brand: str,
        model: str,
        year: int,
        size: str,
        client_id: str,
        tonnage: float = 0,
        current_odometer: int = 0,
        last_service_date: Optional[Union[str, date]] = None,
        last_service_odometer: Optional[int] = None,
        service_interval_km: Optional[int] = None,
        service_interval_months: Optional[int] = None,
        schedules: Optional[List[ServiceSchedule]] = None,
        allocation: Optional[str] = None,
        description: Optional[str] = None,
    ):
        self.id = id
        self.plate_number = plate_number
        self.brand = brand
        self.model = model
        self.year = year
        self.size = size
        self.client_id = client_id
        self.tonnage = tonnage or 0
        self.current_odometer = current_odometer or 0
        self.general_interval = MaintenanceInterval(
            # A truck that was never serviced starts counting from registration
            last_service_date or date.today(),
            last_service_odometer or 0,
            service_interval_months or DEFAULT_POLICY.default_interval_months,
            service_interval_km or DEFAULT_POLICY.default_interval_km,
        )
        self.schedules = schedules or []
        self.allocation = allocation
        self.description = description

    @property
    def name(self) -> str:
        """Human-readable truck name."""
        return f"{self.plate_number} ({self.brand} {self.model})"

    @property
    def last_service_date(self) -> date:
        return self.general_interval.last_service_date

    @property
    def last_service_odometer(self) -> int:
        return self.general_interval.last_service_odometer

    @property
    def service_interval_km(self) -> int:
        return self.general_interval.interval_distance

    @property
    def service_interval_months(self) -> int:
        return self.general_interval.interval_months

    def get_schedule(self, schedule_id: str) -> Optional[ServiceSchedule]:
        """Find a schedule by id."""
        for schedule in self.schedules:
            if schedule.id == schedule_id:
                return schedule
        return None

    def record_general_service(self, service_date: Union[str, date], odometer: int) -> None:
        """Restart the general interval and bring the odometer forward."""
        self.general_interval = MaintenanceInterval(
            service_date,
            odometer,
            self.service_interval_months,
            self.service_interval_km,
        )
        self.current_odometer = max(self.current_odometer, odometer)

    def snapshot(self) -> VehicleSnapshot:
        """Read-only view consumed by the aggregator."""
        return VehicleSnapshot(
            current_odometer=self.current_odometer,
            general_interval=self.general_interval,
            item_intervals=[(s.service_name, s.interval) for s in self.schedules],
        )
