"""ServiceRecord and SparePart classes for maintenance records."""

import math
from datetime import date
from typing import List, Optional, Union

from .calculations import parse_date


class SparePart:
    """A part used during a service."""

    def __init__(
        self,
        id: str,
        name: str,
        part_number: str,
        price: float = 0,
        quantity: int = 1,
    ):
        self.id = id
        self.name = name
        self.part_number = part_number
        self.price = price or 0
        self.quantity = quantity if quantity is not None else 1

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class ServiceRecord:
    """A record of maintenance performed on a truck."""

    def __init__(
        self,
        id: str,
        truck_id: str,
        service_date: Union[str, date],
        odometer: int,
        service_types: List[str],
        description: str,
        mechanic: str,
        parts: Optional[List[SparePart]] = None,
        labor_cost: float = 0,
        total_cost: Optional[float] = None,
    ):
        self.id = id
        self.truck_id = truck_id
        # Kept as an ISO string; malformed dates raise ValueError here
        self.service_date = parse_date(service_date).isoformat()
        if (
            isinstance(odometer, bool)
            or not isinstance(odometer, (int, float))
            or not math.isfinite(odometer)
        ):
            raise ValueError(f"Invalid odometer reading: {odometer!r}")
        self.odometer = odometer
        self.service_types = service_types
        self.description = description
        self.mechanic = mechanic
        self.parts = parts or []
        self.labor_cost = labor_cost or 0
        if total_cost is None:
            total_cost = self.labor_cost + self.parts_cost
        self.total_cost = total_cost

    @property
    def parts_cost(self) -> float:
        return sum(p.subtotal for p in self.parts)
