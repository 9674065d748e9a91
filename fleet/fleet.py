"""Fleet class - the aggregate root for clients, trucks and service records."""

import logging
import math
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple, Union

from .aggregate import GENERAL_SERVICE_LABEL, AggregatedResult, aggregate
from .client import Client
from .config import DuePolicy
from .evaluation import EvaluationResult, evaluate_interval
from .schedule import ServiceSchedule
from .service_record import ServiceRecord
from .status import Status
from .truck import Truck

logger = logging.getLogger(__name__)

# Service type names that reset a schedule with a different name. Each pair
# matches in both directions and ignores case, like exact name matches.
SERVICE_TYPE_ALIASES = [
    {"oil change", "ganti oli"},
    {"regular", "service rutin"},
]


def service_type_matches(service_type: str, service_name: str) -> bool:
    """Check whether a logged service type resets a schedule (case-insensitive)."""
    logged = service_type.strip().lower()
    scheduled = service_name.strip().lower()
    if logged == scheduled:
        return True
    return any({logged, scheduled} <= names for names in SERVICE_TYPE_ALIASES)


class Fleet:
    """All clients, trucks and service records tracked in one fleet file."""

    def __init__(
        self,
        clients: Optional[List[Client]] = None,
        trucks: Optional[List[Truck]] = None,
        records: Optional[List[ServiceRecord]] = None,
        policy: Optional[DuePolicy] = None,
    ):
        self.clients = clients or []
        self.trucks = trucks or []
        self.records = records or []
        self.policy = policy or DuePolicy()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_truck(self, truck_id: str) -> Optional[Truck]:
        for truck in self.trucks:
            if truck.id == truck_id:
                return truck
        return None

    def require_truck(self, truck_id: str) -> Truck:
        """Like get_truck, but raise KeyError for unknown ids."""
        truck = self.get_truck(truck_id)
        if truck is None:
            raise KeyError(f"Truck '{truck_id}' not found")
        return truck

    def get_client(self, client_id: str) -> Optional[Client]:
        for client in self.clients:
            if client.id == client_id:
                return client
        return None

    def trucks_for_client(self, client_id: str) -> List[Truck]:
        return [t for t in self.trucks if t.client_id == client_id]

    def records_for_truck(self, truck_id: str) -> List[ServiceRecord]:
        """Service records for a truck, newest first."""
        entries = [r for r in self.records if r.truck_id == truck_id]
        return sorted(entries, key=lambda r: (r.service_date, r.odometer), reverse=True)

    def get_records_sorted(self, reverse: bool = True) -> List[ServiceRecord]:
        return sorted(
            self.records, key=lambda r: (r.service_date, r.odometer), reverse=reverse
        )

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def aggregate_truck(
        self, truck: Truck, now: Optional[Union[date, datetime]] = None
    ) -> AggregatedResult:
        return aggregate(truck.snapshot(), now=now, policy=self.policy)

    def evaluate_truck(
        self, truck: Truck, now: Optional[Union[date, datetime]] = None
    ) -> List[Tuple[str, EvaluationResult]]:
        """Per-interval results for a truck, general interval first."""
        snapshot = truck.snapshot()
        results = [
            (
                GENERAL_SERVICE_LABEL,
                evaluate_interval(
                    snapshot.general_interval, snapshot.current_odometer, now, self.policy
                ),
            )
        ]
        for name, interval in snapshot.item_intervals:
            results.append(
                (name, evaluate_interval(interval, snapshot.current_odometer, now, self.policy))
            )
        return results

    def needs_attention(
        self, now: Optional[Union[date, datetime]] = None
    ) -> List[Tuple[Truck, AggregatedResult]]:
        """
        Trucks to show on the monitoring board, most urgent first.

        A truck is included when its status is not OK, or when its nearest
        due date falls in the same calendar month as now.
        """
        if now is None:
            now = datetime.now()
        flagged = []
        for truck in self.trucks:
            result = self.aggregate_truck(truck, now)
            same_month = (result.nearest_date.year, result.nearest_date.month) == (
                now.year,
                now.month,
            )
            if result.is_due or same_month:
                flagged.append((truck, result))
        flagged.sort(key=lambda pair: (pair[1].status.value, pair[1].nearest_date))
        return flagged

    def summary(self, now: Optional[Union[date, datetime]] = None) -> Dict[str, float]:
        """Dashboard counts by aggregated status plus total service spend."""
        counts = {status: 0 for status in Status}
        for truck in self.trucks:
            counts[self.aggregate_truck(truck, now).status] += 1
        return {
            "totalTrucks": len(self.trucks),
            "overdue": counts[Status.OVERDUE],
            "warning": counts[Status.WARNING],
            "ok": counts[Status.OK],
            "totalServiceCost": sum(r.total_cost for r in self.records),
        }

    # -------------------------------------------------------------------------
    # Workflows
    # -------------------------------------------------------------------------

    def log_service(self, record: ServiceRecord) -> List[ServiceSchedule]:
        """
        Record a service and restart the intervals it covers.

        - The truck's general interval restarts at the record's date/odometer
        - current_odometer becomes max(current, record odometer)
        - Every schedule named by one of the record's service types restarts

        Returns the schedules that were reset.
        """
        truck = self.require_truck(record.truck_id)
        truck.record_general_service(record.service_date, record.odometer)

        reset = []
        for schedule in truck.schedules:
            if any(service_type_matches(t, schedule.service_name) for t in record.service_types):
                schedule.reset(record.service_date, record.odometer)
                reset.append(schedule)
        self.records.append(record)

        logger.info(
            "Logged service %s for truck %s at %s km (%d schedule(s) reset)",
            record.id,
            truck.id,
            record.odometer,
            len(reset),
        )
        return reset

    def add_trip_distance(self, truck_id: str, km: float) -> Truck:
        """Add driven distance to a truck's odometer, rounded to whole km."""
        if (
            isinstance(km, bool)
            or not isinstance(km, (int, float))
            or not math.isfinite(km)
            or km < 0
        ):
            raise ValueError("addedKm must be a non-negative number")
        truck = self.require_truck(truck_id)
        truck.current_odometer += int(round(km))
        logger.debug("Truck %s odometer now %s km", truck.id, truck.current_odometer)
        return truck

    def delete_truck(self, truck_id: str) -> Truck:
        """Remove a truck together with its schedules and service records."""
        truck = self.require_truck(truck_id)
        self.trucks.remove(truck)
        self.records = [r for r in self.records if r.truck_id != truck_id]
        return truck

    def delete_client(self, client_id: str) -> Client:
        """Remove a client that no longer has trucks assigned."""
        client = self.get_client(client_id)
        if client is None:
            raise KeyError(f"Client '{client_id}' not found")
        if self.trucks_for_client(client_id):
            raise ValueError(f"Client '{client_id}' still has trucks assigned")
        self.clients.remove(client)
        return client
