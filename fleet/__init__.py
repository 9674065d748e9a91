"""
Fleet maintenance tracking models.

This package provides data models for tracking truck maintenance:
- Status: Urgency tiers (OVERDUE, WARNING, OK)
- DuePolicy: Warning thresholds and default intervals
- MaintenanceInterval: Last service anchor plus months/km periodicity
- evaluate / aggregate: Due-date and due-distance calculations
- Truck, ServiceSchedule, Client, ServiceRecord, SparePart: Fleet records
- Fleet: Main aggregate combining all data
"""

from .status import Status, worst_status
from .config import DuePolicy, DEFAULT_POLICY
from .interval import MaintenanceInterval
from .calculations import (
    calc_due_date,
    calc_due_odometer,
    calc_days_until,
    check_status,
    parse_date,
)
from .evaluation import EvaluationResult, evaluate, evaluate_interval
from .aggregate import (
    AggregatedResult,
    VehicleSnapshot,
    aggregate,
    GENERAL_SERVICE_LABEL,
)
from .client import Client
from .schedule import ServiceSchedule
from .service_record import ServiceRecord, SparePart
from .truck import Truck
from .fleet import Fleet, service_type_matches
from .loader import (
    load_fleet,
    save_fleet,
    create_fleet,
    save_service_record,
    add_trip_distance,
    save_current_odometer,
    add_truck,
    update_truck,
    delete_truck,
    add_client,
    delete_client,
    add_schedule,
    delete_schedule,
)

__all__ = [
    "Status",
    "worst_status",
    "DuePolicy",
    "DEFAULT_POLICY",
    "MaintenanceInterval",
    "calc_due_date",
    "calc_due_odometer",
    "calc_days_until",
    "check_status",
    "parse_date",
    "EvaluationResult",
    "evaluate",
    "evaluate_interval",
    "AggregatedResult",
    "VehicleSnapshot",
    "aggregate",
    "GENERAL_SERVICE_LABEL",
    "Client",
    "ServiceSchedule",
    "ServiceRecord",
    "SparePart",
    "Truck",
    "Fleet",
    "service_type_matches",
    "load_fleet",
    "save_fleet",
    "create_fleet",
    "save_service_record",
    "add_trip_distance",
    "save_current_odometer",
    "add_truck",
    "update_truck",
    "delete_truck",
    "add_client",
    "delete_client",
    "add_schedule",
    "delete_schedule",
]
