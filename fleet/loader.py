"""YAML loading and saving utilities for fleet data."""

from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .client import Client
from .config import DuePolicy
from .fleet import Fleet
from .schedule import ServiceSchedule
from .service_record import ServiceRecord, SparePart
from .truck import Truck


def _iso(value: Optional[Union[str, date]]) -> Optional[str]:
    """YAML turns unquoted dates into date objects; keep them as ISO strings."""
    if isinstance(value, date):
        return value.isoformat()
    return value


# =============================================================================
# dict -> object
# =============================================================================


def parse_client(dct: Dict[str, Any]) -> Client:
    return Client(
        dct["id"],
        dct["name"],
        dct.get("contactPerson", ""),
        dct.get("phone", ""),
        dct.get("allocations"),
    )


def parse_schedule(dct: Dict[str, Any]) -> ServiceSchedule:
    return ServiceSchedule(
        dct["id"],
        dct["serviceName"],
        dct["intervalKm"],
        dct["intervalMonths"],
        _iso(dct["lastServiceDate"]),
        dct.get("lastServiceOdometer") or 0,
    )


def parse_truck(dct: Dict[str, Any], policy: DuePolicy) -> Truck:
    return Truck(
        dct["id"],
        dct["plateNumber"],
        dct["brand"],
        dct["model"],
        dct["year"],
        dct["size"],
        dct["clientId"],
        tonnage=dct.get("tonnage"),
        current_odometer=dct.get("currentOdometer"),
        last_service_date=_iso(dct.get("lastServiceDate")),
        last_service_odometer=dct.get("lastServiceOdometer"),
        service_interval_km=dct.get("serviceIntervalKm") or policy.default_interval_km,
        service_interval_months=(
            dct.get("serviceIntervalMonths") or policy.default_interval_months
        ),
        schedules=[parse_schedule(s) for s in dct.get("schedules") or []],
        allocation=dct.get("allocation"),
        description=dct.get("description"),
    )


def parse_part(dct: Dict[str, Any]) -> SparePart:
    return SparePart(
        dct["id"],
        dct["name"],
        dct.get("partNumber", ""),
        dct.get("price"),
        dct.get("quantity"),
    )


def parse_record(dct: Dict[str, Any]) -> ServiceRecord:
    return ServiceRecord(
        dct["id"],
        dct["truckId"],
        _iso(dct["serviceDate"]),
        dct["odometer"],
        list(dct.get("serviceTypes") or []),
        dct.get("description", ""),
        dct.get("mechanic", ""),
        parts=[parse_part(p) for p in dct.get("parts") or []],
        labor_cost=dct.get("laborCost"),
        total_cost=dct.get("totalCost"),
    )


def parse_fleet(data: Optional[Dict[str, Any]]) -> Fleet:
    """Build a Fleet from the raw (camelCase) dict form of a fleet file."""
    data = data or {}
    policy = DuePolicy.from_dict(data.get("settings"))
    return Fleet(
        clients=[parse_client(c) for c in data.get("clients") or []],
        trucks=[parse_truck(t, policy) for t in data.get("trucks") or []],
        records=[parse_record(r) for r in data.get("serviceRecords") or []],
        policy=policy,
    )


# =============================================================================
# object -> dict
# =============================================================================


def client_to_dict(client: Client) -> Dict[str, Any]:
    """Serialize a Client to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": client.id,
        "name": client.name,
        "contactPerson": client.contact_person,
        "phone": client.phone,
    }
    if client.allocations:
        d["allocations"] = list(client.allocations)
    return d


def schedule_to_dict(schedule: ServiceSchedule) -> Dict[str, Any]:
    return {
        "id": schedule.id,
        "serviceName": schedule.service_name,
        "intervalKm": schedule.interval_km,
        "intervalMonths": schedule.interval_months,
        "lastServiceDate": schedule.last_service_date.isoformat(),
        "lastServiceOdometer": schedule.last_service_odometer,
    }


def truck_to_dict(truck: Truck) -> Dict[str, Any]:
    """Serialize a Truck (and its schedules) to the YAML dict format."""
    d: Dict[str, Any] = {
        "id": truck.id,
        "plateNumber": truck.plate_number,
        "brand": truck.brand,
        "model": truck.model,
        "year": truck.year,
        "size": truck.size,
        "tonnage": truck.tonnage,
        "clientId": truck.client_id,
        "currentOdometer": truck.current_odometer,
        "lastServiceDate": truck.last_service_date.isoformat(),
        "lastServiceOdometer": truck.last_service_odometer,
        "serviceIntervalKm": truck.service_interval_km,
        "serviceIntervalMonths": truck.service_interval_months,
    }
    if truck.allocation is not None:
        d["allocation"] = truck.allocation
    if truck.description is not None:
        d["description"] = truck.description
    d["schedules"] = [schedule_to_dict(s) for s in truck.schedules]
    return d


def part_to_dict(part: SparePart) -> Dict[str, Any]:
    return {
        "id": part.id,
        "name": part.name,
        "partNumber": part.part_number,
        "price": part.price,
        "quantity": part.quantity,
    }


def record_to_dict(record: ServiceRecord) -> Dict[str, Any]:
    """Serialize a ServiceRecord (and its parts) to the YAML dict format."""
    return {
        "id": record.id,
        "truckId": record.truck_id,
        "serviceDate": record.service_date,
        "odometer": record.odometer,
        "serviceTypes": list(record.service_types),
        "description": record.description,
        "mechanic": record.mechanic,
        "laborCost": record.labor_cost,
        "totalCost": record.total_cost,
        "parts": [part_to_dict(p) for p in record.parts],
    }


def fleet_to_dict(fleet: Fleet) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    if fleet.policy != DuePolicy():
        d["settings"] = fleet.policy.to_dict()
    d["clients"] = [client_to_dict(c) for c in fleet.clients]
    d["trucks"] = [truck_to_dict(t) for t in fleet.trucks]
    d["serviceRecords"] = [record_to_dict(r) for r in fleet.records]
    return d


# =============================================================================
# File access
# =============================================================================


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _find_index(items: List[Dict[str, Any]], item_id: str, kind: str) -> int:
    for index, item in enumerate(items):
        if item.get("id") == item_id:
            return index
    raise KeyError(f"{kind} '{item_id}' not found")


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load a fleet from a YAML file."""
    return parse_fleet(_read_raw(filename))


def save_fleet(filename: Union[str, Path], fleet: Fleet) -> None:
    """Write a whole fleet back to a YAML file."""
    _write_raw(filename, fleet_to_dict(fleet))


def create_fleet(
    filename: Union[str, Path], policy: Optional[DuePolicy] = None
) -> None:
    """Create an empty fleet file, optionally with non-default settings."""
    save_fleet(filename, Fleet(policy=policy))


def save_service_record(
    filename: Union[str, Path], record: ServiceRecord
) -> List[ServiceSchedule]:
    """
    Append a service record to a fleet file.

    Restarts the truck's general interval and every matching schedule, then
    writes the whole fleet back. Returns the schedules that were reset.
    """
    fleet = load_fleet(filename)
    if any(r.id == record.id for r in fleet.records):
        raise ValueError(f"Service record '{record.id}' already exists")
    reset = fleet.log_service(record)
    save_fleet(filename, fleet)
    return reset


def add_trip_distance(filename: Union[str, Path], truck_id: str, km: float) -> Truck:
    """Add driven distance to a truck's odometer in a fleet file."""
    fleet = load_fleet(filename)
    truck = fleet.add_trip_distance(truck_id, km)
    save_fleet(filename, fleet)
    return truck


def save_current_odometer(
    filename: Union[str, Path], truck_id: str, odometer: int
) -> None:
    """
    Overwrite a truck's current odometer.

    Loads the raw YAML, updates trucks[id].currentOdometer,
    and writes back to the file.
    """
    data = _read_raw(filename)
    trucks = data.get("trucks") or []
    index = _find_index(trucks, truck_id, "Truck")
    trucks[index]["currentOdometer"] = odometer
    _write_raw(filename, data)


def add_truck(filename: Union[str, Path], truck: Truck) -> None:
    """Append a truck to a fleet file."""
    data = _read_raw(filename)
    if data.get("trucks") is None:
        data["trucks"] = []
    if any(t.get("id") == truck.id for t in data["trucks"]):
        raise ValueError(f"Truck '{truck.id}' already exists")
    data["trucks"].append(truck_to_dict(truck))
    _write_raw(filename, data)


def update_truck(filename: Union[str, Path], truck: Truck) -> None:
    """Replace the truck with the same id in a fleet file."""
    data = _read_raw(filename)
    trucks = data.get("trucks") or []
    index = _find_index(trucks, truck.id, "Truck")
    trucks[index] = truck_to_dict(truck)
    _write_raw(filename, data)


def delete_truck(filename: Union[str, Path], truck_id: str) -> None:
    """Remove a truck, its schedules and its service records from a fleet file."""
    fleet = load_fleet(filename)
    fleet.delete_truck(truck_id)
    save_fleet(filename, fleet)


def add_client(filename: Union[str, Path], client: Client) -> None:
    """Append a client to a fleet file."""
    data = _read_raw(filename)
    if data.get("clients") is None:
        data["clients"] = []
    if any(c.get("id") == client.id for c in data["clients"]):
        raise ValueError(f"Client '{client.id}' already exists")
    data["clients"].append(client_to_dict(client))
    _write_raw(filename, data)


def delete_client(filename: Union[str, Path], client_id: str) -> None:
    """Remove a client that has no trucks from a fleet file."""
    fleet = load_fleet(filename)
    fleet.delete_client(client_id)
    save_fleet(filename, fleet)


def add_schedule(
    filename: Union[str, Path], truck_id: str, schedule: ServiceSchedule
) -> None:
    """Append a per-item schedule to a truck in a fleet file."""
    data = _read_raw(filename)
    trucks = data.get("trucks") or []
    index = _find_index(trucks, truck_id, "Truck")
    schedules = trucks[index].setdefault("schedules", []) or []
    if any(s.get("id") == schedule.id for s in schedules):
        raise ValueError(f"Schedule '{schedule.id}' already exists")
    schedules.append(schedule_to_dict(schedule))
    trucks[index]["schedules"] = schedules
    _write_raw(filename, data)


def delete_schedule(
    filename: Union[str, Path], truck_id: str, schedule_id: str
) -> None:
    """Remove a per-item schedule from a truck in a fleet file."""
    data = _read_raw(filename)
    trucks = data.get("trucks") or []
    index = _find_index(trucks, truck_id, "Truck")
    schedules = trucks[index].get("schedules") or []
    del schedules[_find_index(schedules, schedule_id, "Schedule")]
    trucks[index]["schedules"] = schedules
    _write_raw(filename, data)
