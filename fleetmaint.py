#!/usr/bin/env python3
"""
Unified CLI for truck fleet maintenance tracking.

Commands:
  status     - Show aggregated service status for every truck
  monitor    - Show trucks that need attention this month
  schedules  - Show every interval of one truck
  history    - View service records
  log        - Record a service performed on a truck
  trip       - Add driven distance to a truck's odometer
  summary    - Dashboard counts and total service cost
  clients    - List clients and their trucks
"""

import argparse
import logging
import sys
import uuid
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional, Tuple

from fleet import (
    AggregatedResult,
    EvaluationResult,
    Fleet,
    ServiceRecord,
    SparePart,
    Status,
    Truck,
    load_fleet,
    save_service_record,
    add_trip_distance,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display (whole currency units)."""
    return f"Rp {cost:,.0f}" if cost is not None else "-"


def format_distance_remaining(km: Optional[float]) -> str:
    """Format remaining distance, negative when overdue."""
    if km is None:
        return "-"
    if km < 0:
        return f"-{abs(km):,.0f} km"
    return f"{km:,.0f} km"


def format_days_remaining(days: Optional[int]) -> str:
    """Format remaining time (e.g., '3mo 15d' or '-2mo 5d')."""
    if days is None:
        return "-"
    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_today(value: Optional[str]) -> date:
    return date.fromisoformat(value) if value else date.today()


# =============================================================================
# Status / monitor commands
# =============================================================================


def make_status_table(
    rows: List[Tuple[Truck, AggregatedResult]], fleet: Fleet
) -> List[List[str]]:
    """Convert aggregated truck results to table rows."""
    table = []
    for truck, result in rows:
        client = fleet.get_client(truck.client_id)
        table.append(
            [
                truck.plate_number,
                f"{truck.brand} {truck.model}",
                client.name if client else truck.client_id,
                format_km(truck.current_odometer),
                format_distance_remaining(result.nearest_distance),
                result.nearest_date.isoformat(),
                ", ".join(result.items_due) or "-",
            ]
        )
    return table


STATUS_HEADERS = [
    "Plate",
    "Truck",
    "Client",
    "Odometer",
    "Next (km)",
    "Next (date)",
    "Items Due",
]


def cmd_status(args):
    """Show aggregated service status for every truck."""
    fleet = load_fleet(args.fleet_file)
    today = parse_today(args.today)

    print(f"Trucks: {len(fleet.trucks)}")
    print(f"As of: {today.isoformat()}")
    print()

    results = [(t, fleet.aggregate_truck(t, today)) for t in fleet.trucks]
    if args.client:
        results = [(t, r) for t, r in results if t.client_id == args.client]

    for status, title in (
        (Status.OVERDUE, "OVERDUE:"),
        (Status.WARNING, "DUE SOON:"),
        (Status.OK, "OK:"),
    ):
        group = sorted(
            [(t, r) for t, r in results if r.status == status],
            key=lambda pair: (pair[1].nearest_date, pair[0].plate_number),
        )
        if group:
            print(title)
            print(
                tabulate(
                    make_status_table(group, fleet),
                    headers=STATUS_HEADERS,
                    tablefmt="simple",
                )
            )
            print()

    return 0


def cmd_monitor(args):
    """Show trucks needing service now or due this month."""
    fleet = load_fleet(args.fleet_file)
    today = parse_today(args.today)

    flagged = fleet.needs_attention(today)
    print(f"Monitoring period: {today.strftime('%B %Y')} (and urgent)")
    print()

    if not flagged:
        print("No trucks need attention.")
        return 0

    headers = ["Status"] + STATUS_HEADERS
    rows = [
        [result.status.label.upper()] + row
        for (truck, result), row in zip(flagged, make_status_table(flagged, fleet))
    ]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Schedules command
# =============================================================================


def make_schedule_table(results: List[Tuple[str, EvaluationResult]]) -> List[List[str]]:
    """Convert per-interval results to table rows."""
    return [
        [
            name,
            result.status.label.upper(),
            format_km(result.next_due_odometer),
            result.next_due_date.isoformat(),
            format_distance_remaining(result.distance_until),
            format_days_remaining(result.days_until),
        ]
        for name, result in results
    ]


def cmd_schedules(args):
    """Show every interval of one truck."""
    fleet = load_fleet(args.fleet_file)
    truck = fleet.get_truck(args.truck_id)
    if truck is None:
        print(f"Error: Unknown truck '{args.truck_id}'")
        return 1

    today = parse_today(args.today)
    print(f"Truck: {truck.name}")
    print(f"Current odometer: {truck.current_odometer:,.0f} km")
    print()

    headers = ["Service", "Status", "Due (km)", "Due (date)", "Remaining", "Remaining (time)"]
    print(
        tabulate(
            make_schedule_table(fleet.evaluate_truck(truck, today)),
            headers=headers,
            tablefmt="simple",
        )
    )
    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(records: List[ServiceRecord], fleet: Fleet) -> List[List[str]]:
    """Convert service records to table rows."""
    rows = []
    for record in records:
        truck = fleet.get_truck(record.truck_id)
        rows.append(
            [
                record.service_date,
                truck.plate_number if truck else record.truck_id,
                format_km(record.odometer),
                ", ".join(record.service_types),
                record.mechanic or "-",
                format_cost(record.total_cost),
                truncate(record.description),
            ]
        )
    return rows


def cmd_history(args):
    """View service records."""
    fleet = load_fleet(args.fleet_file)

    records = fleet.get_records_sorted(reverse=not args.asc)
    if args.truck:
        records = [r for r in records if r.truck_id == args.truck]
    if args.since:
        records = [r for r in records if r.service_date >= args.since]

    total_cost = sum(r.total_cost for r in records)

    print(f"Total services: {len(fleet.records)}")
    if args.truck or args.since:
        print(f"Showing: {len(records)} (filtered)")
    if total_cost > 0:
        print(f"Total cost: {format_cost(total_cost)}")
    print()

    if not records:
        print("No service records found.")
        return 0

    headers = ["Date", "Truck", "Odometer", "Types", "Mechanic", "Cost", "Description"]
    print(tabulate(make_history_table(records, fleet), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def parse_part(value: str) -> SparePart:
    """Parse 'name:partNumber:price[:quantity]' into a SparePart."""
    fields = value.split(":")
    if len(fields) not in (3, 4):
        raise ValueError(f"Invalid part '{value}' (expected name:partNumber:price[:qty])")
    quantity = int(fields[3]) if len(fields) == 4 else 1
    return SparePart(uuid.uuid4().hex[:8], fields[0], fields[1], float(fields[2]), quantity)


def cmd_log(args):
    """Record a service performed on a truck."""
    fleet = load_fleet(args.fleet_file)
    truck = fleet.get_truck(args.truck_id)
    if truck is None:
        print(f"Error: Unknown truck '{args.truck_id}'")
        print("\nAvailable trucks:")
        for t in sorted(fleet.trucks, key=lambda t: t.plate_number):
            print(f"  {t.id}: {t.name}")
        return 1

    try:
        parts = [parse_part(p) for p in args.part or []]
        record = ServiceRecord(
            id=args.id or uuid.uuid4().hex[:8],
            truck_id=truck.id,
            service_date=args.date or date.today().isoformat(),
            odometer=args.odometer if args.odometer is not None else truck.current_odometer,
            service_types=args.type,
            description=args.description or ", ".join(args.type),
            mechanic=args.mechanic or "",
            parts=parts,
            labor_cost=args.labor or 0,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(f"Adding service record to {args.fleet_file}:")
    print(f"  Truck:    {truck.name}")
    print(f"  Date:     {record.service_date}")
    print(f"  Odometer: {record.odometer:,.0f}")
    print(f"  Types:    {', '.join(record.service_types)}")
    if record.mechanic:
        print(f"  Mechanic: {record.mechanic}")
    for part in record.parts:
        print(f"  Part:     {part.name} x{part.quantity} ({format_cost(part.subtotal)})")
    print(f"  Total:    {format_cost(record.total_cost)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    try:
        reset = save_service_record(args.fleet_file, record)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print("Record saved.")
    for schedule in reset:
        print(f"  Reset schedule: {schedule.service_name}")

    return 0


# =============================================================================
# Trip command
# =============================================================================


def cmd_trip(args):
    """Add driven distance to a truck's odometer."""
    fleet = load_fleet(args.fleet_file)
    truck = fleet.get_truck(args.truck_id)
    if truck is None:
        print(f"Error: Unknown truck '{args.truck_id}'")
        return 1
    if args.km < 0:
        print("Error: Trip distance must be non-negative")
        return 1

    print(f"Truck: {truck.name}")
    print(f"Current odometer: {truck.current_odometer:,.0f}")
    print(f"New odometer:     {truck.current_odometer + args.km:,.0f}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_trip_distance(args.fleet_file, truck.id, args.km)
    print("Odometer updated.")
    return 0


# =============================================================================
# Summary / clients commands
# =============================================================================


def cmd_summary(args):
    """Dashboard counts and total service cost."""
    fleet = load_fleet(args.fleet_file)
    summary = fleet.summary(parse_today(args.today))

    rows = [
        ["Total trucks", summary["totalTrucks"]],
        ["Overdue", summary["overdue"]],
        ["Due soon", summary["warning"]],
        ["OK", summary["ok"]],
        ["Total service cost", format_cost(summary["totalServiceCost"])],
    ]
    print(tabulate(rows, tablefmt="simple"))
    return 0


def cmd_clients(args):
    """List clients and their trucks."""
    fleet = load_fleet(args.fleet_file)

    rows = []
    for client in sorted(fleet.clients, key=lambda c: c.name):
        trucks = fleet.trucks_for_client(client.id)
        rows.append(
            [
                client.id,
                client.name,
                client.contact_person or "-",
                client.phone or "-",
                len(trucks),
                ", ".join(client.allocations) or "-",
            ]
        )

    if not rows:
        print("No clients found.")
        return 0

    headers = ["ID", "Name", "Contact", "Phone", "Trucks", "Allocations"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Truck fleet maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleets/demo.yaml status
  %(prog)s fleets/demo.yaml status --today 2024-06-25
  %(prog)s fleets/demo.yaml monitor
  %(prog)s fleets/demo.yaml schedules t1
  %(prog)s fleets/demo.yaml history --truck t1 --since 2024-01-01
  %(prog)s fleets/demo.yaml log t1 --type "Oil Change" --type Regular \\
      --odometer 150000 --mechanic Agus --labor 500000 \\
      --part "Filter Oli:FLT-001:250000"
  %(prog)s fleets/demo.yaml trip t1 350
""",
    )
    parser.add_argument(
        "fleet_file",
        type=Path,
        help="Path to fleet YAML file",
    )
    parser.add_argument(
        "--today",
        type=str,
        help="Evaluate as of this date (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show workflow log messages",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser(
        "status", help="Show aggregated service status for every truck"
    )
    status_parser.add_argument("--client", type=str, help="Only trucks of this client id")

    subparsers.add_parser("monitor", help="Show trucks that need attention this month")

    schedules_parser = subparsers.add_parser(
        "schedules", help="Show every interval of one truck"
    )
    schedules_parser.add_argument("truck_id", type=str, help="Truck id (e.g., 't1')")

    history_parser = subparsers.add_parser("history", help="View service records")
    history_parser.add_argument("--truck", type=str, help="Only records for this truck id")
    history_parser.add_argument(
        "--since", type=str, help="Show only records since date (YYYY-MM-DD)"
    )
    history_parser.add_argument(
        "--asc", action="store_true", help="Sort oldest first instead of newest first"
    )

    log_parser = subparsers.add_parser("log", help="Record a service performed on a truck")
    log_parser.add_argument("truck_id", type=str, help="Truck id (e.g., 't1')")
    log_parser.add_argument(
        "--type",
        action="append",
        required=True,
        help="Service type (repeatable, e.g., 'Oil Change')",
    )
    log_parser.add_argument("--id", type=str, help="Record id (default: generated)")
    log_parser.add_argument(
        "--date", type=str, help="Service date in YYYY-MM-DD format (default: today)"
    )
    log_parser.add_argument(
        "--odometer", type=int, help="Odometer at time of service (default: current)"
    )
    log_parser.add_argument("--mechanic", type=str, help="Who performed the service")
    log_parser.add_argument("--description", type=str, help="Notes about the service")
    log_parser.add_argument("--labor", type=float, help="Labor cost")
    log_parser.add_argument(
        "--part",
        action="append",
        help="Spare part as 'name:partNumber:price[:quantity]' (repeatable)",
    )
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    trip_parser = subparsers.add_parser(
        "trip", help="Add driven distance to a truck's odometer"
    )
    trip_parser.add_argument("truck_id", type=str, help="Truck id (e.g., 't1')")
    trip_parser.add_argument("km", type=int, help="Distance driven in km")
    trip_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be updated without saving"
    )

    subparsers.add_parser("summary", help="Dashboard counts and total service cost")
    subparsers.add_parser("clients", help="List clients and their trucks")

    return parser


COMMANDS = {
    "status": cmd_status,
    "monitor": cmd_monitor,
    "schedules": cmd_schedules,
    "history": cmd_history,
    "log": cmd_log,
    "trip": cmd_trip,
    "summary": cmd_summary,
    "clients": cmd_clients,
}


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    if args.today:
        try:
            date.fromisoformat(args.today)
        except ValueError:
            print(f"Error: Invalid date '{args.today}' (expected YYYY-MM-DD)")
            return 1

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
