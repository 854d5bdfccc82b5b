#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance tracking.

Commands:
  vehicles        - List tracked vehicles
  add-vehicle     - Set up a new vehicle
  remove-vehicle  - Stop tracking a vehicle
  status          - Show what maintenance is due, overdue, or ok
  history         - View service history
  log             - Record a new service, or edit an existing one
  update-odometer - Update the current odometer reading
  items           - List a vehicle's maintenance items
  add-item        - Add a maintenance item
  edit-item       - Rename an item or change its interval
  remove-item     - Remove a maintenance item (history is kept)
"""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import Dict, List, Optional, Tuple

import yaml

from models import (
    Invalid,
    ServiceDue,
    ServiceRecord,
    Status,
    Vehicle,
    add_config,
    add_vehicle,
    build_service_record,
    create_vehicle,
    find_vehicle,
    load_vehicles,
    new_config,
    remove_config,
    remove_vehicle,
    replace_vehicle,
    save_service,
    save_vehicles,
    update_config,
    update_odometer,
)
from models.formatting import (
    format_date,
    format_distance,
    parse_date,
    parse_distance,
    truncate,
)

logger = logging.getLogger("maint")

DEFAULT_DATA_FILE = "garage.yaml"

# =============================================================================
# Formatting helpers
# =============================================================================


def format_remaining(svc: ServiceDue) -> str:
    """Format remaining distance for display."""
    return format_distance(svc.remaining)


def format_last_done(svc: ServiceDue) -> str:
    """Format when an item was last serviced ('15/01/2025 @ 10,000')."""
    if not svc.was_serviced:
        return "-"
    parts = []
    if svc.last_service_date:
        parts.append(format_date(svc.last_service_date))
    parts.append(format_distance(svc.last_service_odometer))
    return " @ ".join(parts)


def parse_pair(text: str) -> Tuple[str, Optional[str]]:
    """Split 'key=value' into (key, value); value is None without '='."""
    if "=" not in text:
        return text.strip(), None
    key, value = text.split("=", 1)
    return key.strip(), value.strip()


def report_invalid(invalid: Invalid) -> int:
    print(f"Error: {invalid.message}")
    return 1


# =============================================================================
# Garage helpers
# =============================================================================


def load_vehicle_or_report(args) -> Tuple[List[Vehicle], Optional[Vehicle]]:
    """Load the garage and look up args.vehicle by id or name."""
    vehicles = load_vehicles(args.data)
    vehicle = find_vehicle(vehicles, args.vehicle)
    if vehicle is None:
        print(f"Error: Unknown vehicle '{args.vehicle}'")
        if vehicles:
            print("\nAvailable vehicles:")
            for v in vehicles:
                print(f"  {v.name} ({v.id})")
    return vehicles, vehicle


def commit(args, vehicles: List[Vehicle], updated: Vehicle) -> int:
    """Replace a vehicle in the garage and write it back."""
    garage = replace_vehicle(vehicles, updated)
    if isinstance(garage, Invalid):
        return report_invalid(garage)
    save_vehicles(args.data, garage)
    return 0


def print_available_items(vehicle: Vehicle) -> None:
    print("\nAvailable items:")
    for config in vehicle.configs:
        print(f"  {config.name}")
        print(f"    Id: {config.id}")


# =============================================================================
# Vehicles / add-vehicle commands
# =============================================================================


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to summary table rows."""
    rows = []
    for vehicle in vehicles:
        statuses = vehicle.get_all_service_status()
        rows.append(
            [
                vehicle.id,
                vehicle.name,
                format_distance(vehicle.current_odometer),
                str(len(vehicle.history)),
                str(sum(1 for s in statuses if s.status == Status.OVERDUE)),
                str(sum(1 for s in statuses if s.status == Status.DUE_SOON)),
            ]
        )
    return rows


def cmd_vehicles(args):
    """List tracked vehicles."""
    vehicles = load_vehicles(args.data)
    if not vehicles:
        print("No vehicles yet. Add one with 'add-vehicle'.")
        return 0

    headers = ["Id", "Name", "Odometer", "Services", "Overdue", "Due Soon"]
    print(tabulate(make_vehicle_table(vehicles), headers=headers, tablefmt="simple"))
    return 0


def cmd_add_vehicle(args):
    """Set up a new vehicle."""
    vehicles = load_vehicles(args.data)

    configs = None
    if args.item or args.no_defaults:
        configs = []
        for spec in args.item or []:
            name, interval = parse_pair(spec)
            if interval is None:
                print(f"Error: Expected NAME=INTERVAL, got '{spec}'")
                return 1
            configs.append(new_config(name, parse_distance(interval)))

    vehicle = create_vehicle(args.name, parse_distance(args.odometer), configs)
    if isinstance(vehicle, Invalid):
        return report_invalid(vehicle)

    garage = add_vehicle(vehicles, vehicle)
    if isinstance(garage, Invalid):
        return report_invalid(garage)

    save_vehicles(args.data, garage)
    print(f"Added vehicle: {vehicle.name} ({vehicle.id})")
    print(f"  Odometer: {format_distance(vehicle.current_odometer)}")
    print(f"  Items:    {len(vehicle.configs)}")
    return 0


def cmd_remove_vehicle(args):
    """Stop tracking a vehicle."""
    vehicles, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    garage = remove_vehicle(vehicles, vehicle.id)
    if isinstance(garage, Invalid):
        return report_invalid(garage)

    save_vehicles(args.data, garage)
    print(f"Removed vehicle: {vehicle.name} ({len(vehicle.history)} services discarded)")
    return 0


# =============================================================================
# Status command
# =============================================================================


def make_status_table(services: List[ServiceDue]) -> List[List[str]]:
    """Convert service status list to table rows."""
    rows = []
    for svc in services:
        rows.append(
            [
                svc.config.name,
                format_last_done(svc),
                format_distance(svc.next_due_odometer),
                format_remaining(svc),
            ]
        )
    return rows


def cmd_status(args):
    """Show what maintenance is due, overdue, or ok."""
    _, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    print(f"Vehicle: {vehicle.name}")
    print(f"Current odometer: {format_distance(vehicle.current_odometer)}")
    print(f"Items: {len(vehicle.configs)}")
    print(f"Services: {len(vehicle.history)}")
    print()

    statuses = vehicle.get_all_service_status()
    headers = ["Item", "Last Done", "Next Due", "Remaining"]

    for status, title in (
        (Status.OVERDUE, "OVERDUE"),
        (Status.DUE_SOON, "DUE SOON"),
        (Status.OK, "OK"),
    ):
        group = sorted(
            [s for s in statuses if s.status == status], key=lambda s: s.remaining
        )
        if group:
            print(f"{title}:")
            print(tabulate(make_status_table(group), headers=headers, tablefmt="simple"))
            print()

    if not statuses:
        print("No maintenance items configured.")

    return 0


# =============================================================================
# History command
# =============================================================================


def describe_items(record: ServiceRecord, vehicle: Vehicle) -> str:
    """Item names performed in a service, with observations in parentheses."""
    parts = []
    for item in record.line_items:
        name = vehicle.display_name(item)
        parts.append(f"{name} ({item.observation})" if item.observation else name)
    return ", ".join(parts) or "-"


def make_history_table(records: List[ServiceRecord], vehicle: Vehicle) -> List[List[str]]:
    """Convert service records to table rows."""
    rows = []
    for record in records:
        rows.append(
            [
                format_date(record.date),
                format_distance(record.odometer),
                describe_items(record, vehicle),
                truncate(record.special_work),
                record.id,
            ]
        )
    return rows


def cmd_history(args):
    """View service history."""
    _, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    records = vehicle.get_history_sorted(reverse=args.desc)

    if args.item:
        wanted = args.item.lower()
        records = [
            r
            for r in records
            if any(wanted in vehicle.display_name(i).lower() for i in r.line_items)
        ]

    print(f"Vehicle: {vehicle.name}")
    print(f"Current odometer: {format_distance(vehicle.current_odometer)}")
    last_svc = vehicle.last_service
    if last_svc:
        print(
            f"Last service: {format_date(last_svc.date)} @ "
            f"{format_distance(last_svc.odometer)}"
        )
    print(f"Total services: {len(vehicle.history)}")
    if args.item:
        print(f"Showing: {len(records)} (filtered)")
    print()

    if not records:
        print("No services found.")
        return 0

    headers = ["Date", "Odometer", "Items", "Special Work", "Id"]
    print(tabulate(make_history_table(records, vehicle), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def resolve_performed(vehicle: Vehicle, specs: List[str]) -> Optional[Dict[str, str]]:
    """Map --item ITEM[=OBS] arguments to {config_id: observation}."""
    performed = {}
    for spec in specs:
        key, observation = parse_pair(spec)
        config = vehicle.find_config(key)
        if config is None:
            print(f"Error: Unknown maintenance item '{key}'")
            print_available_items(vehicle)
            return None
        performed[config.id] = observation or ""
    return performed


def cmd_log(args):
    """Record a new service, or edit an existing one."""
    vehicles, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    existing = None
    if args.edit:
        existing = vehicle.get_record(args.edit)
        if existing is None:
            print(f"Error: Unknown service '{args.edit}'")
            return 1

    if args.item:
        performed = resolve_performed(vehicle, args.item)
        if performed is None:
            return 1
    elif existing is not None:
        # Keep items that are still configured
        performed = {
            i.config_id: i.observation
            for i in existing.line_items
            if vehicle.get_config(i.config_id) is not None
        }
    else:
        performed = {}

    try:
        if args.date:
            service_date = parse_date(args.date)
        elif existing is not None:
            service_date = existing.date
        else:
            service_date = date.today().isoformat()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if args.odometer is not None:
        odometer = parse_distance(args.odometer)
    elif existing is not None:
        odometer = existing.odometer
    else:
        odometer = vehicle.current_odometer

    special_work = args.special
    if special_work is None and existing is not None:
        special_work = existing.special_work

    record = build_service_record(
        vehicle,
        service_date,
        odometer,
        performed,
        special_work,
        record_id=existing.id if existing else None,
    )
    if isinstance(record, Invalid):
        return report_invalid(record)

    updated = save_service(vehicle, record, is_edit=existing is not None)
    if isinstance(updated, Invalid):
        return report_invalid(updated)

    action = "Updating" if existing else "Adding"
    print(f"{action} service for {vehicle.name}:")
    print(f"  Date:     {format_date(record.date)}")
    print(f"  Odometer: {format_distance(record.odometer)}")
    for item in record.line_items:
        note = f" ({item.observation})" if item.observation else ""
        print(f"  Item:     {item.name}{note}")
    if record.special_work:
        print(f"  Special:  {record.special_work}")
    if updated.current_odometer != vehicle.current_odometer:
        print(f"  Odometer raised to {format_distance(updated.current_odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    result = commit(args, vehicles, updated)
    if result == 0:
        print("Service saved.")
    return result


# =============================================================================
# Update Odometer command
# =============================================================================


def cmd_update_odometer(args):
    """Update the current odometer reading."""
    vehicles, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    updated = update_odometer(vehicle, parse_distance(args.odometer))
    if isinstance(updated, Invalid):
        return report_invalid(updated)

    print(f"Vehicle: {vehicle.name}")
    print(f"Current odometer: {format_distance(vehicle.current_odometer)}")
    print(f"New odometer:     {format_distance(updated.current_odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    result = commit(args, vehicles, updated)
    if result == 0:
        print("Odometer updated.")
    return result


# =============================================================================
# Item commands
# =============================================================================


def cmd_items(args):
    """List a vehicle's maintenance items."""
    _, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    print(f"Vehicle: {vehicle.name}")
    print(f"Items: {len(vehicle.configs)}")
    print()

    rows = [
        [c.id, c.name, format_distance(c.interval_distance)] for c in vehicle.configs
    ]
    print(tabulate(rows, headers=["Id", "Item", "Interval"], tablefmt="simple"))
    return 0


def cmd_add_item(args):
    """Add a maintenance item."""
    vehicles, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    updated = add_config(vehicle, args.name, parse_distance(args.interval))
    if isinstance(updated, Invalid):
        return report_invalid(updated)

    result = commit(args, vehicles, updated)
    if result == 0:
        config = updated.configs[-1]
        print(f"Added item: {config.name} every {format_distance(config.interval_distance)}")
    return result


def cmd_edit_item(args):
    """Rename an item or change its interval."""
    vehicles, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    config = vehicle.find_config(args.item)
    if config is None:
        print(f"Error: Unknown maintenance item '{args.item}'")
        print_available_items(vehicle)
        return 1

    interval = parse_distance(args.interval) if args.interval is not None else None
    updated = update_config(vehicle, config.id, name=args.name, interval_distance=interval)
    if isinstance(updated, Invalid):
        return report_invalid(updated)

    result = commit(args, vehicles, updated)
    if result == 0:
        print("Item updated.")
    return result


def cmd_remove_item(args):
    """Remove a maintenance item (history is kept)."""
    vehicles, vehicle = load_vehicle_or_report(args)
    if vehicle is None:
        return 1

    config = vehicle.find_config(args.item)
    if config is None:
        print(f"Error: Unknown maintenance item '{args.item}'")
        print_available_items(vehicle)
        return 1

    updated = remove_config(vehicle, config.id)
    if isinstance(updated, Invalid):
        return report_invalid(updated)

    result = commit(args, vehicles, updated)
    if result == 0:
        print(f"Removed item: {config.name}")
    return result


# =============================================================================
# Main
# =============================================================================


COMMANDS = {
    "vehicles": cmd_vehicles,
    "add-vehicle": cmd_add_vehicle,
    "remove-vehicle": cmd_remove_vehicle,
    "status": cmd_status,
    "history": cmd_history,
    "log": cmd_log,
    "update-odometer": cmd_update_odometer,
    "items": cmd_items,
    "add-item": cmd_add_item,
    "edit-item": cmd_edit_item,
    "remove-item": cmd_remove_item,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add-vehicle "Hilux" 85000
  %(prog)s add-vehicle "Moto" 1200 --item "Chain=1000" --item "Engine oil=3000"
  %(prog)s status hilux
  %(prog)s history hilux --item oil
  %(prog)s log hilux --odometer 90000 --item "Engine oil=5W30 Shell" \\
      --item "Oil filter"
  %(prog)s log hilux --special "Front brake pads"
  %(prog)s log hilux --edit k3j9x2a --odometer 89500
  %(prog)s update-odometer hilux 91.200
""",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path(os.environ.get("AUTOCONTROL_DATA", DEFAULT_DATA_FILE)),
        help="Path to garage YAML file (default: $AUTOCONTROL_DATA or garage.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("vehicles", help="List tracked vehicles")

    add_vehicle_parser = subparsers.add_parser("add-vehicle", help="Set up a new vehicle")
    add_vehicle_parser.add_argument("name", type=str, help="Vehicle name")
    add_vehicle_parser.add_argument("odometer", type=str, help="Current odometer reading")
    add_vehicle_parser.add_argument(
        "--item",
        action="append",
        help="Maintenance item as NAME=INTERVAL (repeatable, replaces the defaults)",
    )
    add_vehicle_parser.add_argument(
        "--no-defaults",
        action="store_true",
        help="Start without the default maintenance items",
    )

    for name, help_text in (
        ("remove-vehicle", "Stop tracking a vehicle"),
        ("status", "Show what maintenance is due, overdue, or ok"),
        ("items", "List maintenance items"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("vehicle", type=str, help="Vehicle id or name")

    history_parser = subparsers.add_parser("history", help="View service history")
    history_parser.add_argument("vehicle", type=str, help="Vehicle id or name")
    history_parser.add_argument(
        "--item",
        type=str,
        help="Filter to services covering items containing text (case-insensitive)",
    )
    history_parser.add_argument(
        "--desc",
        action="store_true",
        help="Highest odometer first",
    )

    log_parser = subparsers.add_parser("log", help="Record or edit a service")
    log_parser.add_argument("vehicle", type=str, help="Vehicle id or name")
    log_parser.add_argument(
        "--odometer",
        type=str,
        help="Odometer at time of service (default: current reading)",
    )
    log_parser.add_argument(
        "--date",
        type=str,
        help="Service date, YYYY-MM-DD or DD/MM/YYYY (default: today)",
    )
    log_parser.add_argument(
        "--item",
        action="append",
        help="Item performed, by id or name, optionally ITEM=OBSERVATION (repeatable)",
    )
    log_parser.add_argument(
        "--special",
        type=str,
        help="Other work performed (brakes, shocks, ...)",
    )
    log_parser.add_argument(
        "--edit",
        type=str,
        metavar="SERVICE_ID",
        help="Replace an existing service instead of adding one",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be saved without saving",
    )

    odometer_parser = subparsers.add_parser(
        "update-odometer", help="Update the current odometer reading"
    )
    odometer_parser.add_argument("vehicle", type=str, help="Vehicle id or name")
    odometer_parser.add_argument("odometer", type=str, help="Current odometer reading")
    odometer_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    add_item_parser = subparsers.add_parser("add-item", help="Add a maintenance item")
    add_item_parser.add_argument("vehicle", type=str, help="Vehicle id or name")
    add_item_parser.add_argument("name", type=str, help="Item name")
    add_item_parser.add_argument("interval", type=str, help="Service interval distance")

    edit_item_parser = subparsers.add_parser(
        "edit-item", help="Rename an item or change its interval"
    )
    edit_item_parser.add_argument("vehicle", type=str, help="Vehicle id or name")
    edit_item_parser.add_argument("item", type=str, help="Item id or name")
    edit_item_parser.add_argument("--name", type=str, help="New name")
    edit_item_parser.add_argument("--interval", type=str, help="New interval")

    remove_item_parser = subparsers.add_parser(
        "remove-item", help="Remove a maintenance item (history is kept)"
    )
    remove_item_parser.add_argument("vehicle", type=str, help="Vehicle id or name")
    remove_item_parser.add_argument("item", type=str, help="Item id or name")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except (OSError, yaml.YAMLError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
