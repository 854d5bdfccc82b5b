"""
Operations that produce a new, validated Vehicle.

Every function here returns either a new Vehicle or an Invalid. The input
vehicle is never modified, so a rejected change leaves the caller's state
exactly as it was.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Union

from .constants import DEFAULT_MAINTENANCE_ITEMS
from .identifiers import new_id
from .item_config import MaintenanceItemConfig
from .reconciler import reconcile
from .service_record import ServiceLineItem, ServiceRecord
from .validation import (
    Invalid,
    Reason,
    is_blank,
    is_valid_distance,
    validate_config,
    validate_service_record,
    validate_vehicle_creation,
)
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

VehicleResult = Union[Vehicle, Invalid]


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def new_config(name: str, interval_distance: int) -> MaintenanceItemConfig:
    """Create a maintenance item with a fresh id."""
    return MaintenanceItemConfig(new_id(), name, interval_distance)


def default_configs() -> list:
    """The standard maintenance items, each with a fresh id."""
    return [new_config(name, interval) for name, interval in DEFAULT_MAINTENANCE_ITEMS]


# =============================================================================
# Vehicle setup and odometer
# =============================================================================


def create_vehicle(
    name: str,
    current_odometer: Any,
    configs: Optional[Iterable[MaintenanceItemConfig]] = None,
    now: Optional[datetime] = None,
) -> VehicleResult:
    """
    Create a new vehicle with an empty history.

    configs=None seeds the default maintenance items. Blank-named items are
    dropped and names are trimmed.
    """
    configs = default_configs() if configs is None else list(configs)

    invalid = validate_vehicle_creation(name, current_odometer, configs)
    if invalid is not None:
        return invalid

    kept = [
        replace(c, name=c.name.strip(), interval_distance=int(c.interval_distance))
        for c in configs
        if not is_blank(c.name)
    ]
    vehicle = Vehicle(
        id=new_id(),
        name=name.strip(),
        current_odometer=int(current_odometer),
        last_updated=_timestamp(now),
        configs=tuple(kept),
        history=(),
    )
    logger.info(
        "Created vehicle %s (%s) at %d with %d item(s)",
        vehicle.id, vehicle.name, vehicle.current_odometer, len(kept),
    )
    return vehicle


def update_odometer(
    vehicle: Vehicle, new_odometer: Any, now: Optional[datetime] = None
) -> VehicleResult:
    """
    Set the current odometer reading.

    The reading may be corrected downwards, but never below the highest
    recorded service.
    """
    if not is_valid_distance(new_odometer):
        return Invalid(
            Reason.INVALID_ODOMETER, f"Invalid odometer reading: {new_odometer!r}"
        )
    new_odometer = int(new_odometer)
    if new_odometer < vehicle.max_history_odometer:
        return Invalid(
            Reason.ODOMETER_BELOW_HISTORY,
            f"Odometer {new_odometer} is below the last recorded service "
            f"at {vehicle.max_history_odometer}",
        )

    logger.debug(
        "Odometer for %s: %d -> %d", vehicle.id, vehicle.current_odometer, new_odometer
    )
    return replace(vehicle, current_odometer=new_odometer, last_updated=_timestamp(now))


# =============================================================================
# Service history
# =============================================================================


def build_service_record(
    vehicle: Vehicle,
    date: str,
    odometer: Any,
    performed: Mapping[str, str],
    special_work: Optional[str] = None,
    record_id: Optional[str] = None,
) -> Union[ServiceRecord, Invalid]:
    """
    Build a service record from the items ticked on a service form.

    performed maps config id to observation. Line items follow the
    vehicle's item order and snapshot each item's current name.
    """
    unknown = [cid for cid in performed if vehicle.get_config(cid) is None]
    if unknown:
        return Invalid(
            Reason.UNKNOWN_CONFIG, f"Unknown maintenance item: {', '.join(unknown)}"
        )

    line_items = tuple(
        ServiceLineItem(config.id, config.name, (performed[config.id] or "").strip())
        for config in vehicle.configs
        if config.id in performed
    )
    special_work = None if is_blank(special_work) else special_work.strip()
    return ServiceRecord(
        id=record_id or new_id(),
        date=date,
        odometer=int(odometer) if is_valid_distance(odometer) else odometer,
        line_items=line_items,
        special_work=special_work,
    )


def save_service(
    vehicle: Vehicle, candidate: ServiceRecord, is_edit: bool
) -> VehicleResult:
    """
    Add a new service record, or replace an existing one by id.

    The record is validated, merged into history (sorted by odometer) and
    the current odometer is raised if the record goes beyond it.
    """
    invalid = validate_service_record(candidate)
    if invalid is not None:
        return invalid
    if not is_edit and vehicle.get_record(candidate.id) is not None:
        return Invalid(
            Reason.DUPLICATE_RECORD, f"Service {candidate.id} is already in history"
        )

    candidate = replace(candidate, odometer=int(candidate.odometer))
    history, current = reconcile(
        vehicle.history, candidate, is_edit, vehicle.current_odometer
    )
    logger.info(
        "%s service %s for vehicle %s at %d",
        "Updated" if is_edit else "Recorded",
        candidate.id, vehicle.id, candidate.odometer,
    )
    return replace(vehicle, history=history, current_odometer=current)


# =============================================================================
# Maintenance item configuration
# =============================================================================


def add_config(vehicle: Vehicle, name: str, interval_distance: Any) -> VehicleResult:
    """Add a maintenance item to a vehicle."""
    invalid = validate_config(name, interval_distance)
    if invalid is not None:
        return invalid
    config = new_config(name.strip(), int(interval_distance))
    logger.info("Added item %s (%s) to vehicle %s", config.id, config.name, vehicle.id)
    return replace(vehicle, configs=vehicle.configs + (config,))


def update_config(
    vehicle: Vehicle,
    config_id: str,
    name: Optional[str] = None,
    interval_distance: Any = None,
) -> VehicleResult:
    """
    Rename a maintenance item and/or change its interval.

    Past services keep the name recorded at the time. A new interval only
    affects the next due calculation.
    """
    config = vehicle.get_config(config_id)
    if config is None:
        return Invalid(Reason.UNKNOWN_CONFIG, f"Unknown maintenance item: {config_id}")

    name = config.name if name is None else name
    interval_distance = (
        config.interval_distance if interval_distance is None else interval_distance
    )
    invalid = validate_config(name, interval_distance)
    if invalid is not None:
        return invalid

    updated = replace(config, name=name.strip(), interval_distance=int(interval_distance))
    configs = tuple(updated if c.id == config_id else c for c in vehicle.configs)
    return replace(vehicle, configs=configs)


def remove_config(vehicle: Vehicle, config_id: str) -> VehicleResult:
    """Remove a maintenance item. Services that covered it are left untouched."""
    if vehicle.get_config(config_id) is None:
        return Invalid(Reason.UNKNOWN_CONFIG, f"Unknown maintenance item: {config_id}")
    logger.info("Removed item %s from vehicle %s", config_id, vehicle.id)
    return replace(
        vehicle, configs=tuple(c for c in vehicle.configs if c.id != config_id)
    )
