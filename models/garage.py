"""Operations on the collection of tracked vehicles."""

import logging
from typing import Iterable, Optional, Tuple, Union

from .constants import MAX_VEHICLES
from .validation import Invalid, Reason
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

GarageResult = Union[Tuple[Vehicle, ...], Invalid]


def find_vehicle(vehicles: Iterable[Vehicle], key: str) -> Optional[Vehicle]:
    """Find a vehicle by id, falling back to case-insensitive name."""
    vehicles = list(vehicles)
    for vehicle in vehicles:
        if vehicle.id == key:
            return vehicle
    wanted = key.strip().lower()
    for vehicle in vehicles:
        if vehicle.name.strip().lower() == wanted:
            return vehicle
    return None


def add_vehicle(
    vehicles: Iterable[Vehicle], vehicle: Vehicle, limit: int = MAX_VEHICLES
) -> GarageResult:
    """Append a vehicle, unless the garage is already full."""
    vehicles = tuple(vehicles)
    if len(vehicles) >= limit:
        return Invalid(
            Reason.GARAGE_FULL, f"Maximum of {limit} vehicles reached"
        )
    return vehicles + (vehicle,)


def replace_vehicle(vehicles: Iterable[Vehicle], vehicle: Vehicle) -> GarageResult:
    """Swap in a new value for the vehicle with the same id."""
    vehicles = tuple(vehicles)
    if not any(v.id == vehicle.id for v in vehicles):
        return Invalid(Reason.UNKNOWN_VEHICLE, f"Unknown vehicle: {vehicle.id}")
    return tuple(vehicle if v.id == vehicle.id else v for v in vehicles)


def remove_vehicle(vehicles: Iterable[Vehicle], vehicle_id: str) -> GarageResult:
    """Drop the vehicle with the given id."""
    vehicles = tuple(vehicles)
    remaining = tuple(v for v in vehicles if v.id != vehicle_id)
    if len(remaining) == len(vehicles):
        return Invalid(Reason.UNKNOWN_VEHICLE, f"Unknown vehicle: {vehicle_id}")
    logger.info("Removed vehicle %s", vehicle_id)
    return remaining
