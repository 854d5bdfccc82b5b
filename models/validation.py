"""
Input validation for vehicles and service records.

Validators return None when the input is acceptable and an Invalid value
describing the first problem found otherwise. Nothing here raises for bad
user input; callers check the result and must not apply any change when
they get an Invalid back.
"""

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional

from .item_config import MaintenanceItemConfig
from .service_record import ServiceRecord


class Reason(Enum):
    """Why an input was rejected."""

    BLANK_NAME = "blank-name"
    INVALID_ODOMETER = "invalid-odometer"
    INVALID_INTERVAL = "invalid-interval"
    INVALID_DATE = "invalid-date"
    NO_ITEMS = "no-items"
    VACUOUS_RECORD = "vacuous-record"
    DUPLICATE_RECORD = "duplicate-record"
    ODOMETER_BELOW_HISTORY = "odometer-below-history"
    UNKNOWN_CONFIG = "unknown-config"
    UNKNOWN_VEHICLE = "unknown-vehicle"
    GARAGE_FULL = "garage-full"


@dataclass(frozen=True)
class Invalid:
    """A rejected input, with a machine-readable reason and a message."""

    reason: Reason
    message: str

    def __str__(self) -> str:
        return self.message


def is_valid_distance(value: Any) -> bool:
    """Check for a non-negative whole distance (int, or integral float)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer() and value >= 0
    return False


def is_valid_interval(value: Any) -> bool:
    """Check for a positive whole interval."""
    return is_valid_distance(value) and value > 0


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def is_iso_date(text: Any) -> bool:
    if not isinstance(text, str):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def validate_service_record(record: ServiceRecord) -> Optional[Invalid]:
    """
    Validate a service record before it is merged into history.

    A record must cover at least one maintenance item or describe some
    special work, carry a non-negative whole odometer reading and an ISO
    calendar date.
    """
    if record.is_vacuous:
        return Invalid(
            Reason.VACUOUS_RECORD,
            "Select at least one maintenance item or describe the special work",
        )
    if not is_valid_distance(record.odometer):
        return Invalid(
            Reason.INVALID_ODOMETER,
            f"Invalid odometer reading: {record.odometer!r}",
        )
    if not is_iso_date(record.date):
        return Invalid(Reason.INVALID_DATE, f"Invalid service date: {record.date!r}")
    return None


def validate_config(name: Optional[str], interval_distance: Any) -> Optional[Invalid]:
    """Validate a single maintenance item definition."""
    if is_blank(name):
        return Invalid(Reason.BLANK_NAME, "Maintenance item name cannot be blank")
    if not is_valid_interval(interval_distance):
        return Invalid(
            Reason.INVALID_INTERVAL,
            f"Invalid interval for '{name.strip()}': {interval_distance!r}",
        )
    return None


def validate_vehicle_creation(
    name: Optional[str],
    current_odometer: Any,
    configs: Iterable[MaintenanceItemConfig],
) -> Optional[Invalid]:
    """
    Validate the inputs for a new vehicle.

    Blank-named configs are ignored (they are unfinished form rows). An empty
    configs list is fine, but a list made only of blank rows is rejected.
    """
    if is_blank(name):
        return Invalid(Reason.BLANK_NAME, "Vehicle name cannot be blank")
    if not is_valid_distance(current_odometer):
        return Invalid(
            Reason.INVALID_ODOMETER,
            f"Invalid odometer reading: {current_odometer!r}",
        )

    configs = list(configs)
    kept = [c for c in configs if not is_blank(c.name)]
    if configs and not kept:
        return Invalid(Reason.NO_ITEMS, "Every maintenance item has a blank name")

    for config in kept:
        invalid = validate_config(config.name, config.interval_distance)
        if invalid is not None:
            return invalid
    return None
