"""MaintenanceItemConfig class for recurring maintenance items."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MaintenanceItemConfig:
    """A maintenance item the owner wants tracked, due every interval_distance."""

    id: str
    name: str
    interval_distance: int
