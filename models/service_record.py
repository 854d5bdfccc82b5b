"""ServiceRecord and ServiceLineItem classes for performed maintenance."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ServiceLineItem:
    """
    One maintenance item performed during a service.

    config_id is a lookup-only reference and may point to an item that has
    since been removed; name is the item name at the time of service.
    """

    config_id: str
    name: str
    observation: str = ""


@dataclass(frozen=True)
class ServiceRecord:
    """A service visit: date, odometer reading and the work performed."""

    id: str
    date: str
    odometer: int
    line_items: Tuple[ServiceLineItem, ...] = ()
    special_work: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "line_items", tuple(self.line_items))

    def includes(self, config_id: str) -> bool:
        """Check whether this service covered the given maintenance item."""
        return any(item.config_id == config_id for item in self.line_items)

    @property
    def is_vacuous(self) -> bool:
        """True when nothing was recorded as performed."""
        return not self.line_items and not (self.special_work or "").strip()
