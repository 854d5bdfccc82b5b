"""ServiceDue dataclass for calculated service status."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .status import Status

if TYPE_CHECKING:
    from .item_config import MaintenanceItemConfig


@dataclass(frozen=True)
class ServiceDue:
    """Calculated service due information for a maintenance item."""

    config: "MaintenanceItemConfig"
    status: Status
    last_service_odometer: int
    next_due_odometer: int
    remaining: int
    last_service_date: Optional[str] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)

    @property
    def was_serviced(self) -> bool:
        return self.last_service_odometer > 0
