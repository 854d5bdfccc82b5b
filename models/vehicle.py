"""Vehicle class - the main aggregate for vehicle data and calculations."""

from dataclasses import dataclass
from operator import attrgetter
from typing import List, Optional, Tuple

from .item_config import MaintenanceItemConfig
from .service_record import ServiceLineItem, ServiceRecord
from .service_due import ServiceDue
from .evaluator import evaluate, evaluate_all, find_last_service


@dataclass(frozen=True)
class Vehicle:
    """
    A tracked vehicle: odometer, maintenance items and service history.

    Vehicles are values. Changes go through models.mutations, which hands
    back a new Vehicle; history is kept sorted ascending by odometer.
    """

    id: str
    name: str
    current_odometer: int
    last_updated: str
    configs: Tuple[MaintenanceItemConfig, ...] = ()
    history: Tuple[ServiceRecord, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "configs", tuple(self.configs))
        # Stable, so records at the same odometer keep their order
        object.__setattr__(
            self, "history", tuple(sorted(self.history, key=attrgetter("odometer")))
        )

    @property
    def max_history_odometer(self) -> int:
        """Highest odometer reading across recorded services (0 if none)."""
        return max((r.odometer for r in self.history), default=0)

    @property
    def last_service(self) -> Optional[ServiceRecord]:
        """The service with the highest odometer reading."""
        return self.history[-1] if self.history else None

    def get_config(self, config_id: str) -> Optional[MaintenanceItemConfig]:
        """Find a maintenance item by id."""
        for config in self.configs:
            if config.id == config_id:
                return config
        return None

    def find_config(self, key: str) -> Optional[MaintenanceItemConfig]:
        """Find a maintenance item by id, falling back to case-insensitive name."""
        config = self.get_config(key)
        if config is not None:
            return config
        wanted = key.strip().lower()
        for config in self.configs:
            if config.name.strip().lower() == wanted:
                return config
        return None

    def get_record(self, record_id: str) -> Optional[ServiceRecord]:
        """Find a service record by id."""
        for record in self.history:
            if record.id == record_id:
                return record
        return None

    def get_last_service(self, config_id: str) -> Optional[ServiceRecord]:
        """Get the most recent service that covered an item."""
        return find_last_service(self.history, config_id)

    def display_name(self, line_item: ServiceLineItem) -> str:
        """Current item name, or the name recorded at service time if removed."""
        config = self.get_config(line_item.config_id)
        return config.name if config else line_item.name

    def get_history_sorted(self, reverse: bool = False) -> List[ServiceRecord]:
        """History by odometer, lowest first unless reverse is set."""
        if reverse:
            return list(reversed(self.history))
        return list(self.history)

    def calculate_service_due(self, config: MaintenanceItemConfig) -> ServiceDue:
        """Calculate when a maintenance item is next due."""
        return evaluate(config, self.history, self.current_odometer)

    def get_all_service_status(self) -> List[ServiceDue]:
        """Calculate service status for every maintenance item."""
        return evaluate_all(self.configs, self.history, self.current_odometer)
