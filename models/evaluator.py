"""Service status evaluation for maintenance items."""

from typing import Dict, Iterable, List, Optional, Sequence

from .calculations import calc_due_distance, check_status
from .item_config import MaintenanceItemConfig
from .service_due import ServiceDue
from .service_record import ServiceRecord


def find_last_service(
    history: Sequence[ServiceRecord], config_id: str
) -> Optional[ServiceRecord]:
    """
    Find the most recent service that covered an item.

    History is sorted ascending by odometer, so the first match scanning
    backwards has the highest odometer (ties go to the later record).
    """
    for record in reversed(history):
        if record.includes(config_id):
            return record
    return None


def _build_service_due(
    config: MaintenanceItemConfig,
    last_service: Optional[ServiceRecord],
    current_odometer: int,
) -> ServiceDue:
    last_odometer = last_service.odometer if last_service else 0
    next_due = calc_due_distance(last_odometer, config.interval_distance, current_odometer)
    remaining = next_due - current_odometer
    return ServiceDue(
        config=config,
        status=check_status(remaining),
        last_service_odometer=last_odometer,
        next_due_odometer=next_due,
        remaining=remaining,
        last_service_date=last_service.date if last_service else None,
    )


def evaluate(
    config: MaintenanceItemConfig,
    history: Sequence[ServiceRecord],
    current_odometer: int,
) -> ServiceDue:
    """
    Calculate when a maintenance item is next due.

    history must be sorted ascending by odometer, as Vehicle.history is.

    Logic:
    - Find the last service that covered this item (0 if never serviced)
    - If serviced: due at last_service + interval
    - If never serviced: due at current_odometer + interval
    - remaining = due - current; negative is overdue, under the due-soon
      band is due soon, anything else is ok
    """
    last_service = find_last_service(history, config.id)
    return _build_service_due(config, last_service, current_odometer)


def evaluate_all(
    configs: Iterable[MaintenanceItemConfig],
    history: Sequence[ServiceRecord],
    current_odometer: int,
) -> List[ServiceDue]:
    """Evaluate every item in one pass over history. Same results as evaluate()."""
    latest: Dict[str, ServiceRecord] = {}
    # Ascending order: later records overwrite earlier ones
    for record in history:
        for item in record.line_items:
            latest[item.config_id] = record

    return [
        _build_service_due(config, latest.get(config.id), current_odometer)
        for config in configs
    ]
