"""YAML loading and saving utilities for the vehicle collection."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import yaml

from .item_config import MaintenanceItemConfig
from .service_record import ServiceLineItem, ServiceRecord
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

Parsed = Union[MaintenanceItemConfig, ServiceLineItem, ServiceRecord, Vehicle, dict]


def _parse_object(dct: Dict[str, Any]) -> Parsed:
    """Parse dictionary into appropriate object type."""
    # Line item inside a service record
    if "configId" in dct:
        return ServiceLineItem(
            dct["configId"],
            dct.get("name") or "",
            dct.get("observation") or "",
        )
    # Service record
    elif "odometer" in dct and "date" in dct:
        return ServiceRecord(
            dct["id"],
            dct["date"],
            dct["odometer"],
            dct.get("lineItems") or (),
            dct.get("specialWork"),
        )
    # Maintenance item
    elif "intervalDistance" in dct:
        return MaintenanceItemConfig(dct["id"], dct["name"], dct["intervalDistance"])
    # Vehicle
    elif "currentOdometer" in dct:
        return Vehicle(
            dct["id"],
            dct["name"],
            dct["currentOdometer"],
            dct.get("lastUpdated") or "",
            dct.get("configs") or (),
            dct.get("history") or (),
        )
    else:
        # Top-level document
        return dct


def load_vehicles(filename: Union[str, Path]) -> List[Vehicle]:
    """Load every vehicle from a YAML file. A missing file is an empty garage."""
    path = Path(filename)
    if not path.exists():
        logger.debug("No garage file at %s, starting empty", path)
        return []
    with open(path, "rb") as fp:
        json_data = json.dumps(yaml.load(fp, Loader=yaml.SafeLoader) or {}, default=str)
        data = json.loads(json_data, object_hook=_parse_object)
    return list(data.get("vehicles") or [])


def _line_item_to_dict(item: ServiceLineItem) -> Dict[str, Any]:
    d: Dict[str, Any] = {"configId": item.config_id, "name": item.name}
    if item.observation:
        d["observation"] = item.observation
    return d


def record_to_dict(record: ServiceRecord) -> Dict[str, Any]:
    """Serialize a ServiceRecord to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": record.id,
        "date": record.date,
        "odometer": record.odometer,
        "lineItems": [_line_item_to_dict(i) for i in record.line_items],
    }
    if record.special_work is not None:
        d["specialWork"] = record.special_work
    return d


def _config_to_dict(config: MaintenanceItemConfig) -> Dict[str, Any]:
    return {
        "id": config.id,
        "name": config.name,
        "intervalDistance": config.interval_distance,
    }


def vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the YAML dict format (camelCase keys)."""
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "currentOdometer": vehicle.current_odometer,
        "lastUpdated": vehicle.last_updated,
        "configs": [_config_to_dict(c) for c in vehicle.configs],
        "history": [record_to_dict(r) for r in vehicle.history],
    }


def save_vehicles(filename: Union[str, Path], vehicles: Iterable[Vehicle]) -> None:
    """Write the whole vehicle collection to a YAML file, replacing it."""
    data = {"vehicles": [vehicle_to_dict(v) for v in vehicles]}

    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )
    logger.debug("Saved %d vehicle(s) to %s", len(data["vehicles"]), filename)
