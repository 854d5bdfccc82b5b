"""
Vehicle maintenance tracking models.

This package provides data models and the status engine for tracking
vehicle maintenance:
- Status: Urgency tiers (OVERDUE, DUE_SOON, OK)
- MaintenanceItemConfig: Items to track and their intervals
- ServiceRecord / ServiceLineItem: Performed services
- ServiceDue: Calculated service status
- Vehicle: Main aggregate combining all data
- reconcile / evaluate: History merging and status derivation
- mutations: Validated operations returning new Vehicle values
"""

from .status import Status
from .item_config import MaintenanceItemConfig
from .service_record import ServiceLineItem, ServiceRecord
from .service_due import ServiceDue
from .vehicle import Vehicle
from .validation import (
    Invalid,
    Reason,
    validate_service_record,
    validate_vehicle_creation,
)
from .calculations import calc_due_distance, check_status
from .reconciler import reconcile
from .evaluator import evaluate, evaluate_all, find_last_service
from .mutations import (
    add_config,
    build_service_record,
    create_vehicle,
    default_configs,
    new_config,
    remove_config,
    save_service,
    update_config,
    update_odometer,
)
from .garage import add_vehicle, find_vehicle, remove_vehicle, replace_vehicle
from .loader import load_vehicles, record_to_dict, save_vehicles, vehicle_to_dict

__all__ = [
    "Status",
    "MaintenanceItemConfig",
    "ServiceLineItem",
    "ServiceRecord",
    "ServiceDue",
    "Vehicle",
    "Invalid",
    "Reason",
    "validate_service_record",
    "validate_vehicle_creation",
    "calc_due_distance",
    "check_status",
    "reconcile",
    "evaluate",
    "evaluate_all",
    "find_last_service",
    "add_config",
    "build_service_record",
    "create_vehicle",
    "default_configs",
    "new_config",
    "remove_config",
    "save_service",
    "update_config",
    "update_odometer",
    "add_vehicle",
    "find_vehicle",
    "remove_vehicle",
    "replace_vehicle",
    "load_vehicles",
    "record_to_dict",
    "save_vehicles",
    "vehicle_to_dict",
]
