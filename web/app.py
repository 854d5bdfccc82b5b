"""Flask web application for vehicle maintenance tracking."""

import os
from datetime import date
from pathlib import Path
from typing import Optional

import yaml
from flask import Flask, jsonify, request

from models import (
    Invalid,
    Reason,
    ServiceDue,
    Status,
    add_vehicle,
    build_service_record,
    create_vehicle,
    find_vehicle,
    load_vehicles,
    new_config,
    record_to_dict,
    remove_vehicle,
    replace_vehicle,
    save_service,
    save_vehicles,
    update_odometer,
    vehicle_to_dict,
)
from models.formatting import parse_date, parse_distance

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Path to the garage file (relative to project root unless overridden)
app.config["DATA_FILE"] = Path(
    os.environ.get("AUTOCONTROL_DATA", Path(__file__).parent.parent / "garage.yaml")
)


class RequestError(Exception):
    """Malformed request body (missing or unparseable fields)."""


def get_vehicles():
    return load_vehicles(app.config["DATA_FILE"])


def store_vehicles(vehicles) -> None:
    save_vehicles(app.config["DATA_FILE"], vehicles)


def invalid_response(invalid: Invalid):
    status = 404 if invalid.reason == Reason.UNKNOWN_VEHICLE else 400
    return jsonify({"error": invalid.reason.value, "message": invalid.message}), status


def not_found(vehicle_id: str):
    return jsonify({"error": "not-found", "message": f"Vehicle '{vehicle_id}' not found"}), 404


def service_due_to_dict(svc: ServiceDue) -> dict:
    return {
        "configId": svc.config.id,
        "name": svc.config.name,
        "intervalDistance": svc.config.interval_distance,
        "status": svc.status.value,
        "lastServiceOdometer": svc.last_service_odometer,
        "lastServiceDate": svc.last_service_date,
        "nextDueOdometer": svc.next_due_odometer,
        "remaining": svc.remaining,
    }


def status_counts(all_status) -> dict:
    return {
        "overdue": sum(1 for s in all_status if s.status == Status.OVERDUE),
        "due_soon": sum(1 for s in all_status if s.status == Status.DUE_SOON),
        "ok": sum(1 for s in all_status if s.status == Status.OK),
    }


def vehicle_status_payload(vehicle) -> dict:
    """Vehicle with its status list, most urgent first."""
    all_status = vehicle.get_all_service_status()
    all_status.sort(key=lambda s: (s.status.urgency, s.remaining))
    return {
        "vehicle": vehicle_to_dict(vehicle),
        "status": [service_due_to_dict(s) for s in all_status],
        "counts": status_counts(all_status),
    }


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestError("Expected a JSON object")
    return data


def distance_field(data: dict, key: str, default=None):
    """Read a distance that may arrive as a number or as formatted text."""
    value = data.get(key, default)
    if value is None:
        raise RequestError(f"Missing field '{key}'")
    if isinstance(value, str):
        return parse_distance(value)
    return value


def list_field(data: dict, key: str) -> list:
    """Read a list of JSON objects; a missing key is an empty list."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise RequestError(f"Field '{key}' must be a list of objects")
    return value


def text_field(data: dict, key: str, default: Optional[str] = None) -> Optional[str]:
    """Read an optional string field."""
    value = data.get(key, default)
    if value is not None and not isinstance(value, str):
        raise RequestError(f"Field '{key}' must be a string")
    return value


@app.errorhandler(RequestError)
def handle_bad_request(e):
    return jsonify({"error": "bad-request", "message": str(e)}), 400


@app.errorhandler(yaml.YAMLError)
def handle_corrupt_data(e):
    app.logger.error("Could not read %s: %s", app.config["DATA_FILE"], e)
    return jsonify({"error": "storage", "message": "Garage file could not be read"}), 500


@app.route("/")
def index():
    """Dashboard data for all vehicles."""
    vehicles = []
    for vehicle in get_vehicles():
        all_status = vehicle.get_all_service_status()
        last_service = vehicle.last_service
        vehicles.append({
            "id": vehicle.id,
            "name": vehicle.name,
            "currentOdometer": vehicle.current_odometer,
            "lastUpdated": vehicle.last_updated,
            "services": len(vehicle.history),
            "lastService": last_service.date if last_service else None,
            **status_counts(all_status),
        })
    return jsonify({"vehicles": vehicles})


@app.route("/vehicles", methods=["POST"])
def create_vehicle_view():
    """Set up a new vehicle. Omitting 'items' seeds the default items."""
    data = json_body()

    configs = None
    if "items" in data:
        configs = [
            new_config(text_field(item, "name") or "", distance_field(item, "intervalDistance"))
            for item in list_field(data, "items")
        ]

    vehicle = create_vehicle(
        text_field(data, "name") or "", distance_field(data, "currentOdometer"), configs
    )
    if isinstance(vehicle, Invalid):
        return invalid_response(vehicle)

    garage = add_vehicle(get_vehicles(), vehicle)
    if isinstance(garage, Invalid):
        return invalid_response(garage)

    store_vehicles(garage)
    app.logger.info("Created vehicle %s", vehicle.id)
    return jsonify(vehicle_status_payload(vehicle)), 201


@app.route("/vehicle/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Vehicle with status for every maintenance item."""
    vehicle = find_vehicle(get_vehicles(), vehicle_id)
    if vehicle is None:
        return not_found(vehicle_id)

    payload = vehicle_status_payload(vehicle)

    status_filter = request.args.get("status", "").lower() or None
    if status_filter:
        payload["status"] = [s for s in payload["status"] if s["status"] == status_filter]

    return jsonify(payload)


@app.route("/vehicle/<vehicle_id>", methods=["DELETE"])
def delete_vehicle(vehicle_id: str):
    """Stop tracking a vehicle."""
    vehicles = get_vehicles()
    vehicle = find_vehicle(vehicles, vehicle_id)
    if vehicle is None:
        return not_found(vehicle_id)

    garage = remove_vehicle(vehicles, vehicle.id)
    if isinstance(garage, Invalid):
        return invalid_response(garage)

    store_vehicles(garage)
    return "", 204


@app.route("/vehicle/<vehicle_id>/odometer", methods=["POST"])
def update_odometer_view(vehicle_id: str):
    """Update the current odometer reading."""
    vehicles = get_vehicles()
    vehicle = find_vehicle(vehicles, vehicle_id)
    if vehicle is None:
        return not_found(vehicle_id)

    updated = update_odometer(vehicle, distance_field(json_body(), "odometer"))
    if isinstance(updated, Invalid):
        return invalid_response(updated)

    return _commit(vehicles, updated)


@app.route("/vehicle/<vehicle_id>/history")
def vehicle_history(vehicle_id: str):
    """Service history, lowest odometer first unless ?order=desc."""
    vehicle = find_vehicle(get_vehicles(), vehicle_id)
    if vehicle is None:
        return not_found(vehicle_id)

    reverse = request.args.get("order", "").lower() == "desc"
    history = []
    for record in vehicle.get_history_sorted(reverse=reverse):
        entry = record_to_dict(record)
        for item, line_item in zip(entry["lineItems"], record.line_items):
            item["displayName"] = vehicle.display_name(line_item)
        history.append(entry)

    return jsonify({"vehicleId": vehicle.id, "history": history})


@app.route("/vehicle/<vehicle_id>/services", methods=["POST"])
def add_service(vehicle_id: str):
    """Record a new service."""
    return _save_service(vehicle_id, record_id=None)


@app.route("/vehicle/<vehicle_id>/services/<record_id>", methods=["PUT"])
def edit_service(vehicle_id: str, record_id: str):
    """Replace an existing service."""
    return _save_service(vehicle_id, record_id=record_id)


def _save_service(vehicle_id: str, record_id):
    vehicles = get_vehicles()
    vehicle = find_vehicle(vehicles, vehicle_id)
    if vehicle is None:
        return not_found(vehicle_id)
    existing = None
    if record_id is not None:
        existing = vehicle.get_record(record_id)
        if existing is None:
            return jsonify({"error": "not-found", "message": f"Service '{record_id}' not found"}), 404

    data = json_body()

    # Fields left out of an edit keep the existing record's values
    if existing is not None:
        default_date = existing.date
        default_odometer = existing.odometer
        default_special = existing.special_work
    else:
        default_date = date.today().isoformat()
        default_odometer = vehicle.current_odometer
        default_special = None

    try:
        service_date = parse_date(text_field(data, "date") or default_date)
    except ValueError as e:
        raise RequestError(str(e))

    if "items" in data or existing is None:
        performed = {
            str(item.get("configId")): text_field(item, "observation") or ""
            for item in list_field(data, "items")
        }
    else:
        performed = {
            i.config_id: i.observation
            for i in existing.line_items
            if vehicle.get_config(i.config_id) is not None
        }

    record = build_service_record(
        vehicle,
        service_date,
        distance_field(data, "odometer", default_odometer),
        performed,
        text_field(data, "specialWork", default_special),
        record_id=record_id,
    )
    if isinstance(record, Invalid):
        return invalid_response(record)

    updated = save_service(vehicle, record, is_edit=record_id is not None)
    if isinstance(updated, Invalid):
        return invalid_response(updated)

    return _commit(vehicles, updated, status=200 if record_id else 201)


def _commit(vehicles, updated, status: int = 200):
    garage = replace_vehicle(vehicles, updated)
    if isinstance(garage, Invalid):
        return invalid_response(garage)
    store_vehicles(garage)
    return jsonify(vehicle_status_payload(updated)), status


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
