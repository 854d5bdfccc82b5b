#!/usr/bin/env python3
"""Validate garage YAML files against the schema."""
import argparse
import os
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from models import load_vehicles, validate_service_record


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_invariants(filepath: Path) -> list[str]:
    """Check rules the schema cannot express: odometer and record consistency."""
    errors = []
    for vehicle in load_vehicles(filepath):
        if vehicle.current_odometer < vehicle.max_history_odometer:
            errors.append(
                f"{vehicle.name}: currentOdometer {vehicle.current_odometer} is below "
                f"recorded service at {vehicle.max_history_odometer}"
            )
        seen = set()
        for record in vehicle.history:
            if record.id in seen:
                errors.append(f"{vehicle.name}: duplicate service id {record.id}")
            seen.add(record.id)
            invalid = validate_service_record(record)
            if invalid is not None:
                errors.append(f"{vehicle.name}: service {record.id}: {invalid}")
    return errors


def validate_garage_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single garage YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    else:
        errors.extend(check_invariants(filepath))
    return errors


def main(argv=None):
    """Validate the given garage files (default: $AUTOCONTROL_DATA or garage.yaml)."""
    parser = argparse.ArgumentParser(description="Validate garage YAML files")
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        default=[Path(os.environ.get("AUTOCONTROL_DATA", "garage.yaml"))],
        help="Garage YAML files to check",
    )
    args = parser.parse_args(argv)
    schema = load_schema()

    all_valid = True
    for filepath in args.files:
        errors = validate_garage_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
