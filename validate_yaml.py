#!/usr/bin/env python3
"""Validate fleet YAML files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def find_duplicate_ids(data: dict) -> list[str]:
    """Ids must be unique per section; JSON Schema can't express that."""
    errors = []
    sections = {
        "clients": data.get("clients") or [],
        "trucks": data.get("trucks") or [],
        "serviceRecords": data.get("serviceRecords") or [],
    }
    for truck in sections["trucks"]:
        sections[f"trucks[{truck.get('id')}].schedules"] = truck.get("schedules") or []

    for name, items in sections.items():
        seen = set()
        for item in items:
            item_id = item.get("id")
            if item_id in seen:
                errors.append(f"Duplicate id '{item_id}' in {name}")
            seen.add(item_id)
    return errors


def find_dangling_references(data: dict) -> list[str]:
    """Trucks must point at known clients, records at known trucks."""
    errors = []
    client_ids = {c.get("id") for c in data.get("clients") or []}
    truck_ids = {t.get("id") for t in data.get("trucks") or []}
    for truck in data.get("trucks") or []:
        if truck.get("clientId") not in client_ids:
            errors.append(
                f"Truck '{truck.get('id')}' references unknown client '{truck.get('clientId')}'"
            )
    for record in data.get("serviceRecords") or []:
        if record.get("truckId") not in truck_ids:
            errors.append(
                f"Service record '{record.get('id')}' references unknown truck '{record.get('truckId')}'"
            )
    return errors


def validate_fleet_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single fleet YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
        errors.extend(find_duplicate_ids(data))
        errors.extend(find_dangling_references(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main():
    """Validate the given fleet files, or every file in the fleets/ directory."""
    schema = load_schema()

    if len(sys.argv) > 1:
        yaml_files = [Path(p) for p in sys.argv[1:]]
    else:
        fleets_dir = Path(__file__).parent / "fleets"
        if not fleets_dir.exists():
            print(f"Error: fleets directory not found: {fleets_dir}")
            return 1
        yaml_files = list(fleets_dir.glob("*.yaml")) + list(fleets_dir.glob("*.yml"))
        if not yaml_files:
            print(f"Warning: No YAML files found in {fleets_dir}")
            return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_fleet_file(filepath, schema)
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
