#!/usr/bin/env python3
"""Validate vehicle YAML files against the schema."""
import argparse
import sys
from pathlib import Path

from autotrace.config import get_settings
from autotrace.loader import list_vehicle_files
from autotrace.validation import load_schema, validate_vehicle_file


def main(argv=None):
    """Validate all vehicle YAML files in the vehicles directory."""
    parser = argparse.ArgumentParser(description="Validate vehicle YAML files")
    parser.add_argument(
        "vehicles_dir",
        type=Path,
        nargs="?",
        help="Directory of vehicle files (default: AUTOTRACE_VEHICLES_DIR or ./vehicles)",
    )
    args = parser.parse_args(argv)

    schema = load_schema()
    vehicles_dir = args.vehicles_dir or get_settings().vehicles_dir

    if not vehicles_dir.exists():
        print(f"Error: vehicles directory not found: {vehicles_dir}")
        return 1

    yaml_files = list_vehicle_files(vehicles_dir)

    if not yaml_files:
        print(f"Warning: No YAML files found in {vehicles_dir}")
        return 0

    all_valid = True
    for filepath in yaml_files:
        errors = validate_vehicle_file(filepath, schema)
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
