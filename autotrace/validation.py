"""JSON schema validation for vehicle files and incoming payloads."""

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from jsonschema import Draft7Validator, ValidationError, validate

from .dates import utc_now

SCHEMA_PATH = Path(__file__).parent / "schema.yaml"


@lru_cache(maxsize=1)
def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def _as_json_types(data: Any) -> Any:
    # YAML turns unquoted dates into date objects; the schema expects strings
    return json.loads(json.dumps(data, default=lambda value: value.isoformat()))


def validate_vehicle_file(filepath: Union[str, Path], schema: dict) -> List[str]:
    """Validate a single vehicle YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=_as_json_types(data), schema=schema, cls=Draft7Validator)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def validate_payload(data: Dict[str, Any], definition: str) -> None:
    """
    Validate a request payload against one of the schema definitions.

    Raises jsonschema.ValidationError on the first problem found. A new
    vehicle's model year may be at most one year ahead of the current one.
    """
    schema = load_schema()
    if definition not in schema["definitions"]:
        raise KeyError(f"Unknown schema definition: {definition}")

    definitions = copy.deepcopy(schema["definitions"])
    definitions["newVehicle"]["properties"]["year"]["maximum"] = utc_now().year + 1
    validate(
        instance=data,
        schema={"$ref": f"#/definitions/{definition}", "definitions": definitions},
        cls=Draft7Validator,
    )
