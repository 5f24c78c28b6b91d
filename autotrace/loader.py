"""YAML loading and saving utilities for vehicle data."""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .category import Category
from .certificate import Certificate
from .dates import format_timestamp, parse_timestamp
from .logging_utils import get_logger
from .maintenance_record import MaintenanceRecord
from .vehicle import Vehicle

logger = get_logger(__name__)


def _json_default(value: Any) -> str:
    # Unquoted YAML dates/timestamps arrive as date/datetime objects
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _parse_object(
    dct: Dict[str, Any]
) -> Union[MaintenanceRecord, Certificate, Vehicle, dict]:
    """Parse dictionary into appropriate object type."""
    # Maintenance record
    if "serviceDate" in dct and "odometer" in dct:
        return MaintenanceRecord(
            dct["odometer"],
            parse_timestamp(dct["serviceDate"]),
            dct.get("serviceType"),
            dct.get("workshop"),
            dct.get("notes"),
        )
    # Certificate
    elif "vehiclePlate" in dct and "generatedAt" in dct:
        last_date = dct.get("lastMaintenanceDate")
        return Certificate(
            id=dct["id"],
            vehicle_id=dct["vehicleId"],
            vehicle_plate=dct["vehiclePlate"],
            generated_at=parse_timestamp(dct["generatedAt"]),
            maintenance_count=dct.get("maintenanceCount", 0),
            overdue=bool(dct.get("overdue")),
            last_maintenance_date=parse_timestamp(last_date) if last_date else None,
        )
    # Top-level vehicle file
    elif "vehicle" in dct:
        info = dct["vehicle"]
        return Vehicle(
            plate=info["plate"],
            model=info["model"],
            manufacturer=info["manufacturer"],
            year=info["year"],
            category=Category.parse(info.get("category")),
            initial_odometer=info.get("initialOdometer", 0),
            created_at=parse_timestamp(info["createdAt"]),
            average_monthly_km=info.get("averageMonthlyKm"),
            owner_name=info.get("owner"),
            maintenances=dct.get("maintenances"),
            certificates=dct.get("certificates"),
        )
    else:
        # Vehicle info block, consumed by the top-level branch above
        return dct


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """Load a vehicle from a YAML file. The vehicle id is the file stem."""
    with open(filename, "rb") as fp:
        raw = yaml.load(fp, Loader=yaml.SafeLoader)
    json_data = json.dumps(raw, default=_json_default)
    vehicle = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(vehicle, Vehicle):
        raise ValueError(f"Not a vehicle file (missing 'vehicle' section): {filename}")
    vehicle.id = Path(filename).stem
    vehicle.maintenances = vehicle.get_maintenances_sorted()
    return vehicle


def list_vehicle_files(directory: Union[str, Path]) -> List[Path]:
    """All vehicle YAML files in a directory, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))


def load_vehicles(directory: Union[str, Path]) -> List[Vehicle]:
    """Load every vehicle in a directory, oldest first."""
    vehicles = [load_vehicle(path) for path in list_vehicle_files(directory)]
    return sorted(vehicles, key=lambda v: v.created_at)


def maintenance_to_dict(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a MaintenanceRecord to the YAML/JSON dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "serviceDate": format_timestamp(record.service_date),
        "odometer": record.odometer,
    }
    if record.service_type is not None:
        d["serviceType"] = record.service_type
    if record.workshop is not None:
        d["workshop"] = record.workshop
    if record.notes is not None:
        d["notes"] = record.notes
    return d


def vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize the vehicle info block (camelCase keys)."""
    d: Dict[str, Any] = {
        "plate": vehicle.plate,
        "model": vehicle.model,
        "manufacturer": vehicle.manufacturer,
        "year": vehicle.year,
        "category": vehicle.category.value,
        "initialOdometer": vehicle.initial_odometer,
        "createdAt": format_timestamp(vehicle.created_at),
    }
    if vehicle.average_monthly_km is not None:
        d["averageMonthlyKm"] = vehicle.average_monthly_km
    if vehicle.owner_name is not None:
        d["owner"] = vehicle.owner_name
    return d


def _read(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader)


def _write(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def create_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """
    Create a new vehicle YAML file.

    Initializes with empty maintenances and certificates.
    Raises FileExistsError if the file already exists.
    """
    path = Path(filename)
    if path.exists():
        raise FileExistsError(f"Vehicle file already exists: {path}")

    data: Dict[str, Any] = {
        "vehicle": vehicle_to_dict(vehicle),
        "maintenances": [],
        "certificates": [],
    }
    _write(path, data)
    logger.info("Created vehicle %s at %s", vehicle.plate, path)


def save_maintenance_record(filename: Union[str, Path], record: MaintenanceRecord) -> None:
    """
    Append a maintenance record to a vehicle YAML file.

    Loads the raw YAML, appends the record to the maintenances list,
    and writes back to the file.
    """
    data = _read(filename)
    if data.get("maintenances") is None:
        data["maintenances"] = []

    data["maintenances"].append(maintenance_to_dict(record))
    _write(filename, data)
    logger.info(
        "Saved maintenance at %s km to %s", f"{record.odometer:,.0f}", filename
    )


def save_certificate(filename: Union[str, Path], certificate: Certificate) -> None:
    """Append an issued certificate to a vehicle YAML file."""
    data = _read(filename)
    if data.get("certificates") is None:
        data["certificates"] = []

    entry = certificate.to_dict()
    if entry["lastMaintenanceDate"] is None:
        del entry["lastMaintenanceDate"]
    data["certificates"].append(entry)
    _write(filename, data)
    logger.info("Saved certificate %s to %s", certificate.id, filename)


def find_certificate(
    directory: Union[str, Path], certificate_id: str
) -> Optional[Tuple[Vehicle, Certificate]]:
    """Find an issued certificate by id across all vehicles in a directory."""
    for path in list_vehicle_files(directory):
        vehicle = load_vehicle(path)
        for certificate in vehicle.certificates:
            if certificate.id == certificate_id:
                return vehicle, certificate
    return None
