"""Flask web application for predictive vehicle maintenance."""

from pathlib import Path
from typing import Any, Optional

from flask import Flask, Response, jsonify, request
from jsonschema import ValidationError
from werkzeug.exceptions import HTTPException

from autotrace.category import Category
from autotrace.certificate import issue_certificate, render_certificate
from autotrace.config import get_settings
from autotrace.dates import parse_timestamp, utc_now
from autotrace.loader import (
    create_vehicle,
    find_certificate,
    load_vehicle,
    load_vehicles,
    maintenance_to_dict,
    save_certificate,
    save_maintenance_record,
    vehicle_to_dict,
)
from autotrace.logging_utils import get_logger, setup_logging
from autotrace.maintenance_record import MaintenanceRecord
from autotrace.validation import validate_payload
from autotrace.vehicle import Vehicle, normalize_plate

settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger("web")

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config["VEHICLES_DIR"] = settings.vehicles_dir


class HttpError(Exception):
    """Error answered with a given HTTP status and JSON body."""

    def __init__(self, status: int, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details


def vehicles_dir() -> Path:
    return Path(app.config["VEHICLES_DIR"])


def get_vehicle_path(vehicle_id: str) -> Path:
    """Get full path for a vehicle ID."""
    if not vehicle_id or "/" in vehicle_id or "\\" in vehicle_id or vehicle_id.startswith("."):
        raise HttpError(400, "Invalid vehicle id")
    return vehicles_dir() / f"{vehicle_id}.yaml"


def get_vehicle(vehicle_id: str) -> Vehicle:
    """Load a vehicle or answer 404."""
    path = get_vehicle_path(vehicle_id)
    if not path.exists():
        raise HttpError(404, "Vehicle not found")
    return load_vehicle(path)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise HttpError(400, "Request body must be a JSON object")
    return data


def parse_query_date(name: str):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except (ValueError, OverflowError):
        raise HttpError(400, f'Invalid "{name}" parameter') from None


def vehicle_json(vehicle: Vehicle) -> dict:
    data = {"id": vehicle.id}
    data.update(vehicle_to_dict(vehicle))
    return data


# =============================================================================
# Request logging and error handling
# =============================================================================


@app.before_request
def log_request():
    logger.info("%s %s", request.method, request.full_path.rstrip("?"))


@app.errorhandler(HttpError)
def handle_http_error(error: HttpError):
    return jsonify({"error": error.message, "details": error.details}), error.status


@app.errorhandler(ValidationError)
def handle_validation_error(error: ValidationError):
    return (
        jsonify(
            {
                "error": "Validation failed",
                "details": {
                    "message": error.message,
                    "path": [str(p) for p in error.path],
                },
            }
        ),
        400,
    )


@app.errorhandler(404)
def handle_not_found(error):
    return jsonify({"error": "Not found", "details": None}), 404


@app.errorhandler(405)
def handle_method_not_allowed(error):
    return jsonify({"error": "Method not allowed", "details": None}), 405


@app.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return jsonify({"error": error.description, "details": None}), error.code
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"error": "Unexpected internal error"}), 500


# =============================================================================
# Routes
# =============================================================================


@app.route("/dashboard")
def dashboard():
    """Next milestone and overdue flag for every vehicle."""
    now = utc_now()
    entries = [vehicle.dashboard_entry(now) for vehicle in load_vehicles(vehicles_dir())]
    return jsonify({"dashboard": entries})


@app.route("/vehicles", methods=["GET"])
def list_vehicles():
    vehicles = load_vehicles(vehicles_dir())
    return jsonify({"vehicles": [vehicle_json(v) for v in vehicles]})


@app.route("/vehicles", methods=["POST"])
def register_vehicle():
    """Create a vehicle file from a JSON payload."""
    data = json_body()
    validate_payload(data, "newVehicle")

    plate = normalize_plate(data["plate"])
    vehicle = Vehicle(
        plate=plate,
        model=data["model"],
        manufacturer=data["manufacturer"],
        year=data["year"],
        category=Category.parse(data["category"]),
        initial_odometer=data.get("initialOdometer", 0),
        created_at=utc_now(),
        average_monthly_km=data["averageMonthlyKm"],
        owner_name=data.get("owner"),
    )

    path = get_vehicle_path(vehicle.id)
    if path.exists():
        raise HttpError(409, "Vehicle already registered")

    vehicles_dir().mkdir(parents=True, exist_ok=True)
    create_vehicle(path, vehicle)
    return jsonify({"vehicle": vehicle_json(load_vehicle(path))}), 201


@app.route("/vehicles/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Vehicle, its maintenance history and the current suggestion."""
    vehicle = get_vehicle(vehicle_id)
    summary = vehicle.suggestions(utc_now())
    return jsonify(
        {
            "vehicle": vehicle_json(vehicle),
            "maintenances": [maintenance_to_dict(m) for m in vehicle.maintenances],
            "suggestions": summary.to_dict(),
        }
    )


@app.route("/vehicles/<vehicle_id>/maintenance", methods=["GET"])
def list_maintenances(vehicle_id: str):
    """Maintenance history, optionally limited with ?from= and ?to=."""
    start = parse_query_date("from")
    end = parse_query_date("to")
    vehicle = get_vehicle(vehicle_id)
    records = vehicle.get_maintenances_between(start, end)
    return jsonify({"maintenances": [maintenance_to_dict(m) for m in records]})


@app.route("/vehicles/<vehicle_id>/maintenance", methods=["POST"])
def add_maintenance(vehicle_id: str):
    """Record a completed service."""
    path = get_vehicle_path(vehicle_id)
    if not path.exists():
        raise HttpError(404, "Vehicle not found")

    data = json_body()
    validate_payload(data, "newMaintenance")
    try:
        service_date = parse_timestamp(data["serviceDate"])
    except (ValueError, OverflowError):
        raise HttpError(400, 'Invalid "serviceDate"') from None

    record = MaintenanceRecord(
        odometer=data["odometer"],
        service_date=service_date,
        service_type=data["serviceType"],
        workshop=data["workshop"],
        notes=data.get("notes"),
    )
    save_maintenance_record(path, record)
    return jsonify({"maintenance": maintenance_to_dict(record)}), 201


@app.route("/vehicles/<vehicle_id>/suggestions")
def vehicle_suggestions(vehicle_id: str):
    vehicle = get_vehicle(vehicle_id)
    return jsonify({"suggestions": vehicle.suggestions(utc_now()).to_dict()})


@app.route("/certificates/validate/<certificate_id>")
def validate_certificate(certificate_id: str):
    """Public lookup of an issued certificate."""
    found = find_certificate(vehicles_dir(), certificate_id)
    if found is None:
        raise HttpError(404, "Certificate not found")
    _, certificate = found
    return jsonify({"certificate": certificate.to_dict()})


@app.route("/certificates/<vehicle_id>")
def vehicle_certificate(vehicle_id: str):
    """Issue, record and return a plain-text certificate."""
    vehicle = get_vehicle(vehicle_id)
    now = utc_now()
    summary = vehicle.suggestions(now)
    certificate = issue_certificate(vehicle, summary, now)
    document = render_certificate(vehicle, summary, certificate, settings)

    save_certificate(get_vehicle_path(vehicle_id), certificate)

    response = Response(document, mimetype="text/plain")
    response.headers["Content-Disposition"] = (
        f'inline; filename="autotrace-certificate-{vehicle.plate}.txt"'
    )
    response.headers["X-Certificate-Id"] = certificate.id
    return response


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
