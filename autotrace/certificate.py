"""Maintenance certificates: minting, verification payload and text rendering."""

import json
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from tabulate import tabulate

from .config import Settings, get_settings
from .dates import format_day, format_timestamp
from .suggestion import SuggestionSummary

if TYPE_CHECKING:
    from .vehicle import Vehicle


@dataclass
class Certificate:
    """An issued certificate, kept so it can be validated later by id."""

    id: str
    vehicle_id: str
    vehicle_plate: str
    generated_at: datetime
    maintenance_count: int
    overdue: bool
    last_maintenance_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "vehicleId": self.vehicle_id,
            "vehiclePlate": self.vehicle_plate,
            "generatedAt": format_timestamp(self.generated_at),
            "maintenanceCount": self.maintenance_count,
            "lastMaintenanceDate": format_timestamp(self.last_maintenance_date),
            "overdue": self.overdue,
        }


def issue_certificate(
    vehicle: "Vehicle", summary: SuggestionSummary, now: datetime
) -> Certificate:
    """Mint a new certificate for the vehicle's current state."""
    last = vehicle.last_maintenance
    return Certificate(
        id=str(uuid.uuid4()),
        vehicle_id=vehicle.id,
        vehicle_plate=vehicle.plate,
        generated_at=now,
        maintenance_count=len(vehicle.maintenances),
        overdue=summary.overdue,
        last_maintenance_date=last.service_date if last else None,
    )


def verification_payload(certificate: Certificate) -> str:
    """JSON payload pointing back to the certificate, for embedding in a scannable code."""
    return json.dumps(
        {
            "certificateId": certificate.id,
            "vehicleId": certificate.vehicle_id,
            "plate": certificate.vehicle_plate,
            "generatedAt": format_timestamp(certificate.generated_at),
        }
    )


def _line(label: str, value: Any) -> str:
    if value is None or value == "":
        return f"{label}: -"
    return f"{label}: {value}"


def _km(value: Optional[float]) -> Optional[str]:
    return None if value is None else f"{value:,.0f} km"


def render_certificate(
    vehicle: "Vehicle",
    summary: SuggestionSummary,
    certificate: Certificate,
    settings: Optional[Settings] = None,
) -> str:
    """Plain-text certificate document."""
    settings = settings or get_settings()
    lines: List[str] = [
        settings.certificate_title,
        "=" * len(settings.certificate_title),
        "",
        _line("Certificate ID", certificate.id),
        _line("Issued by", settings.certificate_issuer),
        _line("Issued at", format_timestamp(certificate.generated_at)),
        "",
        "Vehicle",
        "-------",
        _line("Owner", vehicle.owner_name),
        _line("Plate", vehicle.plate),
        _line("Model", vehicle.model),
        _line("Manufacturer", vehicle.manufacturer),
        _line("Year", vehicle.year),
        _line("Category", vehicle.category.value),
        _line("Average km/month", _km(summary.monthly_average_km)),
        "",
        "Maintenance history",
        "-------------------",
    ]

    maintenances = vehicle.get_maintenances_sorted()
    if maintenances:
        rows = [
            [format_day(m.service_date), m.service_type or "-", f"{m.odometer:,.0f} km", m.workshop or "-"]
            for m in maintenances
        ]
        lines.append(
            tabulate(rows, headers=["Date", "Service", "Odometer", "Workshop"], tablefmt="simple")
        )
    else:
        lines.append("No maintenance recorded.")

    lines += [
        "",
        "Next recommendations",
        "--------------------",
        _line("Next maintenance at", f"{summary.next_maintenance_km:,} km"),
        _line("Km remaining", f"{summary.km_to_next:,} km"),
        _line("Status", "Overdue" if summary.overdue else "Up to date"),
    ]
    if summary.estimated_due_date is not None:
        lines.append(_line("Estimated due date", format_day(summary.estimated_due_date)))

    lines += ["", "Checklist", "---------"]
    lines += [f"* {item}" for item in summary.checklist]

    lines += [
        "",
        "Verification payload (scan to validate this certificate):",
        verification_payload(certificate),
    ]
    return "\n".join(lines) + "\n"
