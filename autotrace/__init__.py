"""
Predictive maintenance suggestions for vehicles.

This package provides:
- Category: Vehicle categories (car, motorcycle, truck, other)
- Milestone / get_profile: Preventive schedules per category
- MaintenanceRecord: Completed services
- Vehicle: Main aggregate combining profile, history and certificates
- build_suggestions: The suggestion engine
- SuggestionSummary: Computed suggestion output
- Certificate: Issued maintenance certificates
"""

from .category import Category
from .milestone import Milestone
from .profiles import PREVENTIVE_PROFILES, get_profile
from .maintenance_record import MaintenanceRecord
from .suggestion import SuggestionSummary, UpcomingMilestone
from .calculations import (
    MONTH_DURATION,
    estimate_current_km,
    project_due_date,
    resolve_monthly_rate,
    round_half_up,
    select_next_milestone,
)
from .engine import build_suggestions
from .vehicle import Vehicle, normalize_plate
from .certificate import (
    Certificate,
    issue_certificate,
    render_certificate,
    verification_payload,
)
from .loader import (
    load_vehicle,
    load_vehicles,
    save_maintenance_record,
    save_certificate,
    find_certificate,
)

__all__ = [
    "Category",
    "Milestone",
    "PREVENTIVE_PROFILES",
    "get_profile",
    "MaintenanceRecord",
    "SuggestionSummary",
    "UpcomingMilestone",
    "MONTH_DURATION",
    "estimate_current_km",
    "project_due_date",
    "resolve_monthly_rate",
    "round_half_up",
    "select_next_milestone",
    "build_suggestions",
    "Vehicle",
    "normalize_plate",
    "Certificate",
    "issue_certificate",
    "render_certificate",
    "verification_payload",
    "load_vehicle",
    "load_vehicles",
    "save_maintenance_record",
    "save_certificate",
    "find_certificate",
]
