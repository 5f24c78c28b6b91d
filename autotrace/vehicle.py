"""Vehicle class - the main aggregate for vehicle data and suggestions."""

from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .category import Category
from .dates import format_timestamp
from .engine import build_suggestions
from .maintenance_record import MaintenanceRecord
from .suggestion import SuggestionSummary

if TYPE_CHECKING:
    from .certificate import Certificate


class Vehicle:
    """Vehicle profile with its maintenance history and issued certificates."""

    def __init__(
        self,
        plate: str,
        model: str,
        manufacturer: str,
        year: int,
        category: Category,
        initial_odometer: float,
        created_at: datetime,
        average_monthly_km: Optional[float] = None,
        owner_name: Optional[str] = None,
        maintenances: Optional[List[MaintenanceRecord]] = None,
        certificates: Optional[List["Certificate"]] = None,
        vehicle_id: Optional[str] = None,
    ):
        self.plate = plate
        self.model = model
        self.manufacturer = manufacturer
        self.year = year
        self.category = Category.parse(category)
        self.initial_odometer = initial_odometer
        self.created_at = created_at
        self.average_monthly_km = average_monthly_km
        self.owner_name = owner_name
        self.maintenances = maintenances or []
        self.certificates = certificates or []
        self.id = vehicle_id or normalize_plate(plate).lower()

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.year} {self.manufacturer} {self.model} ({self.plate})"

    @property
    def last_maintenance(self) -> Optional[MaintenanceRecord]:
        """Most recent service by date."""
        if not self.maintenances:
            return None
        return self.get_maintenances_sorted()[-1]

    def get_maintenances_sorted(self, reverse: bool = False) -> List[MaintenanceRecord]:
        """Services ordered by date, oldest first unless `reverse`."""
        return sorted(self.maintenances, key=lambda m: m.service_date, reverse=reverse)

    def get_maintenances_between(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[MaintenanceRecord]:
        """Services with start <= service_date <= end, oldest first. Bounds are optional."""
        return [
            m
            for m in self.get_maintenances_sorted()
            if (start is None or m.service_date >= start)
            and (end is None or m.service_date <= end)
        ]

    def suggestions(
        self, now: datetime, default_monthly_km: Optional[float] = None
    ) -> SuggestionSummary:
        """Maintenance suggestion at `now` based on the full history."""
        return build_suggestions(
            self, self.get_maintenances_sorted(), now, default_monthly_km
        )

    def dashboard_entry(
        self, now: datetime, default_monthly_km: Optional[float] = None
    ) -> Dict[str, Any]:
        """Compact status used by the dashboard listing."""
        summary = self.suggestions(now, default_monthly_km)
        last = self.last_maintenance
        return {
            "vehicleId": self.id,
            "totalMaintenances": len(self.maintenances),
            "lastMaintenanceDate": format_timestamp(last.service_date) if last else None,
            "nextMaintenanceKm": summary.next_maintenance_km,
            "overdue": summary.overdue,
        }


def normalize_plate(plate: str) -> str:
    """Strip whitespace and upper-case a licence plate."""
    return "".join(plate.split()).upper()
