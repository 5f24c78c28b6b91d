"""SuggestionSummary dataclasses for computed maintenance suggestions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .dates import format_timestamp


@dataclass
class UpcomingMilestone:
    """A schedule entry and whether the estimated odometer has reached it."""

    km_mark: int
    checklist: List[str]
    overdue: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kmMark": self.km_mark,
            "checklist": list(self.checklist),
            "overdue": self.overdue,
        }


@dataclass
class SuggestionSummary:
    """Calculated suggestion for a vehicle at a given moment. Never persisted."""

    estimated_current_km: int
    monthly_average_km: Optional[float]
    next_maintenance_km: int
    km_to_next: int
    overdue: bool
    checklist: List[str] = field(default_factory=list)
    upcoming: List[UpcomingMilestone] = field(default_factory=list)
    estimated_due_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys; estimatedDueDate omitted when unknown."""
        data: Dict[str, Any] = {
            "estimatedCurrentKm": self.estimated_current_km,
            "monthlyAverageKm": self.monthly_average_km,
            "nextMaintenanceKm": self.next_maintenance_km,
            "kmToNext": self.km_to_next,
            "overdue": self.overdue,
            "checklist": list(self.checklist),
            "upcoming": [item.to_dict() for item in self.upcoming],
        }
        if self.estimated_due_date is not None:
            data["estimatedDueDate"] = format_timestamp(self.estimated_due_date)
        return data
