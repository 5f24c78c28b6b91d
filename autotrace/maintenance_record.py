"""MaintenanceRecord class for completed services."""

from datetime import datetime
from typing import Optional


class MaintenanceRecord:
    """A service performed on a vehicle."""

    def __init__(
            self,
            odometer: float,
            service_date: datetime,
            service_type: Optional[str] = None,
            workshop: Optional[str] = None,
            notes: Optional[str] = None,
    ):
        self.odometer = odometer
        self.service_date = service_date
        self.service_type = service_type
        self.workshop = workshop
        self.notes = notes
