"""Predictive maintenance suggestion engine."""

from datetime import datetime
from typing import Optional, Sequence, TYPE_CHECKING

from .calculations import (
    baseline_for,
    estimate_current_km,
    project_due_date,
    resolve_monthly_rate,
    round_half_up,
    select_next_milestone,
)
from .profiles import get_profile
from .suggestion import SuggestionSummary, UpcomingMilestone

if TYPE_CHECKING:
    from .maintenance_record import MaintenanceRecord
    from .vehicle import Vehicle


def build_suggestions(
    vehicle: "Vehicle",
    maintenances: Sequence["MaintenanceRecord"],
    now: datetime,
    default_monthly_km: Optional[float] = None,
) -> SuggestionSummary:
    """
    Compute the maintenance suggestion for a vehicle at `now`.

    Logic:
    - Baseline is the last record (or the vehicle's initial odometer/creation)
    - Current km is the baseline extrapolated to `now` at the monthly rate
    - Next milestone is the first mark beyond the *baseline* reading
    - Upcoming overdue flags compare against the *extrapolated* estimate

    `maintenances` must already be sorted by service date, oldest first.
    """
    latest = maintenances[-1] if maintenances else None
    schedule = get_profile(vehicle.category)
    rate = resolve_monthly_rate(vehicle.average_monthly_km, default_monthly_km)

    estimated_km = estimate_current_km(vehicle, latest, now, rate)
    baseline_km, baseline_time = baseline_for(vehicle, latest)

    next_stop = select_next_milestone(schedule, baseline_km)
    km_to_next = round_half_up(max(0, next_stop.km_mark - estimated_km))

    upcoming = [
        UpcomingMilestone(
            km_mark=milestone.km_mark,
            checklist=milestone.checklist_copy(),
            overdue=estimated_km >= milestone.km_mark,
        )
        for milestone in schedule
    ]

    return SuggestionSummary(
        estimated_current_km=round_half_up(estimated_km),
        monthly_average_km=vehicle.average_monthly_km,
        next_maintenance_km=next_stop.km_mark,
        km_to_next=km_to_next,
        overdue=km_to_next <= 0,
        checklist=next_stop.checklist_copy(),
        upcoming=upcoming,
        estimated_due_date=project_due_date(
            baseline_time, baseline_km, rate, next_stop.km_mark
        ),
    )
