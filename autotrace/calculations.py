"""Helper functions for odometer and due-date projections."""

import math
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from .config import get_settings
from .milestone import Milestone

if TYPE_CHECKING:
    from .maintenance_record import MaintenanceRecord
    from .vehicle import Vehicle

# A "month" is a fixed 30 days, not a calendar month.
MONTH_DURATION = timedelta(days=30)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def resolve_monthly_rate(
    average_monthly_km: Optional[float], default_monthly_km: Optional[float] = None
) -> float:
    """Vehicle's own rate if positive and finite, otherwise the configured default."""
    if (
        average_monthly_km is not None
        and math.isfinite(average_monthly_km)
        and average_monthly_km > 0
    ):
        return average_monthly_km
    if default_monthly_km is None:
        default_monthly_km = get_settings().average_monthly_km
    return default_monthly_km


def baseline_for(
    vehicle: "Vehicle", latest_record: Optional["MaintenanceRecord"]
) -> Tuple[float, datetime]:
    """
    Most recent known true odometer reading and when it was taken.

    - With history: latest record's odometer and service date
    - Without history: initial odometer and vehicle creation time
    """
    if latest_record is None:
        return vehicle.initial_odometer, vehicle.created_at
    return latest_record.odometer, latest_record.service_date


def months_between(start: datetime, end: datetime) -> float:
    """Elapsed time in fixed 30-day months."""
    return (end - start) / MONTH_DURATION


def estimate_current_km(
    vehicle: "Vehicle",
    latest_record: Optional["MaintenanceRecord"],
    now: datetime,
    default_monthly_km: Optional[float] = None,
) -> float:
    """Extrapolate the odometer from the baseline to `now` at the monthly rate."""
    baseline_km, baseline_time = baseline_for(vehicle, latest_record)
    rate = resolve_monthly_rate(vehicle.average_monthly_km, default_monthly_km)
    return baseline_km + months_between(baseline_time, now) * rate


def select_next_milestone(
    schedule: Sequence[Milestone], baseline_odometer: float
) -> Milestone:
    """
    First milestone beyond the baseline reading.

    Once every mark has been passed the last (highest) milestone keeps
    being recommended.
    """
    for milestone in schedule:
        if milestone.km_mark > baseline_odometer:
            return milestone
    return schedule[-1]


def project_due_date(
    baseline_time: datetime,
    baseline_odometer: float,
    monthly_rate: float,
    target_km: float,
) -> Optional[datetime]:
    """
    Date the target is reached at the monthly rate; baseline time if already reached.

    Returns None when the date falls outside the representable range.
    """
    km_gap = target_km - baseline_odometer
    if km_gap <= 0:
        return baseline_time
    try:
        return baseline_time + MONTH_DURATION * (km_gap / monthly_rate)
    except OverflowError:
        return None
