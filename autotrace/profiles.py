"""Preventive maintenance schedules per vehicle category."""

from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .category import Category
from .milestone import Milestone


def _schedule(*entries) -> Tuple[Milestone, ...]:
    return tuple(Milestone(km_mark, tuple(items)) for km_mark, items in entries)


PREVENTIVE_PROFILES: Mapping[Category, Tuple[Milestone, ...]] = MappingProxyType(
    {
        Category.CAR: _schedule(
            (5000, ["Oil and filter change", "Fluid level check"]),
            (10000, ["Wheel alignment and balancing", "Brake inspection"]),
            (20000, ["Air and cabin filter replacement", "Cooling system service"]),
            (40000, ["Timing belt inspection", "Spark plug replacement"]),
        ),
        Category.MOTORCYCLE: _schedule(
            (3000, ["Oil change", "Chain adjustment"]),
            (6000, ["Brake check", "Cable lubrication"]),
            (12000, ["Suspension service", "Air filter replacement"]),
        ),
        Category.TRUCK: _schedule(
            (10000, ["Engine oil and filters change", "Pneumatic system check"]),
            (20000, ["Suspension and steering inspection", "Brake service"]),
            (40000, ["Transmission fluid change", "Differential check"]),
        ),
        Category.OTHER: _schedule(
            (5000, ["General fluid check", "Component tightening"]),
            (15000, ["Structural review", "Electrical check"]),
        ),
    }
)


def get_profile(category: Optional[Union[str, Category]]) -> Tuple[Milestone, ...]:
    """
    Ordered milestones for a category.

    Unknown categories get the generic OTHER schedule.
    """
    return PREVENTIVE_PROFILES.get(Category.parse(category), PREVENTIVE_PROFILES[Category.OTHER])
