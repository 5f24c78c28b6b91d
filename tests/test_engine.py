#!/usr/bin/env python3
"""
Tests for the suggestion engine.

Covers the documented scenarios plus the engine-wide properties:
1. kmToNext is never negative and overdue is exactly kmToNext == 0
2. Estimated km never decreases as "now" moves forward
3. Identical inputs give identical output
4. Milestone selection uses the baseline, upcoming flags use the estimate
"""
import json
from datetime import datetime, timedelta, timezone

import pytest

from autotrace import (
    Category,
    MaintenanceRecord,
    PREVENTIVE_PROFILES,
    Vehicle,
    build_suggestions,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_vehicle(category=Category.CAR, initial=0, rate=1000, created_days_ago=60):
    return Vehicle(
        plate="ABC1D23",
        model="Onix",
        manufacturer="Chevrolet",
        year=2022,
        category=category,
        initial_odometer=initial,
        created_at=NOW - timedelta(days=created_days_ago),
        average_monthly_km=rate,
    )


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """End-to-end scenarios with a fixed clock."""

    def test_new_car_without_history(self):
        """Scenario A: 60 days at 1000 km/month from zero."""
        vehicle = make_vehicle()

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.estimated_current_km == 2000
        assert summary.next_maintenance_km == 5000
        assert summary.km_to_next == 3000
        assert summary.overdue is False
        assert summary.monthly_average_km == 1000
        # 5000 km at 1000 km/month from creation = 150 days
        assert summary.estimated_due_date == vehicle.created_at + timedelta(days=150)
        assert summary.checklist == ["Oil and filter change", "Fluid level check"]

    def test_car_with_one_service(self):
        """Scenario B: baseline moves to the last record."""
        vehicle = make_vehicle()
        record = MaintenanceRecord(5200, NOW - timedelta(days=30), "Oil change")

        summary = build_suggestions(vehicle, [record], NOW, default_monthly_km=1000)

        assert summary.next_maintenance_km == 10000
        assert summary.estimated_current_km == 6200
        assert summary.km_to_next == 3800
        assert summary.overdue is False
        # 4800 km at 1000 km/month from the service = 144 days
        assert summary.estimated_due_date == record.service_date + timedelta(days=144)

    def test_truck_past_final_milestone(self):
        """Scenario C: every mark passed, the last one stays the target."""
        vehicle = make_vehicle(category=Category.TRUCK, initial=45000, created_days_ago=10)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.next_maintenance_km == 40000
        assert summary.km_to_next == 0
        assert summary.overdue is True
        # Already reached at the baseline point
        assert summary.estimated_due_date == vehicle.created_at
        assert all(item.overdue for item in summary.upcoming)

    def test_zero_rate_uses_default(self):
        """Scenario D: zero monthly km falls back to the default rate."""
        vehicle = make_vehicle(rate=0)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.monthly_average_km == 0
        assert summary.estimated_current_km == 2000
        assert summary.estimated_due_date is not None
        assert summary.estimated_due_date == vehicle.created_at + timedelta(days=150)

    def test_missing_rate_uses_default(self):
        vehicle = make_vehicle(rate=None)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=500)

        assert summary.monthly_average_km is None
        assert summary.estimated_current_km == 1000

    def test_tiny_rate_leaves_due_date_unset(self):
        """A due date past the calendar range is dropped instead of raising."""
        vehicle = make_vehicle(category=Category.TRUCK, rate=0.05)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.next_maintenance_km == 10000
        assert summary.estimated_due_date is None
        assert "estimatedDueDate" not in summary.to_dict()

    def test_unknown_category_uses_generic_schedule(self):
        vehicle = make_vehicle(category="hovercraft")

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        marks = [item.km_mark for item in summary.upcoming]
        assert marks == [m.km_mark for m in PREVENTIVE_PROFILES[Category.OTHER]]

    def test_latest_record_is_last_element(self):
        """The engine trusts the caller's ordering and uses the last record."""
        vehicle = make_vehicle()
        records = [
            MaintenanceRecord(3000, NOW - timedelta(days=90)),
            MaintenanceRecord(11000, NOW - timedelta(days=15)),
        ]

        summary = build_suggestions(vehicle, records, NOW, default_monthly_km=1000)

        assert summary.next_maintenance_km == 20000
        assert summary.estimated_current_km == 11500


# =============================================================================
# Baseline vs estimate asymmetry
# =============================================================================


class TestBaselineEstimateAsymmetry:
    """Selection uses the baseline reading, upcoming flags the extrapolated one."""

    def test_target_can_already_be_overdue_in_upcoming(self):
        # Baseline 4000 selects 5000, but the estimate has reached 6000
        vehicle = make_vehicle(initial=4000, created_days_ago=60)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.next_maintenance_km == 5000
        assert summary.estimated_current_km == 6000
        assert summary.km_to_next == 0
        assert summary.overdue is True
        flags = {item.km_mark: item.overdue for item in summary.upcoming}
        assert flags[5000] is True
        assert flags[10000] is False

    def test_selection_does_not_skip_on_estimate(self):
        """Estimate passing 10000 does not move the target beyond 5000."""
        vehicle = make_vehicle(initial=4000, created_days_ago=210)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.estimated_current_km == 11000
        assert summary.next_maintenance_km == 5000
        assert [i.overdue for i in summary.upcoming] == [True, True, False, False]

    def test_upcoming_flag_inclusive_at_mark(self):
        vehicle = make_vehicle(initial=0, created_days_ago=150)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.estimated_current_km == 5000
        assert summary.upcoming[0].overdue is True
        assert summary.km_to_next == 0
        assert summary.overdue is True


# =============================================================================
# Properties
# =============================================================================


class TestProperties:
    """Engine-wide invariants."""

    @pytest.mark.parametrize("category", list(Category))
    @pytest.mark.parametrize("initial", [0, 2999, 5000, 19999, 100000])
    @pytest.mark.parametrize("days", [0, 1, 29, 400])
    def test_km_to_next_non_negative_and_overdue_iff_zero(self, category, initial, days):
        vehicle = make_vehicle(category=category, initial=initial, created_days_ago=days)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.km_to_next >= 0
        assert summary.overdue == (summary.km_to_next == 0)

    def test_overdue_uses_rounded_distance(self):
        """0.4 km left rounds to 0 and counts as overdue."""
        vehicle = make_vehicle(initial=4999.6, created_days_ago=0)

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)

        assert summary.km_to_next == 0
        assert summary.overdue is True

    def test_estimate_monotonic_in_now(self):
        vehicle = make_vehicle(created_days_ago=0)
        record = MaintenanceRecord(5200, NOW)

        previous = None
        for days in range(0, 400, 7):
            summary = build_suggestions(
                vehicle, [record], NOW + timedelta(days=days), default_monthly_km=1000
            )
            if previous is not None:
                assert summary.estimated_current_km >= previous
            previous = summary.estimated_current_km

    def test_idempotent(self):
        vehicle = make_vehicle()
        records = [MaintenanceRecord(5200, NOW - timedelta(days=30))]

        first = build_suggestions(vehicle, records, NOW, default_monthly_km=1000)
        second = build_suggestions(vehicle, records, NOW, default_monthly_km=1000)

        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_checklists_are_copies(self):
        vehicle = make_vehicle()

        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)
        summary.checklist.append("Tampered")
        summary.upcoming[0].checklist.clear()

        fresh = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)
        assert "Tampered" not in fresh.checklist
        assert len(fresh.upcoming[0].checklist) == 2
        assert len(PREVENTIVE_PROFILES[Category.CAR][0].checklist) == 2


# =============================================================================
# Serialization
# =============================================================================


class TestSummaryToDict:
    """Tests for SuggestionSummary.to_dict."""

    def test_camel_case_keys(self):
        vehicle = make_vehicle()

        data = build_suggestions(vehicle, [], NOW, default_monthly_km=1000).to_dict()

        assert list(data) == [
            "estimatedCurrentKm",
            "monthlyAverageKm",
            "nextMaintenanceKm",
            "kmToNext",
            "overdue",
            "checklist",
            "upcoming",
            "estimatedDueDate",
        ]
        assert data["upcoming"][0] == {
            "kmMark": 5000,
            "checklist": ["Oil and filter change", "Fluid level check"],
            "overdue": False,
        }

    def test_due_date_iso_utc(self):
        vehicle = make_vehicle()

        data = build_suggestions(vehicle, [], NOW, default_monthly_km=1000).to_dict()

        # created 2025-04-02T12:00Z + 150 days
        assert data["estimatedDueDate"] == "2025-08-30T12:00:00.000Z"

    def test_due_date_omitted_when_unknown(self):
        vehicle = make_vehicle()
        summary = build_suggestions(vehicle, [], NOW, default_monthly_km=1000)
        summary.estimated_due_date = None

        assert "estimatedDueDate" not in summary.to_dict()

    def test_json_serializable(self):
        vehicle = make_vehicle()

        data = build_suggestions(vehicle, [], NOW, default_monthly_km=1000).to_dict()

        assert json.loads(json.dumps(data)) == data
