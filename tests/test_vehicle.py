#!/usr/bin/env python3
"""Tests for Vehicle class."""
from datetime import datetime, timedelta, timezone

import pytest

from autotrace import Category, MaintenanceRecord, Vehicle, normalize_plate

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def vehicle():
    return Vehicle(
        plate="ABC1D23",
        model="Onix",
        manufacturer="Chevrolet",
        year=2022,
        category=Category.CAR,
        initial_odometer=0,
        created_at=NOW - timedelta(days=120),
        average_monthly_km=1000,
        owner_name="Ana",
        maintenances=[
            MaintenanceRecord(5200, NOW - timedelta(days=30), "Oil change", "Garage"),
            MaintenanceRecord(1500, NOW - timedelta(days=90), "Inspection", "Garage"),
            MaintenanceRecord(3000, NOW - timedelta(days=60), "Tyres", "Garage"),
        ],
    )


class TestVehicleProperties:
    """Tests for Vehicle attributes and derived properties."""

    def test_name(self, vehicle):
        assert vehicle.name == "2022 Chevrolet Onix (ABC1D23)"

    def test_id_defaults_to_normalized_plate(self, vehicle):
        assert vehicle.id == "abc1d23"

    def test_explicit_id(self):
        vehicle = Vehicle("ABC1D23", "Onix", "Chevrolet", 2022, "car", 0, NOW, vehicle_id="onix")
        assert vehicle.id == "onix"

    def test_category_string_parsed(self):
        vehicle = Vehicle("ABC1D23", "FH", "Volvo", 2020, "truck", 0, NOW)
        assert vehicle.category == Category.TRUCK

    def test_defaults(self):
        vehicle = Vehicle("ABC1D23", "Onix", "Chevrolet", 2022, Category.CAR, 0, NOW)
        assert vehicle.maintenances == []
        assert vehicle.certificates == []
        assert vehicle.average_monthly_km is None
        assert vehicle.owner_name is None

    def test_last_maintenance_by_date(self, vehicle):
        assert vehicle.last_maintenance.odometer == 5200

    def test_last_maintenance_same_day_matches_baseline(self):
        """Same-day records resolve to the one the suggestion uses as its baseline."""
        serviced = NOW - timedelta(days=30)
        vehicle = Vehicle(
            "ABC1D23", "Onix", "Chevrolet", 2022, Category.CAR, 0, NOW - timedelta(days=120), 1000,
            maintenances=[
                MaintenanceRecord(9000, serviced, "Tyres", "Garage"),
                MaintenanceRecord(5200, serviced, "Oil change", "Garage"),
            ],
        )

        assert vehicle.last_maintenance.odometer == 5200
        assert vehicle.suggestions(NOW).estimated_current_km == 6200

    def test_last_maintenance_none_without_history(self):
        vehicle = Vehicle("ABC1D23", "Onix", "Chevrolet", 2022, Category.CAR, 0, NOW)
        assert vehicle.last_maintenance is None


class TestVehicleHistory:
    """Tests for history ordering and filtering."""

    def test_sorted_oldest_first(self, vehicle):
        assert [m.odometer for m in vehicle.get_maintenances_sorted()] == [1500, 3000, 5200]

    def test_sorted_reverse(self, vehicle):
        assert [m.odometer for m in vehicle.get_maintenances_sorted(reverse=True)] == [5200, 3000, 1500]

    def test_between_inclusive_bounds(self, vehicle):
        records = vehicle.get_maintenances_between(
            NOW - timedelta(days=60), NOW - timedelta(days=30)
        )
        assert [m.odometer for m in records] == [3000, 5200]

    def test_between_open_bounds(self, vehicle):
        assert len(vehicle.get_maintenances_between()) == 3
        assert [m.odometer for m in vehicle.get_maintenances_between(end=NOW - timedelta(days=61))] == [1500]


class TestVehicleSuggestions:
    """Tests for Vehicle.suggestions and dashboard_entry."""

    def test_sorts_history_before_engine(self, vehicle):
        """Unsorted stored history still uses the most recent service as baseline."""
        summary = vehicle.suggestions(NOW, default_monthly_km=1000)

        assert summary.estimated_current_km == 6200
        assert summary.next_maintenance_km == 10000

    def test_dashboard_entry(self, vehicle):
        entry = vehicle.dashboard_entry(NOW, default_monthly_km=1000)

        assert entry == {
            "vehicleId": "abc1d23",
            "totalMaintenances": 3,
            "lastMaintenanceDate": "2025-05-02T00:00:00.000Z",
            "nextMaintenanceKm": 10000,
            "overdue": False,
        }

    def test_dashboard_entry_without_history(self):
        vehicle = Vehicle("ABC1D23", "Onix", "Chevrolet", 2022, Category.CAR, 0, NOW, 1000)
        entry = vehicle.dashboard_entry(NOW)
        assert entry["lastMaintenanceDate"] is None
        assert entry["totalMaintenances"] == 0
        assert entry["nextMaintenanceKm"] == 5000


class TestNormalizePlate:
    """Tests for normalize_plate."""

    def test_strips_whitespace_and_uppercases(self):
        assert normalize_plate(" abc 1d23 ") == "ABC1D23"

    def test_keeps_hyphen(self):
        assert normalize_plate("abc-1234") == "ABC-1234"
