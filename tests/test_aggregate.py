#!/usr/bin/env python3
"""
Tests for aggregating a truck's intervals.

Covers the worst-case status law, items_due labels and ordering, and the
nearest-value law (minimum over every interval, whatever its status).
"""

from datetime import date

import pytest

from fleet import (
    AggregatedResult,
    MaintenanceInterval,
    Status,
    VehicleSnapshot,
    aggregate,
    evaluate_interval,
    worst_status,
)

NOW = date(2024, 1, 1)
CURRENT_KM = 85000

# Due 2024-01-10 / 90,000 km -> 9 days left -> WARNING
GENERAL_WARNING = MaintenanceInterval("2023-07-10", 80000, 6, 10000)
# Due 2024-01-01 / 80,000 km -> 5,000 km past -> OVERDUE
TIRES_OVERDUE = MaintenanceInterval("2022-01-01", 50000, 24, 30000)
# Due 2024-06-01 / 94,000 km -> OK
OIL_OK = MaintenanceInterval("2023-12-01", 84000, 6, 10000)
# Due 2024-07-01 / 95,000 km -> OK
GENERAL_OK = MaintenanceInterval("2024-01-01", 85000, 6, 10000)
# Due 2024-01-05 / 100,000 km -> 4 days left -> WARNING
BRAKES_WARNING = MaintenanceInterval("2023-01-05", 80000, 12, 20000)


def snapshot(general, items=()):
    return VehicleSnapshot(
        current_odometer=CURRENT_KM,
        general_interval=general,
        item_intervals=list(items),
    )


class TestAggregateScenario:
    """General WARNING, Tire Change OVERDUE, Oil Change OK."""

    @pytest.fixture
    def result(self):
        return aggregate(
            snapshot(
                GENERAL_WARNING,
                [("Tire Change", TIRES_OVERDUE), ("Oil Change", OIL_OK)],
            ),
            now=NOW,
        )

    def test_status_is_overdue(self, result):
        assert result.status == Status.OVERDUE

    def test_items_due_excludes_ok_items(self, result):
        assert result.items_due == ["General Service (Due Soon)", "Tire Change"]

    def test_nearest_distance_is_minimum(self, result):
        assert result.nearest_distance == -5000

    def test_nearest_date_is_minimum(self, result):
        assert result.nearest_date == date(2024, 1, 1)


class TestAggregateLabels:
    """items_due labels and ordering."""

    def test_general_overdue_label(self):
        overdue = MaintenanceInterval("2023-01-01", 60000, 6, 10000)
        result = aggregate(snapshot(overdue), now=NOW)
        assert result.items_due == ["General Service (Overdue)"]
        assert result.status == Status.OVERDUE

    def test_general_first_then_items_in_stored_order(self):
        result = aggregate(
            snapshot(
                GENERAL_WARNING,
                [("Brake System", BRAKES_WARNING), ("Tire Change", TIRES_OVERDUE)],
            ),
            now=NOW,
        )
        assert result.items_due == [
            "General Service (Due Soon)",
            "Brake System",
            "Tire Change",
        ]

    def test_ok_general_is_not_listed(self):
        result = aggregate(snapshot(GENERAL_OK, [("Brake System", BRAKES_WARNING)]), now=NOW)
        assert result.items_due == ["Brake System"]
        assert result.status == Status.WARNING


class TestAggregateMerge:
    """Status precedence overdue > warning > ok."""

    def test_warning_after_overdue_keeps_overdue(self):
        result = aggregate(
            snapshot(
                GENERAL_OK,
                [("Tire Change", TIRES_OVERDUE), ("Brake System", BRAKES_WARNING)],
            ),
            now=NOW,
        )
        assert result.status == Status.OVERDUE

    def test_overdue_item_overrides_general_warning(self):
        result = aggregate(snapshot(GENERAL_WARNING, [("Tire Change", TIRES_OVERDUE)]), now=NOW)
        assert result.status == Status.OVERDUE

    @pytest.mark.parametrize(
        "general,items",
        [
            (GENERAL_OK, []),
            (GENERAL_OK, [("Oil Change", OIL_OK)]),
            (GENERAL_WARNING, [("Oil Change", OIL_OK)]),
            (GENERAL_OK, [("Brake System", BRAKES_WARNING), ("Oil Change", OIL_OK)]),
            (GENERAL_WARNING, [("Tire Change", TIRES_OVERDUE), ("Oil Change", OIL_OK)]),
        ],
    )
    def test_status_equals_worst_individual_status(self, general, items):
        result = aggregate(snapshot(general, items), now=NOW)
        individual = [evaluate_interval(general, CURRENT_KM, NOW)] + [
            evaluate_interval(interval, CURRENT_KM, NOW) for _, interval in items
        ]
        assert result.status == worst_status(*(r.status for r in individual))
        assert result.nearest_distance == min(r.distance_until for r in individual)
        assert result.nearest_date == min(r.next_due_date for r in individual)


class TestAggregateNearest:
    """Nearest values are reported even when everything is OK."""

    def test_all_ok_still_reports_nearest(self):
        result = aggregate(snapshot(GENERAL_OK, [("Oil Change", OIL_OK)]), now=NOW)
        assert result.status == Status.OK
        assert result.items_due == []
        assert result.nearest_distance == 9000
        assert result.nearest_date == date(2024, 6, 1)

    def test_no_items_uses_general_only(self):
        result = aggregate(snapshot(GENERAL_OK), now=NOW)
        assert result.status == Status.OK
        assert result.nearest_distance == 10000
        assert result.nearest_date == date(2024, 7, 1)


class TestAggregatedResult:
    """Tests for AggregatedResult helpers."""

    def test_deterministic(self):
        snap = snapshot(GENERAL_WARNING, [("Tire Change", TIRES_OVERDUE)])
        assert aggregate(snap, now=NOW) == aggregate(snap, now=NOW)

    def test_to_dict(self):
        result = aggregate(
            snapshot(GENERAL_WARNING, [("Tire Change", TIRES_OVERDUE), ("Oil Change", OIL_OK)]),
            now=NOW,
        )
        assert result.to_dict() == {
            "status": "overdue",
            "itemsDue": ["General Service (Due Soon)", "Tire Change"],
            "nearestDistance": -5000,
            "nearestDate": "2024-01-01",
        }

    def test_is_due(self):
        ok = AggregatedResult(Status.OK, [], 100, date(2024, 1, 1))
        warn = AggregatedResult(Status.WARNING, ["x"], 100, date(2024, 1, 1))
        assert not ok.is_due
        assert warn.is_due
