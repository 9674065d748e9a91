#!/usr/bin/env python3
"""
Tests for single-interval evaluation.

Reference interval used throughout: serviced 2024-01-01 at 80,000 km,
every 6 months / 10,000 km, so due 2024-07-01 or 90,000 km.
"""

from datetime import date, datetime

import pytest

from fleet import (
    DuePolicy,
    EvaluationResult,
    MaintenanceInterval,
    Status,
    evaluate,
    evaluate_interval,
)

LAST_DATE = "2024-01-01"
LAST_ODO = 80000
MONTHS = 6
KM = 10000


def evaluate_ref(current_odometer=80000, now=date(2024, 1, 1), policy=None):
    return evaluate(LAST_DATE, LAST_ODO, MONTHS, KM, current_odometer, now=now, policy=policy)


class TestScenarios:
    """Worked examples for the reference interval."""

    def test_fresh_service_is_ok(self):
        result = evaluate_ref()
        assert result.next_due_date == date(2024, 7, 1)
        assert result.next_due_odometer == 90000
        assert result.days_until == 182
        assert result.distance_until == 10000
        assert result.status == Status.OK

    def test_six_days_before_due_is_warning(self):
        result = evaluate_ref(now=date(2024, 6, 25))
        assert result.days_until == 6
        assert result.status == Status.WARNING

    def test_500_km_remaining_is_warning(self):
        result = evaluate_ref(current_odometer=89500)
        assert result.distance_until == 500
        assert result.status == Status.WARNING

    def test_one_day_past_due_is_overdue(self):
        result = evaluate_ref(now=date(2024, 7, 2))
        assert result.days_until == -1
        assert result.status == Status.OVERDUE

    def test_past_due_distance_is_overdue(self):
        result = evaluate_ref(current_odometer=90001)
        assert result.distance_until == -1
        assert result.status == Status.OVERDUE


class TestBoundaries:
    """Warning uses strict '<', overdue needs a negative value."""

    def test_fourteen_days_is_ok(self):
        result = evaluate_ref(now=date(2024, 6, 17))
        assert result.days_until == 14
        assert result.status == Status.OK

    def test_thirteen_days_is_warning(self):
        result = evaluate_ref(now=date(2024, 6, 18))
        assert result.days_until == 13
        assert result.status == Status.WARNING

    def test_1000_km_is_ok(self):
        result = evaluate_ref(current_odometer=89000)
        assert result.distance_until == 1000
        assert result.status == Status.OK

    def test_999_km_is_warning(self):
        result = evaluate_ref(current_odometer=89001)
        assert result.distance_until == 999
        assert result.status == Status.WARNING

    def test_zero_days_is_not_overdue(self):
        result = evaluate_ref(now=date(2024, 7, 1))
        assert result.days_until == 0
        assert result.status == Status.WARNING

    def test_zero_km_is_not_overdue(self):
        result = evaluate_ref(current_odometer=90000)
        assert result.distance_until == 0
        assert result.status == Status.WARNING

    def test_hours_before_due_counts_as_one_day(self):
        result = evaluate_ref(now=datetime(2024, 6, 30, 18, 0))
        assert result.days_until == 1


class TestProperties:
    """Determinism, monotonicity and input handling."""

    def test_deterministic(self):
        now = datetime(2024, 3, 3, 9, 15)
        assert evaluate_ref(85000, now) == evaluate_ref(85000, now)

    def test_status_never_improves_as_odometer_grows(self):
        statuses = [evaluate_ref(current_odometer=km).status for km in range(80000, 92001, 250)]
        values = [s.value for s in statuses]
        assert values == sorted(values, reverse=True)
        assert statuses[0] == Status.OK
        assert statuses[-1] == Status.OVERDUE

    def test_status_never_improves_as_time_passes(self):
        days = [date(2024, 1, 1).toordinal() + n for n in range(0, 200, 3)]
        statuses = [evaluate_ref(now=date.fromordinal(d)).status for d in days]
        values = [s.value for s in statuses]
        assert values == sorted(values, reverse=True)
        assert Status.WARNING in statuses
        assert statuses[-1] == Status.OVERDUE

    def test_accepts_date_object(self):
        result = evaluate(date(2024, 1, 1), LAST_ODO, MONTHS, KM, 80000, now=date(2024, 1, 1))
        assert result == evaluate_ref()

    def test_custom_policy_thresholds(self):
        policy = DuePolicy(warning_days=200)
        assert evaluate_ref(policy=policy).status == Status.WARNING

    def test_defaults_to_wall_clock(self):
        today = date.today()
        result = evaluate(today.isoformat(), 0, 12, 50000, 0)
        assert result.status == Status.OK
        assert 360 <= result.days_until <= 366

    def test_is_due(self):
        assert not evaluate_ref().is_due
        assert evaluate_ref(current_odometer=89500).is_due
        assert evaluate_ref(now=date(2024, 7, 2)).is_due


class TestEvaluateInterval:
    """Tests for the MaintenanceInterval wrapper."""

    def test_matches_evaluate(self):
        interval = MaintenanceInterval(LAST_DATE, LAST_ODO, MONTHS, KM)
        assert evaluate_interval(interval, 89500, date(2024, 1, 1)) == evaluate_ref(89500)

    def test_does_not_mutate_interval(self):
        interval = MaintenanceInterval(LAST_DATE, LAST_ODO, MONTHS, KM)
        evaluate_interval(interval, 95000, date(2025, 1, 1))
        assert interval == MaintenanceInterval("2024-01-01", 80000, 6, 10000)


class TestToDict:
    """Tests for EvaluationResult.to_dict."""

    def test_serializes_dates_and_status(self):
        assert evaluate_ref(current_odometer=89500).to_dict() == {
            "nextDueDate": "2024-07-01",
            "nextDueOdometer": 90000,
            "daysUntil": 182,
            "distanceUntil": 500,
            "status": "warning",
        }

    def test_result_is_frozen(self):
        result = evaluate_ref()
        assert isinstance(result, EvaluationResult)
        with pytest.raises(AttributeError):
            result.status = Status.OVERDUE
