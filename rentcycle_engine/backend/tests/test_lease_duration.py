# backend/tests/test_lease_duration.py
from __future__ import annotations

from datetime import date

import pytest

from rentcycle.domain.dates import InvalidDateError
from rentcycle.domain.lease_duration import (
    LeaseDuration,
    calculate_duration_months,
    calculate_end_date,
    duration_from_months,
    validate_lease_dates,
)


def test_twelve_months_ends_day_before_anniversary():
    assert calculate_end_date(date(2025, 11, 1), LeaseDuration(12, "months")) == date(2026, 10, 31)
    assert calculate_end_date("2025-11-01", LeaseDuration(1, "years")) == date(2026, 10, 31)


def test_month_end_start_is_clamped():
    assert calculate_end_date(date(2026, 1, 31), LeaseDuration(1, "months")) == date(2026, 2, 27)


def test_custom_duration_has_no_end():
    assert calculate_end_date(date(2026, 1, 1), LeaseDuration(7, "custom")) is None


def test_bad_inputs():
    with pytest.raises(InvalidDateError):
        calculate_end_date("soon", LeaseDuration(6, "months"))
    with pytest.raises(ValueError):
        calculate_end_date(date(2026, 1, 1), LeaseDuration(6, "weeks"))


def test_duration_months_inclusive():
    assert calculate_duration_months(date(2025, 11, 1), date(2026, 10, 31)) == 12
    assert calculate_duration_months(date(2026, 1, 15), date(2026, 2, 14)) == 1
    assert calculate_duration_months(date(2026, 3, 1), date(2026, 1, 1)) == 0


def test_duration_from_months():
    assert duration_from_months(24) == LeaseDuration(2, "years")
    assert duration_from_months(11) == LeaseDuration(11, "months")
    assert duration_from_months(9).unit == "custom"
    assert LeaseDuration(1, "years").label() == "1 year"
    assert LeaseDuration(6, "months").label() == "6 months"
    assert LeaseDuration(9, "custom").label() == "Custom"


def test_validate_lease_dates():
    assert validate_lease_dates("2026-01-01", "2026-12-31") == ""
    assert validate_lease_dates("2026-01-01", None) == ""
    assert validate_lease_dates("bad", "2026-12-31") == "Invalid start date"
    assert validate_lease_dates("2026-01-01", "2026-13-01") == "Invalid end date"
    assert validate_lease_dates("2026-02-01", "2026-01-01") == "End date cannot be before start date"
    assert validate_lease_dates("2026-02-01", "2026-02-01") == "Lease must be at least 1 day long"
