# backend/tests/test_lease_status.py
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from rentcycle.domain.dates import InvalidDateError
from rentcycle.domain.lease_status import NO_LEASE, calculate_lease_status, lease_status_or_default

TODAY = date(2026, 5, 10)


def test_expiring_today_ignores_time_of_day():
    s = calculate_lease_status(datetime(2026, 5, 10, 23, 59), datetime(2026, 5, 10, 0, 1))
    assert s.status == "expiring_today"
    assert s.message == "Lease Expiring today"
    assert s.days_remaining == 0
    assert s.priority == 5


def test_expired_reports_days_since_end():
    s = calculate_lease_status(date(2026, 5, 1), TODAY)
    assert s.status == "expired"
    assert s.days_remaining == 9
    assert s.priority == 5


@pytest.mark.parametrize(
    "days,priority",
    [(1, 5), (3, 5), (4, 4), (7, 4), (8, 3), (15, 3)],
)
def test_expiring_soon_priority_bands(days, priority):
    s = calculate_lease_status(TODAY + timedelta(days=days), TODAY)
    assert s.status == "expiring_soon"
    assert s.days_remaining == days
    assert s.priority == priority


def test_expiring_soon_message_counts_days():
    assert calculate_lease_status(date(2026, 5, 11), TODAY).message == "Lease expiring in 1 day"
    assert calculate_lease_status(date(2026, 5, 20), TODAY).message == "Lease expiring in 10 days"


def test_active_beyond_window():
    s = calculate_lease_status(date(2026, 5, 26), TODAY)
    assert s.status == "active"
    assert s.days_remaining == 16
    assert s.priority == 1


def test_iso_strings_accepted():
    assert calculate_lease_status("2026-05-10", "2026-05-10T18:00:00").status == "expiring_today"


def test_status_agrees_with_date_order_over_a_range():
    for offset in range(-40, 41):
        end = TODAY + timedelta(days=offset)
        s = calculate_lease_status(end, TODAY)
        assert (s.status == "expired") == (end < TODAY)
        assert (s.status == "expiring_today") == (end == TODAY)
        assert s.days_remaining >= 0
        assert 1 <= s.priority <= 5


def test_custom_window():
    s = calculate_lease_status(date(2026, 6, 5), TODAY, expiring_soon_days=30)
    assert s.status == "expiring_soon"


def test_invalid_date_fails_loudly():
    with pytest.raises(InvalidDateError):
        calculate_lease_status("2026-13-45", TODAY)
    with pytest.raises(InvalidDateError):
        calculate_lease_status(None, TODAY)


def test_missing_end_date_reads_as_no_lease():
    assert lease_status_or_default(None, TODAY) == NO_LEASE
    assert lease_status_or_default("", TODAY).message == "No Lease"
    assert lease_status_or_default("2026-05-10", TODAY).status == "expiring_today"
