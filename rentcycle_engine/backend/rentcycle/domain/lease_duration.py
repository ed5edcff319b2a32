# backend/rentcycle/domain/lease_duration.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from .dates import InvalidDateError, add_months, as_date, as_optional_date

UNITS = ("months", "years", "custom")


@dataclass(frozen=True)
class LeaseDuration:
    value: int
    unit: str  # months | years | custom

    def label(self) -> str:
        if self.unit == "custom":
            return "Custom"
        unit = self.unit[:-1] if self.value == 1 else self.unit
        return f"{self.value} {unit}"


COMMON_DURATIONS = (
    LeaseDuration(6, "months"),
    LeaseDuration(11, "months"),
    LeaseDuration(1, "years"),
    LeaseDuration(2, "years"),
    LeaseDuration(3, "years"),
    LeaseDuration(5, "years"),
)


def calculate_end_date(start_date: Any, duration: LeaseDuration) -> Optional[date]:
    """
    Last day of a lease that runs `duration` from `start_date`.

    A 12 month lease from 2025-11-01 ends 2026-10-31. Custom durations have no
    computable end and return None.
    """
    if duration.unit not in UNITS:
        raise ValueError(f"unknown duration unit {duration.unit!r}")
    if duration.unit == "custom":
        return None

    start = as_date(start_date, field="start_date")
    months = duration.value if duration.unit == "months" else duration.value * 12
    return add_months(start, months) - timedelta(days=1)


def calculate_duration_months(start_date: Any, end_date: Any) -> int:
    """Whole months covered by [start, end], counting both ends."""
    start = as_date(start_date, field="start_date")
    end = as_date(end_date, field="end_date")

    total = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        total -= 1
    return max(0, total + 1)


def duration_from_months(months: int) -> LeaseDuration:
    for option in COMMON_DURATIONS:
        option_months = option.value if option.unit == "months" else option.value * 12
        if option_months == months:
            return option
    return LeaseDuration(months, "custom")


def validate_lease_dates(start_date: Any, end_date: Any) -> str:
    """Empty string when the pair is usable, otherwise a message for the form."""
    try:
        start = as_optional_date(start_date, field="start_date")
    except InvalidDateError:
        return "Invalid start date"
    try:
        end = as_optional_date(end_date, field="end_date")
    except InvalidDateError:
        return "Invalid end date"

    if start is None or end is None:
        return ""
    if end < start:
        return "End date cannot be before start date"
    if end == start:
        return "Lease must be at least 1 day long"
    return ""
