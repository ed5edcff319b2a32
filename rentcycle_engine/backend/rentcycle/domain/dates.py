# backend/rentcycle/domain/dates.py
from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Any


class InvalidDateError(ValueError):
    """Raised when a value cannot be read as a calendar date."""

    def __init__(self, value: Any, field: str | None = None):
        self.value = value
        self.field = field
        label = f"{field}: " if field else ""
        super().__init__(f"{label}invalid date {value!r}")


def as_date(v: Any, *, field: str | None = None) -> date:
    """
    Coerce v to a calendar date, dropping any time-of-day.

    Accepts date, datetime and ISO-8601 strings ("2026-03-16" or
    "2026-03-16T09:30:00"). Anything else raises InvalidDateError; callers
    never get a half-parsed value back.
    """
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str) and v.strip():
        s = v.strip()
        try:
            return date.fromisoformat(s[:10]) if len(s) > 10 and s[10] in "T " else date.fromisoformat(s)
        except ValueError:
            raise InvalidDateError(v, field) from None
    raise InvalidDateError(v, field)


def as_optional_date(v: Any, *, field: str | None = None) -> date | None:
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    return as_date(v, field=field)


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    idx = d.year * 12 + (d.month - 1) + int(months)
    y, m = divmod(idx, 12)
    m += 1
    return date(y, m, min(d.day, days_in_month(y, m)))
