# backend/rentcycle/domain/rent_cycle.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Iterable

from .dates import as_date, days_in_month, previous_month, same_month
from .rows import get_field

PAID = "paid"
PENDING = "pending"
OVERDUE = "overdue"

COMPLETED = "completed"


@dataclass(frozen=True)
class PropertyWithLease:
    """The active lease of one property, as the evaluator sees it."""

    id: Any
    lease_id: Any
    monthly_rent: float
    start_date: date
    is_active: bool = True


@dataclass(frozen=True)
class RentStatus:
    status: str  # paid | pending | overdue
    amount: float
    days_occupied: int
    effective_start_date: date
    due_date: date
    overdue_date: date

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RentSummary:
    total_collected: float
    total_pending: float
    total_overdue: float
    total_properties: int
    paid_properties: int
    pending_properties: int
    overdue_properties: int


def round_currency(x: float) -> float:
    # half-up to whole units; amounts here are never negative
    return float(math.floor(float(x) + 0.5))


def has_completed_payment_in_month(payments: Iterable[Any], *, lease_id: Any, month_of: date) -> bool:
    """
    True when a completed payment for lease_id is dated in the calendar month of month_of.

    Any amount counts: a partial payment settles the cycle the same as a full one.
    """
    for p in payments:
        if get_field(p, "lease_id") != lease_id:
            continue
        if (get_field(p, "status") or "").lower() != COMPLETED:
            continue
        if same_month(as_date(get_field(p, "payment_date"), field="payment_date"), month_of):
            return True
    return False


def calculate_rent_status(
    prop: Any,
    payments: Iterable[Any],
    today: Any,
    *,
    grace_period_days: int = 5,
) -> RentStatus:
    """
    Status of the rent cycle being collected this month.

    Rent is billed in arrears: on any day of month M the cycle under
    evaluation is month M-1, due on the 1st of M and overdue from the day
    after the grace period (the 6th by default).

    1. A completed payment for this lease dated anywhere in M marks the cycle
       paid with nothing owed.
    2. Occupancy runs from max(lease start, 1st of M-1) to the last day of M-1.
       A lease that starts after M-1 owes nothing for it (paid, zero).
    3. amount = monthly_rent / days_in(M-1) * days_occupied, rounded half-up.
    4. Unpaid rent is pending up to the grace day, overdue after it.
    """
    ref = as_date(today, field="today")
    lease_id = get_field(prop, "lease_id")
    lease_start = as_date(get_field(prop, "start_date"), field="start_date")
    monthly_rent = float(get_field(prop, "monthly_rent", 0.0) or 0.0)

    prev_year, prev_month = previous_month(ref.year, ref.month)
    month_days = days_in_month(prev_year, prev_month)
    first_of_prev = date(prev_year, prev_month, 1)
    last_of_prev = date(prev_year, prev_month, month_days)

    due_date = date(ref.year, ref.month, 1)
    overdue_date = date(ref.year, ref.month, int(grace_period_days) + 1)

    if has_completed_payment_in_month(payments, lease_id=lease_id, month_of=ref):
        return RentStatus(
            status=PAID,
            amount=0.0,
            days_occupied=0,
            effective_start_date=first_of_prev,
            due_date=due_date,
            overdue_date=overdue_date,
        )

    effective_start = max(lease_start, first_of_prev)

    if effective_start > last_of_prev:
        return RentStatus(
            status=PAID,
            amount=0.0,
            days_occupied=0,
            effective_start_date=effective_start,
            due_date=due_date,
            overdue_date=overdue_date,
        )

    days_occupied = max(0, (last_of_prev - effective_start).days + 1)
    daily_rate = monthly_rent / month_days
    amount = round_currency(daily_rate * days_occupied)

    status = PENDING if ref.day <= int(grace_period_days) else OVERDUE

    return RentStatus(
        status=status,
        amount=amount,
        days_occupied=days_occupied,
        effective_start_date=effective_start,
        due_date=due_date,
        overdue_date=overdue_date,
    )


def calculate_rent_summary(
    properties: list[Any],
    payments: list[Any],
    today: Any,
    *,
    grace_period_days: int = 5,
) -> RentSummary:
    statuses = [calculate_rent_status(p, payments, today, grace_period_days=grace_period_days) for p in properties]

    total_collected = sum(
        float(get_field(p, "payment_amount", 0.0) or 0.0)
        for p in payments
        if (get_field(p, "status") or "").lower() == COMPLETED
    )

    return RentSummary(
        total_collected=float(total_collected),
        total_pending=float(sum(s.amount for s in statuses if s.status == PENDING)),
        total_overdue=float(sum(s.amount for s in statuses if s.status == OVERDUE)),
        total_properties=len(properties),
        paid_properties=sum(1 for s in statuses if s.status == PAID),
        pending_properties=sum(1 for s in statuses if s.status == PENDING),
        overdue_properties=sum(1 for s in statuses if s.status == OVERDUE),
    )
