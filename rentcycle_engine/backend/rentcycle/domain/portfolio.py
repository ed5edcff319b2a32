# backend/rentcycle/domain/portfolio.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Sequence

from .dates import as_date
from .lease_status import LeaseStatus, NO_LEASE, lease_status_or_default
from .rent_cycle import COMPLETED, OVERDUE, PAID, PENDING, PropertyWithLease, RentStatus, calculate_rent_status
from .rows import get_field


@dataclass(frozen=True)
class PortfolioProperty:
    id: Any
    name: str = ""
    lease: Optional[PropertyWithLease] = None  # None -> vacant
    lease_end_date: Any = None


@dataclass(frozen=True)
class PropertyRentView:
    property_id: Any
    name: str
    lease_id: Any
    monthly_rent: float
    payment_status: Optional[str]  # None for vacant properties
    amount_due: float
    days_occupied: int
    lease_status: LeaseStatus


@dataclass(frozen=True)
class PortfolioSummary:
    total_collected: float
    total_pending: float
    total_overdue: float
    collection_rate: float
    total_properties: int
    paid_properties: int
    pending_properties: int
    overdue_properties: int
    vacant_properties: int
    monthly_rent_roll: float
    properties: list[PropertyRentView] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _is_completed(p: Any) -> bool:
    return (get_field(p, "status") or "").lower() == COMPLETED


def total_collected(payments: Sequence[Any]) -> float:
    return float(sum(float(get_field(p, "payment_amount", 0.0) or 0.0) for p in payments if _is_completed(p)))


def collection_rate(payments: Sequence[Any]) -> float:
    """Completed share of the ledger, in percent. An empty ledger rates 0."""
    if not payments:
        return 0.0
    completed = sum(1 for p in payments if _is_completed(p))
    return round(completed / len(payments) * 100.0, 2)


def _billable(lease: Optional[PropertyWithLease]) -> bool:
    return lease is not None and bool(get_field(lease, "is_active", False))


def property_rent_view(
    prop: PortfolioProperty,
    payments: Sequence[Any],
    today: Any,
    *,
    grace_period_days: int = 5,
    expiring_soon_days: int = 15,
) -> PropertyRentView:
    lease = prop.lease
    if not _billable(lease):
        return PropertyRentView(
            property_id=prop.id,
            name=prop.name,
            lease_id=None,
            monthly_rent=0.0,
            payment_status=None,
            amount_due=0.0,
            days_occupied=0,
            lease_status=NO_LEASE,
        )

    rs: RentStatus = calculate_rent_status(lease, payments, today, grace_period_days=grace_period_days)
    return PropertyRentView(
        property_id=prop.id,
        name=prop.name,
        lease_id=get_field(lease, "lease_id"),
        monthly_rent=float(get_field(lease, "monthly_rent", 0.0) or 0.0),
        payment_status=rs.status,
        amount_due=rs.amount,
        days_occupied=rs.days_occupied,
        lease_status=lease_status_or_default(prop.lease_end_date, today, expiring_soon_days=expiring_soon_days),
    )


def summarize_portfolio(
    properties: Sequence[PortfolioProperty],
    visible_payments: Sequence[Any],
    today: Any,
    *,
    grace_period_days: int = 5,
    expiring_soon_days: int = 15,
) -> PortfolioSummary:
    """
    Dashboard figures for a portfolio.

    `visible_payments` must already have gone through
    ledger.filter_valid_payments, so reversed pairs contribute nothing.
    Vacant properties (no active lease) are listed with payment_status None
    and never add to pending or overdue.
    """
    ref = as_date(today, field="today")

    views = [
        property_rent_view(
            p,
            visible_payments,
            ref,
            grace_period_days=grace_period_days,
            expiring_soon_days=expiring_soon_days,
        )
        for p in properties
    ]

    def _sum_due(status: str) -> float:
        return float(sum(v.amount_due for v in views if v.payment_status == status))

    def _count(status: Optional[str]) -> int:
        return sum(1 for v in views if v.payment_status == status)

    return PortfolioSummary(
        total_collected=total_collected(visible_payments),
        total_pending=_sum_due(PENDING),
        total_overdue=_sum_due(OVERDUE),
        collection_rate=collection_rate(visible_payments),
        total_properties=len(views),
        paid_properties=_count(PAID),
        pending_properties=_count(PENDING),
        overdue_properties=_count(OVERDUE),
        vacant_properties=_count(None),
        monthly_rent_roll=float(sum(v.monthly_rent for v in views)),
        properties=views,
    )
