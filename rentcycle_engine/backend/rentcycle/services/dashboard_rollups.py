# backend/rentcycle/services/dashboard_rollups.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..config import settings
from ..domain.portfolio import PortfolioProperty, PortfolioSummary, summarize_portfolio
from ..domain.rent_cycle import PropertyWithLease
from ..models import Lease, Property
from .payment_service import list_payments_for_properties


def today_utc_date() -> date:
    return datetime.utcnow().date()


def resolve_as_of(as_of: Optional[date]) -> date:
    return as_of if as_of is not None else today_utc_date()


def _snapshot(lease: Optional[Lease]) -> Optional[PropertyWithLease]:
    if lease is None:
        return None
    return PropertyWithLease(
        id=lease.property_id,
        lease_id=lease.id,
        monthly_rent=float(lease.monthly_rent or 0.0),
        start_date=lease.start_date,
        is_active=bool(lease.is_active),
    )


def load_portfolio(db: Session, *, limit: int = 2000) -> list[PortfolioProperty]:
    """Every property paired with its active lease, or None when vacant."""
    props = db.scalars(select(Property).order_by(desc(Property.id)).limit(limit)).all()
    if not props:
        return []

    active = {
        l.property_id: l
        for l in db.scalars(
            select(Lease)
            .where(Lease.property_id.in_([p.id for p in props]), Lease.is_active.is_(True))
            .order_by(Lease.id)
        ).all()
    }

    out: list[PortfolioProperty] = []
    for p in props:
        lease = active.get(p.id)
        out.append(
            PortfolioProperty(
                id=p.id,
                name=p.name,
                lease=_snapshot(lease),
                lease_end_date=lease.end_date if lease is not None else None,
            )
        )
    return out


def compute_portfolio_summary(db: Session, *, as_of: date, limit: int = 2000) -> PortfolioSummary:
    """
    Dashboard figures (single source of truth inputs):
    - properties + active leases from storage
    - payments on those leases, reversed pairs already removed
    - rent cycle status per property as of `as_of`
    """
    portfolio = load_portfolio(db, limit=limit)
    payments = list_payments_for_properties(db, property_ids=[p.id for p in portfolio])

    return summarize_portfolio(
        portfolio,
        payments,
        as_of,
        grace_period_days=settings.rent_grace_period_days,
        expiring_soon_days=settings.lease_expiring_soon_days,
    )
