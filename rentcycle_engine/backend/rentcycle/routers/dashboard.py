# backend/rentcycle/routers/dashboard.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import PortfolioSummaryOut, PropertyRentStatusOut
from ..services.dashboard_rollups import compute_portfolio_summary, resolve_as_of

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/rent_status", response_model=list[PropertyRentStatusOut])
def rent_status(
    as_of: Optional[date] = Query(default=None),
    limit: int = Query(default=500, ge=1, le=2000),
    db: Session = Depends(get_db),
):
    """
    One row per property for the cycle being collected as of `as_of`.
    Vacant properties carry payment_status null.
    """
    summary = compute_portfolio_summary(db, as_of=resolve_as_of(as_of), limit=limit)
    return [
        PropertyRentStatusOut(
            property_id=v.property_id,
            name=v.name,
            lease_id=v.lease_id,
            monthly_rent=v.monthly_rent,
            payment_status=v.payment_status,
            amount_due=v.amount_due,
            days_occupied=v.days_occupied,
            lease_status=v.lease_status.to_dict(),
        )
        for v in summary.properties
    ]


@router.get("/summary", response_model=PortfolioSummaryOut)
def summary(
    as_of: Optional[date] = Query(default=None),
    limit: int = Query(default=2000, ge=1, le=2000),
    db: Session = Depends(get_db),
):
    """Top dashboard cards: collected, pending, overdue, collection rate."""
    ref = resolve_as_of(as_of)
    s = compute_portfolio_summary(db, as_of=ref, limit=limit)
    data = s.to_dict()
    data.pop("properties", None)
    return PortfolioSummaryOut(as_of=ref, **data)
