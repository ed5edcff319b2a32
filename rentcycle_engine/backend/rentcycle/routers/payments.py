# backend/rentcycle/routers/payments.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..schemas import PaymentCreate, PaymentOut
from ..services.dashboard_rollups import resolve_as_of
from ..services.ownership import must_get_lease, must_get_property
from ..services.payment_service import (
    PaymentNotFoundError,
    ReversalConflictError,
    list_payments,
    list_payments_for_property,
    record_payment,
    reverse_payment,
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentOut)
def create_payment(payload: PaymentCreate, db: Session = Depends(get_db)):
    must_get_lease(db, lease_id=payload.lease_id)
    return record_payment(db, data=payload.model_dump())


@router.get("", response_model=list[PaymentOut])
def get_payments(
    property_id: int | None = Query(default=None),
    lease_id: int | None = Query(default=None),
    limit: int = Query(default=settings.payments_list_limit, ge=1, le=2000),
    db: Session = Depends(get_db),
):
    """
    Visible ledger only: reversed payments and their reversal records are
    left out. With property_id, only the property's active lease is listed.
    """
    if property_id is not None and lease_id is not None:
        raise HTTPException(status_code=422, detail="filter by property_id or lease_id, not both")

    if property_id is not None:
        must_get_property(db, property_id=property_id)
        return list_payments_for_property(db, property_id=property_id)[:limit]

    if lease_id is not None:
        must_get_lease(db, lease_id=lease_id)

    return list_payments(db, lease_id=lease_id, limit=limit)


@router.post("/{payment_id}/reverse", response_model=PaymentOut)
def reverse(
    payment_id: int,
    as_of: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
):
    try:
        return reverse_payment(db, payment_id=payment_id, today=resolve_as_of(as_of))
    except PaymentNotFoundError:
        raise HTTPException(status_code=404, detail="payment not found")
    except ReversalConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
