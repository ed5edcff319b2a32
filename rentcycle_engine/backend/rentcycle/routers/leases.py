# backend/rentcycle/routers/leases.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..domain.audit import audit_write
from ..domain.lease_status import lease_status_or_default
from ..models import Lease
from ..schemas import LeaseCreate, LeaseOut, LeaseStatusOut
from ..services.dashboard_rollups import resolve_as_of
from ..services.lease_rules import LeaseConflictError, ensure_no_lease_overlap, ensure_single_active_lease
from ..services.ownership import must_get_lease, must_get_property, must_get_tenant

router = APIRouter(prefix="/leases", tags=["leases"])


@router.post("", response_model=LeaseOut)
def create_lease(payload: LeaseCreate, db: Session = Depends(get_db)):
    prop = must_get_property(db, property_id=payload.property_id)
    if payload.tenant_id is not None:
        must_get_tenant(db, tenant_id=payload.tenant_id)

    try:
        ensure_single_active_lease(db, property_id=payload.property_id)
        ensure_no_lease_overlap(
            db,
            property_id=payload.property_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
        )
    except LeaseConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    row = Lease(**payload.lease_fields(), is_active=True)
    db.add(row)
    prop.status = "occupied"
    db.flush()

    audit_write(db, action="lease.create", entity_type="Lease", entity_id=row.id, after=row.model_dump())
    db.commit()
    db.refresh(row)
    return row


@router.get("", response_model=list[LeaseOut])
def list_leases(
    property_id: int | None = Query(default=None),
    active_only: bool = Query(default=False),
    limit: int = Query(default=200, ge=1, le=2000),
    db: Session = Depends(get_db),
):
    q = select(Lease)

    if property_id is not None:
        must_get_property(db, property_id=property_id)
        q = q.where(Lease.property_id == property_id)

    if active_only:
        q = q.where(Lease.is_active.is_(True))

    q = q.order_by(desc(Lease.id)).limit(limit)
    return list(db.scalars(q).all())


@router.post("/{lease_id}/terminate", response_model=LeaseOut)
def terminate_lease(
    lease_id: int,
    as_of: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
):
    """
    Ends the lease on `as_of` (default today), which must fall after
    the start date. Payments stay on the ledger; the property stops being billed
    from the next evaluation on.
    """
    row = must_get_lease(db, lease_id=lease_id)
    if not row.is_active:
        raise HTTPException(status_code=409, detail="lease already ended")

    before = row.model_dump()
    ended_on = resolve_as_of(as_of)
    if ended_on <= row.start_date:
        raise HTTPException(status_code=409, detail="lease cannot end on or before its start date")

    row.is_active = False
    if row.end_date is None or row.end_date > ended_on:
        row.end_date = ended_on
    row.updated_at = datetime.utcnow()
    row.property.status = "vacant"

    audit_write(db, action="lease.terminate", entity_type="Lease", entity_id=row.id, before=before, after=row.model_dump())
    db.commit()
    db.refresh(row)
    return row


@router.get("/{lease_id}/status", response_model=LeaseStatusOut)
def lease_status(
    lease_id: int,
    as_of: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
):
    row = must_get_lease(db, lease_id=lease_id)
    st = lease_status_or_default(
        row.end_date,
        resolve_as_of(as_of),
        expiring_soon_days=settings.lease_expiring_soon_days,
    )
    return LeaseStatusOut(lease_id=row.id, **st.to_dict())
