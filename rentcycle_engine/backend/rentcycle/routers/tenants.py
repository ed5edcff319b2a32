# backend/rentcycle/routers/tenants.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..db import get_db
from ..domain.audit import audit_write
from ..models import Tenant
from ..schemas import TenantCreate, TenantOut

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("", response_model=TenantOut)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db)):
    row = Tenant(**payload.model_dump())
    db.add(row)
    db.flush()

    audit_write(db, action="tenant.create", entity_type="Tenant", entity_id=row.id, after=row.model_dump())
    db.commit()
    db.refresh(row)
    return row


@router.get("", response_model=list[TenantOut])
def list_tenants(
    limit: int = Query(default=100, ge=1, le=2000),
    db: Session = Depends(get_db),
):
    q = select(Tenant).order_by(desc(Tenant.id)).limit(limit)
    return list(db.scalars(q).all())
