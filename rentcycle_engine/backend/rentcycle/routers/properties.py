# backend/rentcycle/routers/properties.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..db import get_db
from ..domain.audit import audit_write
from ..models import Property
from ..schemas import PropertyCreate, PropertyOut

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyOut)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db)):
    row = Property(**payload.model_dump())
    db.add(row)
    db.flush()

    audit_write(db, action="property.create", entity_type="Property", entity_id=row.id, after=row.model_dump())
    db.commit()
    db.refresh(row)
    return row


@router.get("", response_model=list[PropertyOut])
def list_properties(
    limit: int = Query(default=200, ge=1, le=2000),
    db: Session = Depends(get_db),
):
    q = select(Property).order_by(desc(Property.id)).limit(limit)
    return list(db.scalars(q).all())
