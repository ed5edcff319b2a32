# backend/rentcycle/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from rentcycle.db import SessionLocal, init_db
from rentcycle.domain.dates import add_months
from rentcycle.models import Lease, Payment, Property, Tenant


@dataclass(frozen=True)
class SeedResult:
    property_ids: list[int]
    lease_ids: list[int]
    payment_ids: list[int]


def _get_or_create_property(db: Session, name: str, address: str) -> Property:
    row = db.query(Property).filter(Property.name == name).one_or_none()
    if row:
        return row
    row = Property(name=name, address=address, status="vacant")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get_or_create_tenant(db: Session, name: str) -> Tenant:
    row = db.query(Tenant).filter(Tenant.name == name).one_or_none()
    if row:
        return row
    row = Tenant(name=name)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _ensure_active_lease(db: Session, *, prop: Property, tenant: Tenant, monthly_rent: float, start: date) -> Lease:
    row = db.query(Lease).filter(Lease.property_id == prop.id, Lease.is_active.is_(True)).one_or_none()
    if row:
        return row
    row = Lease(
        property_id=prop.id,
        tenant_id=tenant.id,
        monthly_rent=monthly_rent,
        start_date=start,
        end_date=add_months(start, 12),
        is_active=True,
    )
    prop.status = "occupied"
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def seed_demo(*, as_of: date) -> SeedResult:
    """
    Three properties around `as_of`:
      - a lease paid this month
      - a lease that started mid last month with nothing paid yet
      - a vacant unit
    Re-running is safe: existing rows are reused.
    """
    init_db()
    db = SessionLocal()
    try:
        first_of_month = as_of.replace(day=1)
        last_month_16th = add_months(first_of_month, -1).replace(day=16)

        a = _get_or_create_property(db, "Maple Court 1A", "1 Maple Court")
        b = _get_or_create_property(db, "Maple Court 2B", "1 Maple Court")
        c = _get_or_create_property(db, "Cedar Row 7", "7 Cedar Row")

        ta = _get_or_create_tenant(db, "Asha Rao")
        tb = _get_or_create_tenant(db, "Dev Mehta")

        la = _ensure_active_lease(db, prop=a, tenant=ta, monthly_rent=25000.0, start=add_months(first_of_month, -6))
        lb = _ensure_active_lease(db, prop=b, tenant=tb, monthly_rent=30000.0, start=last_month_16th)

        payment_ids: list[int] = []
        if not db.query(Payment).filter(Payment.lease_id == la.id).count():
            pay = Payment(
                lease_id=la.id,
                payment_date=first_of_month,
                payment_amount=25000.0,
                payment_method="bank_transfer",
                reference="DEMO-0001",
                payment_type="Rent",
                status="completed",
            )
            db.add(pay)
            db.commit()
            db.refresh(pay)
            payment_ids.append(int(pay.id))

        return SeedResult(
            property_ids=[int(a.id), int(b.id), int(c.id)],
            lease_ids=[int(la.id), int(lb.id)],
            payment_ids=payment_ids,
        )
    finally:
        db.close()
