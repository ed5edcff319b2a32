# backend/tests/test_payment_reversal.py
from __future__ import annotations

import json
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from rentcycle.models import AuditEvent, Lease, Payment, Property
from rentcycle.services.payment_service import (
    PaymentNotFoundError,
    ReversalConflictError,
    list_payments,
    list_payments_for_properties,
    list_payments_for_property,
    record_payment,
    reverse_payment,
)


def _mk_lease(db, *, name="Unit 1", rent=30000.0, active=True) -> Lease:
    prop = Property(name=name, status="occupied")
    db.add(prop); db.commit(); db.refresh(prop)

    lease = Lease(property_id=prop.id, monthly_rent=rent, start_date=date(2026, 1, 1), is_active=active)
    db.add(lease); db.commit(); db.refresh(lease)
    return lease


def _pay(db, lease: Lease, amount: float, d: date, **kw) -> Payment:
    return record_payment(
        db,
        data={
            "lease_id": lease.id,
            "payment_date": d,
            "payment_amount": amount,
            "payment_method": kw.get("payment_method", "bank_transfer"),
            "reference": kw.get("reference"),
            "payment_type": kw.get("payment_type", "Rent"),
            "payment_type_details": kw.get("payment_type_details"),
            "status": kw.get("status", "completed"),
        },
    )


def test_reverse_appends_compensating_record(db):
    lease = _mk_lease(db)
    original = _pay(db, lease, 30000.0, date(2026, 5, 2), reference="UTR-77")

    rev = reverse_payment(db, payment_id=original.id, today=date(2026, 5, 9))

    assert rev.id != original.id
    assert rev.payment_amount == -30000.0
    assert rev.payment_date == date(2026, 5, 9)
    assert rev.lease_id == lease.id
    assert rev.status == "completed"
    assert rev.original_payment_id == original.id
    assert rev.reference == "REV-UTR-77"
    assert rev.notes == f"Reversal of payment {original.id}"

    db.refresh(original)
    assert original.payment_amount == 30000.0
    assert original.original_payment_id is None

    rows = db.scalars(select(Payment).where(Payment.lease_id == lease.id)).all()
    assert len(rows) == 2

    audit = db.scalar(select(AuditEvent).where(AuditEvent.action == "payment.reverse"))
    assert audit is not None
    assert json.loads(audit.after_json)["original_payment_id"] == original.id


def test_reversed_pair_leaves_visible_ledger(db):
    lease = _mk_lease(db)
    keep = _pay(db, lease, 30000.0, date(2026, 4, 2))
    gone = _pay(db, lease, 30000.0, date(2026, 5, 2))
    reverse_payment(db, payment_id=gone.id, today=date(2026, 5, 3))

    assert [p.id for p in list_payments(db, lease_id=lease.id)] == [keep.id]
    assert [p.id for p in list_payments_for_property(db, property_id=lease.property_id)] == [keep.id]
    assert [p.id for p in list_payments_for_properties(db, property_ids=[lease.property_id])] == [keep.id]


def test_missing_payment_is_not_found(db):
    with pytest.raises(PaymentNotFoundError):
        reverse_payment(db, payment_id=424242, today=date(2026, 5, 9))


def test_second_reversal_is_rejected(db):
    lease = _mk_lease(db)
    original = _pay(db, lease, 1000.0, date(2026, 5, 2))
    reverse_payment(db, payment_id=original.id, today=date(2026, 5, 3))

    with pytest.raises(ReversalConflictError):
        reverse_payment(db, payment_id=original.id, today=date(2026, 5, 4))

    assert len(db.scalars(select(Payment).where(Payment.lease_id == lease.id)).all()) == 2


def test_reversal_cannot_be_reversed(db):
    lease = _mk_lease(db)
    original = _pay(db, lease, 1000.0, date(2026, 5, 2))
    rev = reverse_payment(db, payment_id=original.id, today=date(2026, 5, 3))

    with pytest.raises(ReversalConflictError):
        reverse_payment(db, payment_id=rev.id, today=date(2026, 5, 4))


def test_storage_enforces_one_reversal_per_payment(db):
    lease = _mk_lease(db)
    original = _pay(db, lease, 1000.0, date(2026, 5, 2))

    for _ in range(2):
        db.add(
            Payment(
                lease_id=lease.id,
                payment_date=date(2026, 5, 3),
                payment_amount=-1000.0,
                status="completed",
                original_payment_id=original.id,
            )
        )
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_property_listing_ignores_ended_leases(db):
    ended = _mk_lease(db, name="Old", active=False)
    _pay(db, ended, 500.0, date(2026, 5, 2))

    assert list_payments_for_property(db, property_id=ended.property_id) == []
    assert len(list_payments(db, lease_id=ended.id)) == 1
    assert list_payments_for_properties(db, property_ids=[]) == []


def test_concurrent_reversal_loses_on_constraint(db, monkeypatch):
    lease = _mk_lease(db)
    original = _pay(db, lease, 1000.0, date(2026, 5, 2))
    original_id = original.id

    # another request already committed its reversal
    db.add(
        Payment(
            lease_id=lease.id,
            payment_date=date(2026, 5, 3),
            payment_amount=-1000.0,
            status="completed",
            original_payment_id=original_id,
        )
    )
    db.commit()

    # ...but this request's "already reversed" read ran before that commit
    real_scalar = db.scalar
    calls = []

    def stale_scalar(stmt, *args, **kwargs):
        calls.append(stmt)
        if len(calls) == 2:
            return None
        return real_scalar(stmt, *args, **kwargs)

    monkeypatch.setattr(db, "scalar", stale_scalar)

    with pytest.raises(ReversalConflictError):
        reverse_payment(db, payment_id=original_id, today=date(2026, 5, 4))

    monkeypatch.undo()
    reversals = db.scalars(select(Payment).where(Payment.original_payment_id == original_id)).all()
    assert len(reversals) == 1
    assert db.scalar(select(AuditEvent).where(AuditEvent.action == "payment.reverse")) is None
