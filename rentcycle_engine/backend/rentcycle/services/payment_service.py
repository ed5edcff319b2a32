# backend/rentcycle/services/payment_service.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..domain.audit import audit_write
from ..domain.ledger import build_reversal, filter_valid_payments
from ..models import Lease, Payment

log = logging.getLogger(__name__)


class PaymentNotFoundError(LookupError):
    def __init__(self, payment_id: Any):
        super().__init__(f"payment {payment_id} not found")
        self.payment_id = payment_id


class ReversalConflictError(ValueError):
    def __init__(self, message: str, payment_id: Any):
        super().__init__(message)
        self.payment_id = payment_id


def list_payments_for_property(db: Session, *, property_id: int) -> list[Payment]:
    """Visible payments on the property's active lease, newest payment_date first."""
    q = (
        select(Payment)
        .join(Lease, Payment.lease_id == Lease.id)
        .where(Lease.property_id == int(property_id), Lease.is_active.is_(True))
        .order_by(desc(Payment.payment_date), desc(Payment.id))
    )
    return filter_valid_payments(list(db.scalars(q).all()))


def list_payments_for_properties(db: Session, *, property_ids: Iterable[int]) -> list[Payment]:
    """Visible payments on the active leases of several properties, newest first."""
    ids = [int(x) for x in property_ids]
    if not ids:
        return []

    q = (
        select(Payment)
        .join(Lease, Payment.lease_id == Lease.id)
        .where(Lease.property_id.in_(ids), Lease.is_active.is_(True))
        .order_by(desc(Payment.created_at), desc(Payment.id))
    )
    return filter_valid_payments(list(db.scalars(q).all()))


def list_payments(
    db: Session,
    *,
    lease_id: Optional[int] = None,
    limit: int = 500,
) -> list[Payment]:
    """
    Visible payments across every lease, active or ended, newest payment_date first.

    Filtering runs before the limit so a reversal is never separated from the
    payment it cancels.
    """
    q = select(Payment)
    if lease_id is not None:
        q = q.where(Payment.lease_id == int(lease_id))
    q = q.order_by(desc(Payment.payment_date), desc(Payment.id))

    visible = filter_valid_payments(list(db.scalars(q).all()))
    return visible[: int(limit)]


def record_payment(db: Session, *, data: dict[str, Any]) -> Payment:
    row = Payment(**data)
    db.add(row)
    db.flush()

    audit_write(
        db,
        action="payment.create",
        entity_type="Payment",
        entity_id=row.id,
        before=None,
        after=row.model_dump(),
    )
    db.commit()
    db.refresh(row)

    log.info("payment recorded", extra={"payment_id": row.id, "lease_id": row.lease_id})
    return row


def reverse_payment(db: Session, *, payment_id: int, today: date) -> Payment:
    """
    Append a compensating record for `payment_id`; the original is never modified.

    Raises PaymentNotFoundError when the id does not resolve and
    ReversalConflictError when the target is itself a reversal or has already
    been reversed. Two concurrent requests can both pass the read check; the
    UNIQUE constraint on original_payment_id turns the loser's insert into a
    ReversalConflictError instead of a second reversal row.
    """
    original = db.scalar(select(Payment).where(Payment.id == int(payment_id)))
    if original is None:
        log.info("reversal target not found", extra={"payment_id": payment_id})
        raise PaymentNotFoundError(payment_id)

    if original.original_payment_id is not None:
        raise ReversalConflictError(f"payment {payment_id} is a reversal and cannot be reversed", payment_id)

    existing = db.scalar(select(Payment.id).where(Payment.original_payment_id == original.id))
    if existing is not None:
        log.warning(
            "payment already reversed",
            extra={"payment_id": existing, "original_payment_id": original.id},
        )
        raise ReversalConflictError(f"payment {payment_id} was already reversed by payment {existing}", payment_id)

    row = Payment(**build_reversal(original, today=today))
    db.add(row)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        log.warning("concurrent reversal rejected", extra={"original_payment_id": payment_id})
        raise ReversalConflictError(f"payment {payment_id} was already reversed", payment_id) from None

    audit_write(
        db,
        action="payment.reverse",
        entity_type="Payment",
        entity_id=original.id,
        before=original.model_dump(),
        after=row.model_dump(),
    )
    db.commit()
    db.refresh(row)

    log.info(
        "payment reversed",
        extra={"payment_id": row.id, "original_payment_id": original.id, "lease_id": row.lease_id},
    )
    return row
