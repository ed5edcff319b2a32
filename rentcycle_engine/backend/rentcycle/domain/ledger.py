# backend/rentcycle/domain/ledger.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence, TypeVar

from .dates import as_date
from .rows import get_field

T = TypeVar("T")


@dataclass(frozen=True)
class PaymentRecord:
    id: Any
    lease_id: Any
    payment_date: date
    payment_amount: float
    status: str  # completed | pending | failed
    payment_type: str = "Rent"
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    payment_type_details: Optional[str] = None
    original_payment_id: Any = None


def is_reversal(payment: Any) -> bool:
    return get_field(payment, "original_payment_id") is not None


def reversed_ids(payments: Sequence[Any]) -> set[Any]:
    """Ids of payments that some record in the ledger reverses."""
    return {get_field(p, "original_payment_id") for p in payments if is_reversal(p)}


def filter_valid_payments(payments: Sequence[T]) -> list[T]:
    """
    Visible ledger: drop every payment that has been reversed and every reversal record.

    Input order is preserved. The original and its reversal cancel out, so
    removing both leaves every total unchanged.
    """
    targets = reversed_ids(payments)
    return [p for p in payments if not is_reversal(p) and get_field(p, "id") not in targets]


def find_duplicate_reversals(payments: Sequence[Any]) -> list[Any]:
    """Original payment ids targeted by more than one reversal record."""
    counts = Counter(get_field(p, "original_payment_id") for p in payments if is_reversal(p))
    return [pid for pid, n in counts.items() if n > 1]


def reversal_reference(original: Any) -> str:
    ref = get_field(original, "reference")
    if ref:
        return f"REV-{ref}"
    return f"REV-{str(get_field(original, 'id'))[-8:]}"


def build_reversal(original: Any, *, today: Any) -> dict[str, Any]:
    """
    Field values of the compensating record for `original`.

    The reversal negates the amount, is dated `today`, is already completed,
    and points back at the original. The original itself is never touched.
    """
    payment_type = get_field(original, "payment_type")
    return {
        "lease_id": get_field(original, "lease_id"),
        "payment_amount": -float(get_field(original, "payment_amount", 0.0) or 0.0),
        "payment_date": as_date(today, field="today"),
        "payment_method": get_field(original, "payment_method"),
        "reference": reversal_reference(original),
        "notes": f"Reversal of payment {get_field(original, 'id')}",
        "payment_type": payment_type,
        "payment_type_details": get_field(original, "payment_type_details") if payment_type == "Other" else None,
        "status": "completed",
        "original_payment_id": get_field(original, "id"),
    }
