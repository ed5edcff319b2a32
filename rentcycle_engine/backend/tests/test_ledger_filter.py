# backend/tests/test_ledger_filter.py
from __future__ import annotations

from datetime import date

from rentcycle.domain.ledger import (
    PaymentRecord,
    build_reversal,
    filter_valid_payments,
    find_duplicate_reversals,
    is_reversal,
)


def _pay(pid, amount=1000.0, original=None, status="completed", **kw) -> PaymentRecord:
    return PaymentRecord(
        id=pid,
        lease_id=kw.pop("lease_id", 7),
        payment_date=kw.pop("payment_date", date(2026, 5, 2)),
        payment_amount=amount,
        status=status,
        original_payment_id=original,
        **kw,
    )


def test_reversed_pair_disappears():
    p = _pay(1)
    r = _pay(2, amount=-1000.0, original=1)
    assert filter_valid_payments([p, r]) == []
    assert filter_valid_payments([r, p]) == []


def test_unreversed_payment_stays():
    p = _pay(1)
    assert filter_valid_payments([p]) == [p]


def test_order_preserved_for_survivors():
    a, b, c = _pay(10), _pay(11, status="pending"), _pay(12, status="failed")
    rev = _pay(13, amount=-1000.0, original=11)
    assert filter_valid_payments([c, a, rev, b]) == [c, a]


def test_orphan_reversal_is_still_hidden():
    # the original is outside this slice of the ledger
    r = _pay(2, amount=-1000.0, original=99)
    assert filter_valid_payments([r]) == []


def test_filter_is_idempotent():
    rows = [_pay(1), _pay(2, amount=-1000.0, original=1), _pay(3), _pay(4, amount=500.0)]
    once = filter_valid_payments(rows)
    assert filter_valid_payments(once) == once


def test_dict_rows():
    rows = [
        {"id": "a", "payment_amount": 10, "original_payment_id": None},
        {"id": "b", "payment_amount": -10, "original_payment_id": "a"},
        {"id": "c", "payment_amount": 5, "original_payment_id": None},
    ]
    assert [r["id"] for r in filter_valid_payments(rows)] == ["c"]


def test_double_reversal_is_detectable():
    rows = [_pay(1), _pay(2, amount=-1000.0, original=1), _pay(3, amount=-1000.0, original=1), _pay(4)]
    assert find_duplicate_reversals(rows) == [1]
    assert find_duplicate_reversals(rows[:2]) == []


def test_build_reversal_fields():
    original = _pay(
        42,
        amount=25000.0,
        payment_method="upi",
        reference="UTR123",
        payment_type="Rent",
        payment_type_details="ignored",
        payment_date=date(2026, 4, 3),
    )
    rev = build_reversal(original, today=date(2026, 5, 9))

    assert rev["payment_amount"] == -25000.0
    assert rev["payment_date"] == date(2026, 5, 9)
    assert rev["lease_id"] == 7
    assert rev["payment_method"] == "upi"
    assert rev["payment_type"] == "Rent"
    assert rev["payment_type_details"] is None
    assert rev["reference"] == "REV-UTR123"
    assert rev["notes"] == "Reversal of payment 42"
    assert rev["status"] == "completed"
    assert rev["original_payment_id"] == 42
    assert is_reversal(rev)

    # original untouched
    assert original.payment_amount == 25000.0
    assert original.original_payment_id is None


def test_build_reversal_without_reference_uses_id_tail():
    original = _pay("3f2a9c7e-0000-4000-8000-1234abcd5678")
    assert build_reversal(original, today="2026-05-09")["reference"] == "REV-abcd5678"


def test_build_reversal_keeps_other_details():
    original = _pay(5, payment_type="Other", payment_type_details="parking fee")
    assert build_reversal(original, today=date(2026, 5, 9))["payment_type_details"] == "parking fee"
