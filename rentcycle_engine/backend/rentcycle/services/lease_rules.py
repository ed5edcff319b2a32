from __future__ import annotations

from datetime import date
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.dates import as_date, as_optional_date
from ..models import Lease


class LeaseConflictError(ValueError):
    def __init__(self, message: str, conflict_lease_id: Optional[int] = None):
        super().__init__(message)
        self.conflict_lease_id = conflict_lease_id


def _overlaps(a_start: date, a_end: Optional[date], b_start: date, b_end: Optional[date]) -> bool:
    """
    Overlap rule:
    - Treat end dates as inclusive.
    - If end is None, treat it as open-ended.
    """
    a_end_eff = a_end or date.max
    b_end_eff = b_end or date.max
    return not (a_end_eff < b_start or b_end_eff < a_start)


def ensure_single_active_lease(db: Session, *, property_id: int, ignore_lease_id: Optional[int] = None) -> None:
    """Raise LeaseConflictError if the property already has an active lease."""
    q = select(Lease).where(Lease.property_id == int(property_id), Lease.is_active.is_(True))
    if ignore_lease_id is not None:
        q = q.where(Lease.id != int(ignore_lease_id))

    row = db.scalar(q.limit(1))
    if row is not None:
        raise LeaseConflictError(
            f"property {property_id} already has an active lease id={row.id}",
            conflict_lease_id=int(row.id),
        )


def ensure_no_lease_overlap(
    db: Session,
    *,
    property_id: int,
    start_date: Any,
    end_date: Any = None,
    ignore_lease_id: Optional[int] = None,
) -> None:
    """
    Raise LeaseConflictError if the date range overlaps any lease on the property,
    active or ended. Raises InvalidDateError for unparseable dates.
    """
    s = as_date(start_date, field="start_date")
    e = as_optional_date(end_date, field="end_date")

    if e is not None and e < s:
        raise ValueError("lease end_date cannot be before start_date")

    q = select(Lease).where(Lease.property_id == int(property_id))
    if ignore_lease_id is not None:
        q = q.where(Lease.id != int(ignore_lease_id))

    for r in db.scalars(q.order_by(Lease.id.desc())).all():
        r_start = as_date(r.start_date, field="start_date")
        r_end = as_optional_date(r.end_date, field="end_date")

        if _overlaps(s, e, r_start, r_end):
            raise LeaseConflictError(
                f"lease dates overlap with existing lease id={int(r.id)} "
                f"({r_start.isoformat()} -> {(r_end.isoformat() if r_end else 'open-ended')})",
                conflict_lease_id=int(r.id),
            )


def active_lease_for_property(db: Session, *, property_id: int) -> Optional[Lease]:
    return db.scalar(
        select(Lease)
        .where(Lease.property_id == int(property_id), Lease.is_active.is_(True))
        .order_by(Lease.id.desc())
        .limit(1)
    )
