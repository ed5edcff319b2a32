# backend/rentcycle/domain/lease_status.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Optional

from .dates import as_date, as_optional_date

ACTIVE = "active"
EXPIRING_TODAY = "expiring_today"
EXPIRING_SOON = "expiring_soon"
EXPIRED = "expired"


@dataclass(frozen=True)
class LeaseStatus:
    status: str  # active | expiring_today | expiring_soon | expired
    message: str
    days_remaining: int
    priority: int  # 1 (calm) .. 5 (act now)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


NO_LEASE = LeaseStatus(status=ACTIVE, message="No Lease", days_remaining=0, priority=1)


def _soon_priority(days: int) -> int:
    if days <= 3:
        return 5
    if days <= 7:
        return 4
    return 3


def calculate_lease_status(
    lease_end_date: Any,
    today: Any,
    *,
    expiring_soon_days: int = 15,
) -> LeaseStatus:
    """
    Lifecycle status of a lease relative to `today`.

    Both dates are compared as calendar days, so time-of-day never shifts
    the result:
      end == today            -> expiring_today (priority 5)
      end <  today            -> expired, days_remaining = days since end (priority 5)
      end within N days       -> expiring_soon (5 if <=3 days, 4 if <=7, else 3)
      otherwise               -> active (priority 1)
    """
    end = as_date(lease_end_date, field="lease_end_date")
    ref = as_date(today, field="today")

    diff = (end - ref).days

    if diff == 0:
        return LeaseStatus(status=EXPIRING_TODAY, message="Lease Expiring today", days_remaining=0, priority=5)

    if diff < 0:
        return LeaseStatus(status=EXPIRED, message="Lease Expired", days_remaining=abs(diff), priority=5)

    if diff <= int(expiring_soon_days):
        plural = "" if diff == 1 else "s"
        return LeaseStatus(
            status=EXPIRING_SOON,
            message=f"Lease expiring in {diff} day{plural}",
            days_remaining=diff,
            priority=_soon_priority(diff),
        )

    return LeaseStatus(status=ACTIVE, message="Active", days_remaining=diff, priority=1)


def lease_status_or_default(
    lease_end_date: Optional[Any],
    today: date,
    *,
    expiring_soon_days: int = 15,
) -> LeaseStatus:
    """No lease, or an open-ended one, reads as active / "No Lease" rather than an error."""
    end = as_optional_date(lease_end_date, field="lease_end_date")
    if end is None:
        return NO_LEASE
    return calculate_lease_status(end, today, expiring_soon_days=expiring_soon_days)
