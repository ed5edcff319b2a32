# backend/rentcycle/domain/rows.py
from __future__ import annotations

from typing import Any


def get_field(row: Any, name: str, default: Any = None) -> Any:
    """Read `name` from an ORM row, a dataclass or a plain dict."""
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)
