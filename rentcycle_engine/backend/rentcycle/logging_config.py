# backend/rentcycle/logging_config.py
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import settings
from .middleware.request_id import get_request_id

# ids passed via `extra=` that become top-level keys, so one reversal can be
# followed across the request line, the service log and the audit row
LEDGER_FIELDS = ("property_id", "lease_id", "payment_id", "original_payment_id", "as_of")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record: ts, level, logger, message, env, request_id,
    any ledger ids, and the `http` block the request logger attaches.
    """

    def __init__(self, *, env: str = "local"):
        super().__init__()
        self.env = env

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": self.env,
        }

        rid = get_request_id()
        if rid:
            payload["request_id"] = rid

        http = getattr(record, "http", None)
        if isinstance(http, dict):
            payload.update(http)

        for k in LEDGER_FIELDS:
            v = getattr(record, k, None)
            if v is not None:
                payload[k] = v

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> None:
    lvl = (level or settings.log_level or "INFO").upper()

    root = logging.getLogger()
    root.setLevel(lvl)

    # create_app() may run more than once per process (tests, reload)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(lvl)
    handler.setFormatter(JsonFormatter(env=settings.app_env))
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel((settings.sql_log_level or "WARNING").upper())
