# backend/tests/test_logging_config.py
from __future__ import annotations

import json
import logging

from rentcycle.logging_config import JsonFormatter
from rentcycle.middleware.request_id import accept_request_id, request_id_ctx


def _record(msg: str, **extra) -> logging.LogRecord:
    rec = logging.LogRecord("rentcycle.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_ledger_ids_become_top_level_keys():
    rec = _record("payment reversed", payment_id=8, original_payment_id=3, lease_id=None)
    out = json.loads(JsonFormatter(env="test").format(rec))

    assert out["message"] == "payment reversed"
    assert out["env"] == "test"
    assert out["payment_id"] == 8
    assert out["original_payment_id"] == 3
    assert "lease_id" not in out
    assert "request_id" not in out


def test_request_id_and_http_block():
    token = request_id_ctx.set("rid-1")
    try:
        rec = _record("http_request", http={"method": "POST", "status_code": 409}, as_of="2026-05-09")
        out = json.loads(JsonFormatter().format(rec))
    finally:
        request_id_ctx.reset(token)

    assert out["request_id"] == "rid-1"
    assert out["method"] == "POST"
    assert out["status_code"] == 409
    assert out["as_of"] == "2026-05-09"


def test_accept_request_id():
    assert accept_request_id(" abc-123 ") == "abc-123"
    assert accept_request_id("") is None
    assert accept_request_id(None) is None
    assert accept_request_id("a" * 129) is None
    assert accept_request_id("bad\nid") is None
