# backend/rentcycle/middleware/structured_logging.py
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("rentcycle.request")

_ROUTE_IDS = ("property_id", "lease_id", "payment_id")


def request_log_extra(request: Request, status_code: int, latency_ms: float) -> dict[str, Any]:
    """`extra=` payload for the http_request record."""
    extra: dict[str, Any] = {
        "http": {
            "event": "http_request",
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "latency_ms": latency_ms,
        }
    }

    # routing fills path_params on the shared scope
    params = request.scope.get("path_params") or {}
    for k in _ROUTE_IDS:
        if k in params:
            extra[k] = params[k]

    as_of = request.query_params.get("as_of")
    if as_of:
        extra["as_of"] = as_of
    return extra


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    One `http_request` record per call. Runs inside RequestIDMiddleware, so
    the formatter picks the request id up from its ContextVar. Server errors
    log at WARNING.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        t0 = time.perf_counter()

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = round((time.perf_counter() - t0) * 1000, 1)
            level = logging.WARNING if status_code >= 500 else logging.INFO
            log.log(level, "http_request", extra=request_log_extra(request, status_code, latency_ms))
