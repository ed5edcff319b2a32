# backend/rentcycle/middleware/request_id.py
from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LEN = 128

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def accept_request_id(raw: str | None) -> str | None:
    """Caller-supplied id, or None when it is empty, oversized or unprintable."""
    rid = (raw or "").strip()
    if not rid or len(rid) > MAX_REQUEST_ID_LEN or not rid.isprintable():
        return None
    return rid


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every call with a request id (the caller's when usable, else a
    fresh uuid4). The id lives in a ContextVar for the log formatter, on
    request.state for handlers, and is echoed back in X-Request-ID.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER)) or str(uuid.uuid4())

        request.state.request_id = rid
        token = request_id_ctx.set(rid)
        try:
            resp = await call_next(request)
            resp.headers[REQUEST_ID_HEADER] = rid
            return resp
        finally:
            request_id_ctx.reset(token)
