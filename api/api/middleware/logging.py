"""Access logging for the studio API.

One record per request on the ``api.access`` logger.  The request context
is attached as ``extra={"request": ...}`` so the JSON formatter can emit it
as structured fields.  A correlation id is accepted from the caller when it
looks sane, otherwise generated, and is echoed on the response.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("api.access")

CORRELATION_HEADER = "X-Correlation-ID"

_MASKED_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})
_CORRELATION_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def correlation_id_for(request: Request) -> str:
    """Return the caller's correlation id, or a fresh one if absent or malformed."""
    supplied = request.headers.get(CORRELATION_HEADER, "")
    if _CORRELATION_RE.match(supplied):
        return supplied
    return uuid.uuid4().hex


def _masked_headers(request: Request) -> dict[str, str]:
    return {
        name: ("***" if name.lower() in _MASKED_HEADERS else value)
        for name, value in request.headers.items()
    }


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Write one access record per request and echo the correlation id.

    The caller id comes from ``request.state.sub``, which the authentication
    middleware sets for requests carrying a valid bearer token.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = correlation_id_for(request)
        request.state.correlation_id = correlation_id
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            context: dict[str, Any] = {
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query or None,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "client": request.client.host if request.client else None,
                "correlation_id": correlation_id,
                "user_id": getattr(request.state, "sub", None) or "anonymous",
                "headers": _masked_headers(request),
            }
            logger.log(_level_for(status_code), "request completed", extra={"request": context})
