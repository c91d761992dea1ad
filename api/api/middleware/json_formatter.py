"""Single-line JSON log output.

Each record becomes one JSON object.  Access records written by
:class:`~api.middleware.logging.RequestLoggingMiddleware` carry their
request context under ``request``; the correlation and caller ids are
also lifted to the top level so a whole request can be followed with one
filter::

    {"ts": "...", "level": "WARNING", "logger": "api.access",
     "service": "brand-studio-api", "msg": "request completed",
     "correlation_id": "...", "user_id": "...",
     "request": {...}, "where": "logging.py:71"}
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

SERVICE_NAME = "brand-studio-api"

_LIFTED_REQUEST_FIELDS = ("correlation_id", "user_id")


class JSONFormatter(logging.Formatter):
    """Render log records as compact JSON lines."""

    def __init__(self, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self._service,
            "msg": record.getMessage(),
        }

        request_ctx = getattr(record, "request", None)
        if isinstance(request_ctx, dict):
            for key in _LIFTED_REQUEST_FIELDS:
                if request_ctx.get(key) is not None:
                    entry[key] = request_ctx[key]
            entry["request"] = request_ctx

        if record.levelno >= logging.WARNING:
            entry["where"] = f"{record.filename}:{record.lineno}"

        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = {
                "type": record.exc_info[0].__name__,
                "trace": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str, ensure_ascii=False, separators=(",", ":"))
