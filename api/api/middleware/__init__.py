"""Middleware components for the Brand Studio API."""

from __future__ import annotations

from api.middleware.auth import AuthenticationMiddleware
from api.middleware.json_formatter import JSONFormatter
from api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    "AuthenticationMiddleware",
    "JSONFormatter",
    "RequestLoggingMiddleware",
]
