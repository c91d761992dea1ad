"""Tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from api.middleware.json_formatter import SERVICE_NAME, JSONFormatter


@pytest.fixture
def formatter() -> JSONFormatter:
    return JSONFormatter()


def _record(msg: str = "styleguide saved", **kwargs) -> logging.LogRecord:
    return logging.LogRecord(
        name=kwargs.pop("name", "api.routers.styleguide"),
        level=kwargs.pop("level", logging.INFO),
        pathname="api/routers/styleguide.py",
        lineno=kwargs.pop("lineno", 42),
        msg=msg,
        args=kwargs.pop("args", ()),
        exc_info=kwargs.pop("exc_info", None),
    )


class TestJSONFormatter:
    def test_basic_fields(self, formatter: JSONFormatter) -> None:
        data = json.loads(formatter.format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "api.routers.styleguide"
        assert data["service"] == SERVICE_NAME
        assert data["msg"] == "styleguide saved"
        assert "ts" in data
        assert "request" not in data
        assert "where" not in data
        assert "error" not in data

    def test_custom_service_name(self) -> None:
        data = json.loads(JSONFormatter(service="studio-worker").format(_record()))

        assert data["service"] == "studio-worker"

    def test_single_line_output(self, formatter: JSONFormatter) -> None:
        output = formatter.format(_record("line one\nline two"))

        assert "\n" not in output

    def test_args_are_interpolated(self, formatter: JSONFormatter) -> None:
        data = json.loads(formatter.format(_record("onboarding step %d for %s", args=(3, "u1"))))

        assert data["msg"] == "onboarding step 3 for u1"

    def test_warnings_carry_location(self, formatter: JSONFormatter) -> None:
        data = json.loads(formatter.format(_record("slow query", level=logging.WARNING, lineno=7)))

        assert data["where"] == "styleguide.py:7"

    def test_request_ids_are_lifted(self, formatter: JSONFormatter) -> None:
        record = _record("request completed", name="api.access")
        record.request = {
            "method": "GET",
            "path": "/api/health",
            "status_code": 200,
            "correlation_id": "corr-1",
            "user_id": "anonymous",
        }

        data = json.loads(formatter.format(record))

        assert data["correlation_id"] == "corr-1"
        assert data["user_id"] == "anonymous"
        assert data["request"]["path"] == "/api/health"

    def test_exception_is_included(self, formatter: JSONFormatter) -> None:
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            record = _record("failed", level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(formatter.format(record))

        assert data["error"]["type"] == "RuntimeError"
        assert "RuntimeError: kaboom" in data["error"]["trace"]

    def test_non_serialisable_values_use_str(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.request = {"client": object()}

        data = json.loads(formatter.format(record))

        assert data["request"]["client"].startswith("<object object")
