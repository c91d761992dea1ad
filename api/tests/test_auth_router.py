"""Tests for api/api/routers/auth.py (GET /auth/user)."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def _user_row(**overrides) -> SimpleNamespace:
    values = {
        "id": "test-user",
        "email": "test@example.com",
        "first_name": "Test",
        "last_name": "User",
        "profile_image_url": None,
        "created_at": _NOW,
        "updated_at": _NOW,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestGetCurrentUser:
    @pytest.mark.asyncio
    @patch("api.routers.auth.UserRepository")
    async def test_upserts_from_token_claims(self, MockRepo, client):
        mock_repo = MockRepo.return_value
        mock_repo.upsert = AsyncMock(return_value=_user_row())

        resp = await client.get("/api/auth/user")

        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == "test-user"
        assert body["email"] == "test@example.com"
        assert body["firstName"] == "Test"
        assert body["lastName"] == "User"
        mock_repo.upsert.assert_awaited_once_with(
            "test-user",
            email="test@example.com",
            first_name="Test",
            last_name="User",
            profile_image_url=None,
        )

    @pytest.mark.asyncio
    async def test_requires_authentication(self, anon_client):
        resp = await anon_client.get("/api/auth/user")

        assert resp.status_code == 401
        assert resp.json() == {"message": "User not authenticated"}

    @pytest.mark.asyncio
    @patch("api.routers.auth.UserRepository")
    async def test_storage_failure_is_500(self, MockRepo, client):
        MockRepo.return_value.upsert = AsyncMock(side_effect=RuntimeError("db down"))

        resp = await client.get("/api/auth/user")

        assert resp.status_code == 500
        assert resp.json() == {"message": "Failed to fetch user"}
