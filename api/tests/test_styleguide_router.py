"""Tests for api/api/routers/styleguide.py

Covers:
- GET /styleguide/{userId} (public): stored document, demo fallback, 404, 500
- POST /styleguide (authenticated): overwrite semantics, 401, 500
- GET /styleguide-templates (public)
- POST /styleguide-chat (authenticated): creation and conversation replies
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from studio_core.styleguide import MINIMALISTIC_TEMPLATE

from api.dependencies import get_template_repository

# ---------------------------------------------------------------------------
# GET /styleguide/{user_id}
# ---------------------------------------------------------------------------


class TestGetStyleguide:
    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_returns_stored_document(self, MockRepo, anon_client, styleguide_row):
        MockRepo.return_value.get_by_user = AsyncMock(return_value=styleguide_row)

        resp = await anon_client.get("/api/styleguide/test-user")

        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == 7
        assert body["userId"] == "test-user"
        assert body["templateId"] == "minimalistic"
        assert body["personalMission"] == "Help people shine"
        assert body["colorPalette"] == {"primary": "#1a1a1a"}
        assert body["isActive"] is True
        assert "createdAt" in body and "updatedAt" in body

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_missing_styleguide_is_404(self, MockRepo, anon_client):
        MockRepo.return_value.get_by_user = AsyncMock(return_value=None)

        resp = await anon_client.get("/api/styleguide/nobody")

        assert resp.status_code == 404
        assert resp.json() == {"message": "Styleguide not found"}

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_demo_user_falls_back_to_fixture(self, MockRepo, anon_client):
        MockRepo.return_value.get_by_user = AsyncMock(return_value=None)

        resp = await anon_client.get("/api/styleguide/demo123")

        assert resp.status_code == 200
        body = resp.json()
        assert body["userId"] == "demo123"
        assert body["title"] == "Sarah Johnson"
        assert body["subtitle"] == "Strategic Brand Consultant"
        assert body["colorPalette"]["primary"] == "#1a1a1a"
        assert body["brandPersonality"]["vibe"] == "Refined Minimal Professional"

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_demo_user_prefers_stored_document(self, MockRepo, anon_client, styleguide_row):
        styleguide_row.user_id = "demo123"
        styleguide_row.title = "Stored title"
        MockRepo.return_value.get_by_user = AsyncMock(return_value=styleguide_row)

        resp = await anon_client.get("/api/styleguide/demo123")

        assert resp.status_code == 200
        assert resp.json()["title"] == "Stored title"

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_demo_fixture_can_be_disabled(self, MockRepo, anon_client, test_settings):
        test_settings.demo_styleguide_enabled = False
        MockRepo.return_value.get_by_user = AsyncMock(return_value=None)

        resp = await anon_client.get("/api/styleguide/demo123")

        assert resp.status_code == 404

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_storage_failure_is_500(self, MockRepo, anon_client):
        MockRepo.return_value.get_by_user = AsyncMock(side_effect=RuntimeError("connection lost"))

        resp = await anon_client.get("/api/styleguide/test-user")

        assert resp.status_code == 500
        assert resp.json() == {"message": "Failed to fetch styleguide"}


# ---------------------------------------------------------------------------
# POST /styleguide
# ---------------------------------------------------------------------------


class TestSaveStyleguide:
    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_requires_authentication(self, MockRepo, anon_client, mock_session):
        resp = await anon_client.post("/api/styleguide", json={"title": "x"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "User not authenticated"}
        MockRepo.assert_not_called()
        mock_session.execute.assert_not_awaited()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_saves_for_caller(self, MockRepo, client, styleguide_row):
        mock_repo = MockRepo.return_value
        mock_repo.create_or_update = AsyncMock(return_value=styleguide_row)

        resp = await client.post(
            "/api/styleguide",
            json={"templateId": "minimalistic", "title": "My Brand", "personalMission": "Help people shine"},
        )

        assert resp.status_code == 200
        assert resp.json()["title"] == "My Brand"
        user_id, values = mock_repo.create_or_update.await_args.args
        assert user_id == "test-user"
        assert values["template_id"] == "minimalistic"
        assert values["personal_mission"] == "Help people shine"

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_omitted_fields_are_reset(self, MockRepo, client, styleguide_row):
        mock_repo = MockRepo.return_value
        mock_repo.create_or_update = AsyncMock(return_value=styleguide_row)

        await client.post("/api/styleguide", json={"title": "Only a title"})

        _, values = mock_repo.create_or_update.await_args.args
        assert values["title"] == "Only a title"
        assert values["brand_voice"] is None
        assert values["color_palette"] is None
        assert values["is_active"] is True

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_body_user_id_is_ignored(self, MockRepo, client, styleguide_row):
        mock_repo = MockRepo.return_value
        mock_repo.create_or_update = AsyncMock(return_value=styleguide_row)

        await client.post("/api/styleguide", json={"userId": "someone-else", "title": "x"})

        user_id, values = mock_repo.create_or_update.await_args.args
        assert user_id == "test-user"
        assert "user_id" not in values

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.StyleguideRepository")
    async def test_storage_failure_is_500(self, MockRepo, client):
        MockRepo.return_value.create_or_update = AsyncMock(side_effect=RuntimeError("disk full"))

        resp = await client.post("/api/styleguide", json={"title": "x"})

        assert resp.status_code == 500
        assert resp.json() == {"message": "Failed to create styleguide"}


# ---------------------------------------------------------------------------
# GET /styleguide-templates
# ---------------------------------------------------------------------------


class TestListTemplates:
    @pytest.mark.asyncio
    async def test_lists_builtin_templates_without_auth(self, anon_client):
        resp = await anon_client.get("/api/styleguide-templates")

        assert resp.status_code == 200
        body = resp.json()
        assert [t["id"] for t in body] == ["minimalistic"]
        assert body[0]["name"] == "Refined Minimal"
        assert body[0]["colors"]["primary"] == "#1a1a1a"
        assert "voiceProfile" in body[0]

    @pytest.mark.asyncio
    async def test_catalog_failure_is_500(self, app, anon_client):
        broken = AsyncMock()
        broken.list_templates = AsyncMock(side_effect=RuntimeError("boom"))
        app.dependency_overrides[get_template_repository] = lambda: broken

        resp = await anon_client.get("/api/styleguide-templates")

        assert resp.status_code == 500
        assert resp.json() == {"message": "Failed to fetch templates"}


# ---------------------------------------------------------------------------
# POST /styleguide-chat
# ---------------------------------------------------------------------------


class TestStyleguideChat:
    @pytest.mark.asyncio
    @patch("api.routers.styleguide.OnboardingRepository")
    async def test_requires_authentication(self, MockRepo, anon_client, mock_session):
        resp = await anon_client.post("/api/styleguide-chat", json={"message": "create"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "User not authenticated"}
        MockRepo.assert_not_called()
        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.OnboardingRepository")
    async def test_creation_uses_onboarding_answers(self, MockRepo, client, onboarding_row):
        MockRepo.return_value.get_for_user = AsyncMock(return_value=onboarding_row)

        resp = await client.post("/api/styleguide-chat", json={"message": "Please CREATE my styleguide"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "styleguide_created"
        assert body["templateApplied"] == MINIMALISTIC_TEMPLATE.id
        data = body["styleguideData"]
        assert data["templateId"] == "minimalistic"
        assert data["templateName"] == "Refined Minimal"
        assert data["personalMission"] == "Started in a garage"
        assert data["brandVoice"] == "Bold"
        assert data["targetAudience"] == "Creative founders"
        assert body["message"].startswith('I\'ve created a beautiful "Refined Minimal" styleguide for you!')

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.OnboardingRepository")
    async def test_creation_without_onboarding_uses_placeholders(self, MockRepo, client):
        MockRepo.return_value.get_for_user = AsyncMock(return_value=None)

        resp = await client.post("/api/styleguide-chat", json={"message": "generate one"})

        data = resp.json()["styleguideData"]
        assert data["personalMission"] == "Your unique mission and vision"
        assert data["brandVoice"] == "Professional and authentic"
        assert data["targetAudience"] == "Your ideal clients"

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.OnboardingRepository")
    async def test_other_messages_get_conversation_reply(self, MockRepo, client):
        MockRepo.return_value.get_for_user = AsyncMock(return_value=None)

        resp = await client.post(
            "/api/styleguide-chat",
            json={"message": "hello there", "currentStyleguide": {"title": "draft"}},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "conversation"
        assert body["suggestions"] == [
            "Create my styleguide",
            "Show me templates",
            "What information do you need?",
        ]

    @pytest.mark.asyncio
    @patch("api.routers.styleguide.OnboardingRepository")
    async def test_empty_catalog_is_500(self, MockRepo, app, client):
        MockRepo.return_value.get_for_user = AsyncMock(return_value=None)
        empty = AsyncMock()
        empty.list_templates = AsyncMock(return_value=[])
        app.dependency_overrides[get_template_repository] = lambda: empty

        resp = await client.post("/api/styleguide-chat", json={"message": "create"})

        assert resp.status_code == 500
        assert resp.json() == {"message": "Failed to process styleguide request"}

    @pytest.mark.asyncio
    async def test_missing_message_is_400(self, client):
        resp = await client.post("/api/styleguide-chat", json={})

        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid request"}
