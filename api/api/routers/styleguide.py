"""Styleguide endpoints: fetch, save, template catalog, and the chat responder.

Storage failures are logged and answered with a route-specific 500
message; not-found and unauthenticated callers get 404 and 401.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from studio_core.state.repository import OnboardingRepository, StyleguideRepository
from studio_core.styleguide import (
    ChatRequest,
    OnboardingSnapshot,
    StyleguideDocument,
    StyleguideFields,
    StyleguideTemplate,
    build_demo_styleguide,
    generate_styleguide_response,
)

from api.dependencies import CallerDep, SessionDep, SettingsDep, TemplateCatalogDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["styleguide"])


@router.get("/styleguide/{user_id}", response_model=StyleguideDocument)
async def get_styleguide(user_id: str, session: SessionDep, settings: SettingsDep) -> StyleguideDocument:
    """Return the stored styleguide for *user_id*.

    The demo identifier falls back to the demo document when nothing is
    stored for it and the fixture is enabled.
    """
    try:
        row = await StyleguideRepository(session).get_by_user(user_id)
        if row is not None:
            return StyleguideDocument.model_validate(row)
    except Exception:
        logger.exception("Error fetching styleguide for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch styleguide")

    if settings.demo_styleguide_enabled and user_id == settings.demo_user_id:
        return build_demo_styleguide(user_id)

    raise HTTPException(status_code=404, detail="Styleguide not found")


@router.post("/styleguide", response_model=StyleguideDocument)
async def save_styleguide(
    payload: StyleguideFields,
    user_id: CallerDep,
    session: SessionDep,
) -> StyleguideDocument:
    """Create or overwrite the caller's styleguide.

    Fields missing from the body are reset to their defaults.
    """
    try:
        row = await StyleguideRepository(session).create_or_update(user_id, payload.to_column_values())
        document = StyleguideDocument.model_validate(row)
    except Exception:
        logger.exception("Error creating styleguide for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to create styleguide")

    logger.info("Saved styleguide for user %s (template=%s)", user_id, document.template_id)
    return document


@router.get("/styleguide-templates", response_model=list[StyleguideTemplate])
async def list_styleguide_templates(catalog: TemplateCatalogDep) -> list[StyleguideTemplate]:
    try:
        return await catalog.list_templates()
    except Exception:
        logger.exception("Error fetching styleguide templates")
        raise HTTPException(status_code=500, detail="Failed to fetch templates")


@router.post("/styleguide-chat")
async def styleguide_chat(
    payload: ChatRequest,
    user_id: CallerDep,
    session: SessionDep,
    catalog: TemplateCatalogDep,
) -> dict[str, Any]:
    """Answer a styleguide chat message.  Nothing is persisted."""
    try:
        row = await OnboardingRepository(session).get_for_user(user_id)
        onboarding = OnboardingSnapshot.model_validate(row) if row is not None else None
        templates = await catalog.list_templates()
        response = generate_styleguide_response(
            payload.message,
            onboarding,
            payload.current_styleguide,
            templates,
        )
    except Exception:
        logger.exception("Error in styleguide chat for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to process styleguide request")

    return response.model_dump(mode="json", by_alias=True)
