"""Template catalog.

Routes depend on the :class:`TemplateRepository` protocol; the concrete
catalog is chosen at startup from ``API_TEMPLATE_SOURCE``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from studio_core.state.repository import TemplateRecordRepository
from studio_core.styleguide.models import StyleguideTemplate

logger = logging.getLogger(__name__)


MINIMALISTIC_TEMPLATE = StyleguideTemplate(
    id="minimalistic",
    name="Refined Minimal",
    description="Clean editorial layouts with generous white space and a restrained monochrome palette",
    category="minimal",
    colors={
        "primary": "#1a1a1a",
        "secondary": "#666666",
        "accent": "#f8f8f8",
        "text": "#1a1a1a",
        "background": "#fefefe",
        "border": "#f0f0f0",
    },
    typography={
        "headline": "Helvetica Neue",
        "subheading": "Helvetica Neue",
        "body": "Helvetica Neue",
        "accent": "Helvetica Neue",
    },
    voice_profile={
        "tone": "Warm, confident and refined",
        "personality": ["Authentic", "Professional", "Inspiring"],
        "keyPhrases": ["Less but better", "Quiet confidence", "Editorial clarity"],
    },
    visual_elements={
        "layout": "editorial-grid",
        "imageStyle": "natural light, high contrast black and white",
        "spacing": "generous",
        "borders": "hairline",
    },
)

BUILTIN_TEMPLATES: tuple[StyleguideTemplate, ...] = (MINIMALISTIC_TEMPLATE,)


@runtime_checkable
class TemplateRepository(Protocol):
    """Source of the templates offered to users."""

    async def list_templates(self) -> list[StyleguideTemplate]: ...


class BuiltinTemplateCatalog:
    """Templates shipped with the application."""

    def __init__(self, templates: Sequence[StyleguideTemplate] = BUILTIN_TEMPLATES) -> None:
        self._templates = list(templates)

    async def list_templates(self) -> list[StyleguideTemplate]:
        return list(self._templates)


class DatabaseTemplateCatalog:
    """Active rows of the ``templates`` table, optionally after the builtins.

    A row's ``template_data`` holds the template body (``colors``,
    ``typography``, ``voiceProfile``, ``visualElements`` and optionally an
    ``id``); ``name``, ``description``, ``category`` and the preview URL come
    from the row's columns.  Rows that fail validation are skipped with a
    warning, as are rows whose id collides with an earlier template.
    """

    def __init__(self, session: AsyncSession, *, include_builtins: bool = True) -> None:
        self._repo = TemplateRecordRepository(session)
        self._include_builtins = include_builtins

    async def list_templates(self) -> list[StyleguideTemplate]:
        templates: list[StyleguideTemplate] = list(BUILTIN_TEMPLATES) if self._include_builtins else []
        seen = {t.id for t in templates}

        for row in await self._repo.list_active():
            payload = dict(row.template_data or {})
            payload.setdefault("id", str(row.id))
            payload["name"] = row.name
            payload["description"] = row.description or ""
            payload["category"] = row.category
            payload["previewImageUrl"] = row.preview_image_url
            try:
                template = StyleguideTemplate.model_validate(payload)
            except ValidationError as exc:
                logger.warning("Skipping invalid template row id=%d: %s", row.id, exc.errors()[0]["msg"])
                continue
            if template.id in seen:
                logger.warning("Skipping template row id=%d: duplicate template id %r", row.id, template.id)
                continue
            seen.add(template.id)
            templates.append(template)

        return templates
