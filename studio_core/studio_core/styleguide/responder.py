"""Keyword-driven styleguide chat responder.

A pure function of the message, the caller's onboarding answers, the
current styleguide draft and the available templates.  It performs no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from studio_core.errors import NoTemplatesAvailableError
from studio_core.styleguide.models import (
    ChatResponse,
    ConversationResponse,
    OnboardingSnapshot,
    StyleguideCreatedResponse,
    StyleguideData,
    StyleguideTemplate,
)

CREATION_KEYWORDS: tuple[str, ...] = ("create", "new", "generate")

MISSION_PLACEHOLDER = "Your unique mission and vision"
VOICE_PLACEHOLDER = "Professional and authentic"
AUDIENCE_PLACEHOLDER = "Your ideal clients"

CONVERSATION_MESSAGE = (
    "I'd love to help you create your personalized styleguide! I can create a beautiful "
    "brand bible using your AI images, personal story, and preferences. Just say "
    '"create my styleguide" and I\'ll get started!'
)

CONVERSATION_SUGGESTIONS: tuple[str, ...] = (
    "Create my styleguide",
    "Show me templates",
    "What information do you need?",
)


def is_creation_request(message: str) -> bool:
    """Case-insensitive substring match against :data:`CREATION_KEYWORDS`.

    Substrings count, so ``"created"`` and ``"renewal"`` both match.
    """
    lowered = message.lower()
    return any(keyword in lowered for keyword in CREATION_KEYWORDS)


def _creation_message(template: StyleguideTemplate) -> str:
    return (
        f'I\'ve created a beautiful "{template.name}" styleguide for you! '
        f"This template features {template.description.lower()}. "
        f"It uses {template.typography['headline']} typography and a sophisticated color palette "
        f"with {template.colors['primary']} as the primary color. Perfect for your brand personality!"
    )


def generate_styleguide_response(
    message: str,
    onboarding: OnboardingSnapshot | None,
    current_styleguide: Mapping[str, Any] | None,
    templates: Sequence[StyleguideTemplate],
) -> ChatResponse:
    """Build the chat reply for *message*.

    A creation request applies the first template.  Mission, voice and
    audience come from the onboarding ``brand_story``, ``brand_vibe`` and
    ``target_client`` answers, falling back to fixed placeholders when the
    answer is missing or empty.  *current_styleguide* is accepted for
    interface stability and does not influence the reply.

    Raises
    ------
    NoTemplatesAvailableError
        A creation request arrived while *templates* is empty.
    """
    if not is_creation_request(message):
        return ConversationResponse(
            message=CONVERSATION_MESSAGE,
            suggestions=list(CONVERSATION_SUGGESTIONS),
        )

    if not templates:
        raise NoTemplatesAvailableError("No styleguide templates are available")

    template = templates[0]
    snapshot = onboarding or OnboardingSnapshot()

    data = StyleguideData(
        template_id=template.id,
        template_name=template.name,
        colors=dict(template.colors),
        typography=dict(template.typography),
        voice_profile=dict(template.voice_profile),
        visual_elements=dict(template.visual_elements),
        personal_mission=snapshot.brand_story or MISSION_PLACEHOLDER,
        brand_voice=snapshot.brand_vibe or VOICE_PLACEHOLDER,
        target_audience=snapshot.target_client or AUDIENCE_PLACEHOLDER,
    )
    return StyleguideCreatedResponse(
        message=_creation_message(template),
        styleguide_data=data,
        template_applied=template.id,
    )
