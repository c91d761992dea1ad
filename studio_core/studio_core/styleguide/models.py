"""Pydantic models for the styleguide resource and the chat responder.

JSON bodies use camelCase keys; Python code uses snake_case attributes.
Serialise with ``model_dump(mode="json", by_alias=True)``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from studio_core.models.base import CamelModel


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class StyleguideTemplate(CamelModel):
    """A catalog entry the responder can apply.

    ``colors`` must define ``primary`` and ``typography`` must define
    ``headline``; the creation message narrates both.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str | None = None
    preview_image_url: str | None = None
    colors: dict[str, str]
    typography: dict[str, str]
    voice_profile: dict[str, Any] = Field(default_factory=dict)
    visual_elements: dict[str, Any] = Field(default_factory=dict)

    @field_validator("colors")
    @classmethod
    def _require_primary_color(cls, v: dict[str, str]) -> dict[str, str]:
        if "primary" not in v:
            raise ValueError("colors must define 'primary'")
        return v

    @field_validator("typography")
    @classmethod
    def _require_headline_font(cls, v: dict[str, str]) -> dict[str, str]:
        if "headline" not in v:
            raise ValueError("typography must define 'headline'")
        return v


# ---------------------------------------------------------------------------
# Styleguide document
# ---------------------------------------------------------------------------


class StyleguideFields(CamelModel):
    """Writable fields of a styleguide; every field is optional."""

    model_config = ConfigDict(extra="ignore")

    template_id: str | None = None
    title: str | None = None
    subtitle: str | None = None
    personal_mission: str | None = None
    brand_voice: str | None = None
    target_audience: str | None = None
    visual_style: str | None = None
    color_palette: dict[str, Any] | None = None
    typography: dict[str, Any] | None = None
    image_selections: dict[str, Any] | None = None
    brand_personality: dict[str, Any] | None = None
    business_applications: dict[str, Any] | None = None
    is_active: bool = True

    def to_column_values(self) -> dict[str, Any]:
        """Column-keyed mapping for :meth:`StyleguideRepository.create_or_update`."""
        return self.model_dump()


class StyleguideDocument(StyleguideFields):
    """A stored styleguide as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Onboarding snapshot
# ---------------------------------------------------------------------------


class OnboardingSnapshot(BaseModel):
    """The onboarding answers the responder personalises from."""

    model_config = ConfigDict(from_attributes=True)

    brand_story: str | None = None
    brand_vibe: str | None = None
    target_client: str | None = None
    business_type: str | None = None
    style_preferences: str | None = None


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(CamelModel):
    message: str
    current_styleguide: dict[str, Any] | None = None


class StyleguideData(CamelModel):
    """Template fields merged with the caller's mission, voice and audience."""

    template_id: str
    template_name: str
    colors: dict[str, str]
    typography: dict[str, str]
    voice_profile: dict[str, Any]
    visual_elements: dict[str, Any]
    personal_mission: str
    brand_voice: str
    target_audience: str


class StyleguideCreatedResponse(CamelModel):
    type: Literal["styleguide_created"] = "styleguide_created"
    message: str
    styleguide_data: StyleguideData
    template_applied: str


class ConversationResponse(CamelModel):
    type: Literal["conversation"] = "conversation"
    message: str
    suggestions: list[str]


ChatResponse = StyleguideCreatedResponse | ConversationResponse
