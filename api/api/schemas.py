"""Shared Pydantic request/response models for API endpoints.

Bodies use camelCase keys on the wire.  Routers import from here to avoid
duplication; the styleguide models live in :mod:`studio_core.styleguide`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, Field, model_validator
from studio_core.models import CamelModel, ConnectedResource
from studio_core.models.connected_resource import from_storage

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------


class OnboardingResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    selfie_upload_status: str
    brand_vibe: str | None = None
    brand_story: str | None = None
    target_client: str | None = None
    business_type: str | None = None
    style_preferences: str | None = None
    photo_source_type: str | None = None
    own_photos_uploaded: list[str] | None = None
    branded_photos_details: str | None = None
    trigger_word: str | None = None
    onboarding_step: int
    completed_at: datetime | None = None


class OnboardingUpdateRequest(CamelModel):
    """Answers for one step of the intake flow.

    Omitted fields keep their stored value.  ``onboardingStep`` is a floor;
    the stored step never decreases.
    """

    selfie_upload_status: str | None = None
    brand_vibe: str | None = None
    brand_story: str | None = None
    target_client: str | None = None
    business_type: str | None = None
    style_preferences: str | None = None
    photo_source_type: str | None = None
    own_photos_uploaded: list[str] | None = None
    branded_photos_details: str | None = None
    trigger_word: str | None = None
    onboarding_step: int | None = Field(default=None, ge=1)
    completed: bool = False

    def answers(self) -> dict[str, Any]:
        return self.model_dump(exclude={"onboarding_step", "completed"}, exclude_none=True)


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------


class UsageResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    plan: str
    total_generations_allowed: int
    total_generations_used: int
    monthly_generations_allowed: int | None = None
    monthly_generations_used: int
    total_cost_incurred: Decimal
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    is_limit_reached: bool
    last_generation_at: datetime | None = None


class UsageHistoryItemResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action_type: str
    resource_used: str
    cost: Decimal
    details: dict[str, Any] | None = None
    generated_image_id: int | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------


class CreateDomainRequest(CamelModel):
    domain: str = Field(..., min_length=3, max_length=255)
    subdomain: str | None = Field(default=None, max_length=255)
    dns_records: list[dict[str, Any]] | None = None


class DomainResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    domain: str
    subdomain: str | None = None
    is_verified: bool
    dns_records: list[dict[str, Any]] | None = None
    ssl_status: str
    connection: ConnectedResource | None = None
    created_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _decode_connection(cls, data: Any) -> Any:
        # ORM rows carry the (connected_to, resource_id) storage pair.
        if hasattr(data, "connected_to"):
            return {
                "id": data.id,
                "domain": data.domain,
                "subdomain": data.subdomain,
                "is_verified": data.is_verified,
                "dns_records": data.dns_records,
                "ssl_status": data.ssl_status,
                "connection": from_storage(data.connected_to, data.resource_id),
                "created_at": data.created_at,
            }
        return data
