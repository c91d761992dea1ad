"""SQLAlchemy 2.0 ORM table definitions for the Brand Studio store.

All tables use the ``Mapped`` / ``mapped_column`` declaration style.  The
``Base`` declarative base is shared by Alembic migrations and the SQLite
adapter.

Status columns are plain strings; see :mod:`studio_core.models.enums` for
the documented values.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    event,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from studio_core.errors import AppendOnlyViolationError
from studio_core.models.enums import (
    GenerationStatus,
    ProcessingStatus,
    ProjectStatus,
    SslStatus,
    TrainingStatus,
)

# Cross-dialect JSON type: JSONB on PostgreSQL, plain JSON on SQLite.
_JsonType = JSONB().with_variant(JSON(), "sqlite")


def _utcnow() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    """Shared declarative base for all Brand Studio tables."""


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserTable(Base):
    """Identity record keyed by the identity provider's subject id."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    stripe_customer_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_subscription_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class UserProfileTable(Base):
    """Extended, user-editable profile information."""

    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    birth_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    instagram_handle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand_vibe: Mapped[str | None] = mapped_column(String(255), nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferences: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (Index("ix_user_profiles_user", "user_id"),)


# ---------------------------------------------------------------------------
# Projects and AI images
# ---------------------------------------------------------------------------


class ProjectTable(Base):
    """A brand or site in progress, owned by exactly one user."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=ProjectStatus.DRAFT.value, nullable=False)
    template_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    custom_domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ai_images_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    content_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payment_setup: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (Index("ix_projects_user", "user_id"),)


class AiImageTable(Base):
    """One candidate output of an image generation request."""

    __tablename__ = "ai_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    project_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("projects.id"), nullable=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    style: Mapped[str | None] = mapped_column(String(64), nullable=True)
    prediction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    generation_status: Mapped[str] = mapped_column(
        String(32), default=GenerationStatus.PENDING.value, nullable=False
    )
    is_selected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_ai_images_user", "user_id"),
        Index("ix_ai_images_project", "project_id"),
    )


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateTable(Base):
    """Catalog entry for a styleguide / site template (not user-owned)."""

    __tablename__ = "templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    preview_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    template_data: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


# ---------------------------------------------------------------------------
# Billing and usage
# ---------------------------------------------------------------------------


class SubscriptionTable(Base):
    """Plan subscription mirrored from the payment provider."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    plan: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    stripe_subscription_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    current_period_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_period_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (Index("ix_subscriptions_user", "user_id"),)


class UserUsageTable(Base):
    """Generation allowance and consumption for one user on one plan."""

    __tablename__ = "user_usage"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    plan: Mapped[str] = mapped_column(String(64), nullable=False)
    total_generations_allowed: Mapped[int] = mapped_column(Integer, nullable=False)
    total_generations_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # NULL for one-time packs without a monthly window.
    monthly_generations_allowed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    monthly_generations_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_cost_incurred: Mapped[Decimal] = mapped_column(
        Numeric(10, 4), default=Decimal("0.0000"), nullable=False
    )
    current_period_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_period_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_limit_reached: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_generation_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (UniqueConstraint("user_id", "plan", name="uq_user_usage_user_plan"),)


class UsageHistoryTable(Base):
    """Append-only ledger of billable actions."""

    __tablename__ = "usage_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    action_type: Mapped[str] = mapped_column(String(64), nullable=False)
    resource_used: Mapped[str] = mapped_column(String(64), nullable=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(6, 4), nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    generated_image_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("generated_images.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (Index("ix_usage_history_user_created", "user_id", "created_at"),)


@event.listens_for(UsageHistoryTable, "before_update")
def _reject_history_update(_mapper: object, _connection: object, target: UsageHistoryTable) -> None:
    raise AppendOnlyViolationError(f"usage_history row {target.id} cannot be modified")


@event.listens_for(UsageHistoryTable, "before_delete")
def _reject_history_delete(_mapper: object, _connection: object, target: UsageHistoryTable) -> None:
    raise AppendOnlyViolationError(f"usage_history row {target.id} cannot be deleted")


# ---------------------------------------------------------------------------
# Onboarding, selfies, and personal models
# ---------------------------------------------------------------------------


class OnboardingDataTable(Base):
    """Answers from the multi-step brand intake flow, one row per user."""

    __tablename__ = "onboarding_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), unique=True, nullable=False)
    selfie_upload_status: Mapped[str] = mapped_column(
        String(32), default=ProcessingStatus.PENDING.value, nullable=False
    )
    brand_vibe: Mapped[str | None] = mapped_column(String(255), nullable=True)
    brand_story: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_client: Mapped[str | None] = mapped_column(Text, nullable=True)
    business_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    style_preferences: Mapped[str | None] = mapped_column(String(255), nullable=True)
    photo_source_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    own_photos_uploaded: Mapped[list[str] | None] = mapped_column(_JsonType, nullable=True)
    branded_photos_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    trigger_word: Mapped[str | None] = mapped_column(String(128), nullable=True)
    onboarding_step: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class SelfieUploadTable(Base):
    """Uploaded selfie used as model training input."""

    __tablename__ = "selfie_uploads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    filename: Mapped[str] = mapped_column(String(512), nullable=False)
    original_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    processed_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    processing_status: Mapped[str] = mapped_column(
        String(32), default=ProcessingStatus.PENDING.value, nullable=False
    )
    ai_model_output: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (Index("ix_selfie_uploads_user", "user_id"),)


class UserModelTable(Base):
    """A user's personal trained generation model (at most one per user)."""

    __tablename__ = "user_models"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    replicate_model_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    trigger_word: Mapped[str] = mapped_column(String(128), nullable=False)
    training_status: Mapped[str] = mapped_column(
        String(32), default=TrainingStatus.PENDING.value, nullable=False
    )
    model_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_user_models_user"),
        UniqueConstraint("trigger_word", name="uq_user_models_trigger_word"),
    )


class GeneratedImageTable(Base):
    """A batch of candidate images produced by a user's model."""

    __tablename__ = "generated_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    model_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("user_models.id"), nullable=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    subcategory: Mapped[str] = mapped_column(String(64), nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    # JSON-encoded list of candidate URLs.
    image_urls: Mapped[str] = mapped_column(Text, nullable=False)
    selected_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    saved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (Index("ix_generated_images_user", "user_id"),)


# ---------------------------------------------------------------------------
# Published content
# ---------------------------------------------------------------------------


class StyleguideTable(Base):
    """Per-user brand presentation document (one per user)."""

    __tablename__ = "styleguides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    template_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subtitle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    personal_mission: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand_voice: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_audience: Mapped[str | None] = mapped_column(Text, nullable=True)
    visual_style: Mapped[str | None] = mapped_column(String(255), nullable=True)
    color_palette: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    typography: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    image_selections: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    brand_personality: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    business_applications: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class BrandbookTable(Base):
    """Complete brand identity page (one per user)."""

    __tablename__ = "brandbooks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    tagline: Mapped[str | None] = mapped_column(String(255), nullable=True)
    story: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_font: Mapped[str] = mapped_column(String(128), default="Times New Roman", nullable=False)
    secondary_font: Mapped[str] = mapped_column(String(128), default="Inter", nullable=False)
    primary_color: Mapped[str] = mapped_column(String(16), default="#0a0a0a", nullable=False)
    secondary_color: Mapped[str] = mapped_column(String(16), default="#ffffff", nullable=False)
    accent_color: Mapped[str] = mapped_column(String(16), default="#f5f5f5", nullable=False)
    logo_type: Mapped[str] = mapped_column(String(32), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    logo_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    moodboard_style: Mapped[str] = mapped_column(String(128), nullable=False)
    voice_tone: Mapped[str | None] = mapped_column(Text, nullable=True)
    voice_personality: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_phrases: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    brandbook_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    template_type: Mapped[str] = mapped_column(String(64), default="minimal-executive", nullable=False)
    custom_domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_live: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class DashboardTable(Base):
    """Personal dashboard configuration (one per user)."""

    __tablename__ = "dashboards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    template_type: Mapped[str] = mapped_column(String(64), nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(_JsonType, nullable=False)
    onboarding_data: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    quick_links: Mapped[list[Any] | None] = mapped_column(_JsonType, nullable=True)
    custom_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    background_color: Mapped[str] = mapped_column(String(16), default="#ffffff", nullable=False)
    accent_color: Mapped[str] = mapped_column(String(16), default="#0a0a0a", nullable=False)
    is_live: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class LandingPageTable(Base):
    """Published landing page (many per user)."""

    __tablename__ = "landing_pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    template: Mapped[str] = mapped_column(String(64), nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(_JsonType, nullable=False)
    onboarding_data: Mapped[dict[str, Any] | None] = mapped_column(_JsonType, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    custom_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    custom_domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_live: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    seo_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    seo_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (Index("ix_landing_pages_user", "user_id"),)


class DomainTable(Base):
    """Custom domain or subdomain routed to one published artifact.

    ``connected_to`` / ``resource_id`` are the storage encoding of
    :data:`studio_core.models.ConnectedResource`; use
    :class:`~studio_core.state.repository.DomainRepository` to read and
    write them.
    """

    __tablename__ = "domains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey("users.id"), nullable=False)
    domain: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dns_records: Mapped[list[dict[str, Any]] | None] = mapped_column(_JsonType, nullable=True)
    ssl_status: Mapped[str] = mapped_column(String(32), default=SslStatus.PENDING.value, nullable=False)
    connected_to: Mapped[str | None] = mapped_column(String(32), nullable=True)
    resource_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("domain", name="uq_domains_domain"),
        UniqueConstraint("subdomain", name="uq_domains_subdomain"),
        Index("ix_domains_user", "user_id"),
    )
