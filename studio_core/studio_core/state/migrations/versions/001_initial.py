"""Initial schema for the Brand Studio store.

Creates users and profiles, projects, AI images, templates, billing and
usage tables, onboarding, selfies, personal models, generated images,
styleguides, brandbooks, dashboards, landing pages and domains.

Revision ID: 001
Revises: None
Create Date: 2025-06-02 00:00:00.000000+00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    # ------------------------------------------------------------------
    # users / user_profiles
    # ------------------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(320), nullable=True, unique=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(1024), nullable=True),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(255), nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("birth_date", sa.String(32), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("instagram_handle", sa.String(255), nullable=True),
        sa.Column("website_url", sa.String(1024), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("brand_vibe", sa.String(255), nullable=True),
        sa.Column("goals", sa.Text(), nullable=True),
        sa.Column("preferences", postgresql.JSONB(), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_user_profiles_user", "user_profiles", ["user_id"])

    # ------------------------------------------------------------------
    # projects / ai_images / templates
    # ------------------------------------------------------------------
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="draft"),
        sa.Column("template_id", sa.String(128), nullable=True),
        sa.Column("custom_domain", sa.String(255), nullable=True),
        sa.Column("ai_images_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("content_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("payment_setup", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_projects_user", "projects", ["user_id"])

    op.create_table(
        "ai_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=True),
        sa.Column("style", sa.String(64), nullable=True),
        sa.Column("prediction_id", sa.String(255), nullable=True),
        sa.Column("generation_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("is_selected", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index("ix_ai_images_user", "ai_images", ["user_id"])
    op.create_index("ix_ai_images_project", "ai_images", ["project_id"])

    op.create_table(
        "templates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("preview_image_url", sa.String(1024), nullable=True),
        sa.Column("template_data", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )

    # ------------------------------------------------------------------
    # subscriptions / user_usage
    # ------------------------------------------------------------------
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("plan", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("stripe_subscription_id", sa.String(255), nullable=True, unique=True),
        sa.Column("current_period_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_subscriptions_user", "subscriptions", ["user_id"])

    op.create_table(
        "user_usage",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("plan", sa.String(64), nullable=False),
        sa.Column("total_generations_allowed", sa.Integer(), nullable=False),
        sa.Column("total_generations_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("monthly_generations_allowed", sa.Integer(), nullable=True),
        sa.Column("monthly_generations_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_cost_incurred", sa.Numeric(10, 4), nullable=False, server_default="0.0000"),
        sa.Column("current_period_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_limit_reached", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_generation_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("user_id", "plan", name="uq_user_usage_user_plan"),
    )

    # ------------------------------------------------------------------
    # onboarding / selfies / personal models / generated images
    # ------------------------------------------------------------------
    op.create_table(
        "onboarding_data",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("selfie_upload_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("brand_vibe", sa.String(255), nullable=True),
        sa.Column("brand_story", sa.Text(), nullable=True),
        sa.Column("target_client", sa.Text(), nullable=True),
        sa.Column("business_type", sa.String(255), nullable=True),
        sa.Column("style_preferences", sa.String(255), nullable=True),
        sa.Column("photo_source_type", sa.String(32), nullable=True),
        sa.Column("own_photos_uploaded", postgresql.JSONB(), nullable=True),
        sa.Column("branded_photos_details", sa.Text(), nullable=True),
        sa.Column("trigger_word", sa.String(128), nullable=True),
        sa.Column("onboarding_step", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "selfie_uploads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("filename", sa.String(512), nullable=False),
        sa.Column("original_url", sa.String(1024), nullable=False),
        sa.Column("processed_url", sa.String(1024), nullable=True),
        sa.Column("processing_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("ai_model_output", postgresql.JSONB(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_selfie_uploads_user", "selfie_uploads", ["user_id"])

    op.create_table(
        "user_models",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("replicate_model_id", sa.String(255), nullable=True),
        sa.Column("trigger_word", sa.String(128), nullable=False),
        sa.Column("training_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("model_name", sa.String(255), nullable=True),
        _created_at(),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", name="uq_user_models_user"),
        sa.UniqueConstraint("trigger_word", name="uq_user_models_trigger_word"),
    )

    op.create_table(
        "generated_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("model_id", sa.Integer(), sa.ForeignKey("user_models.id"), nullable=True),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("subcategory", sa.String(64), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("image_urls", sa.Text(), nullable=False),
        sa.Column("selected_url", sa.Text(), nullable=True),
        sa.Column("saved", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index("ix_generated_images_user", "generated_images", ["user_id"])

    op.create_table(
        "usage_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("action_type", sa.String(64), nullable=False),
        sa.Column("resource_used", sa.String(64), nullable=False),
        sa.Column("cost", sa.Numeric(6, 4), nullable=False),
        sa.Column("details", postgresql.JSONB(), nullable=True),
        sa.Column("generated_image_id", sa.Integer(), sa.ForeignKey("generated_images.id"), nullable=True),
        _created_at(),
    )
    op.create_index("ix_usage_history_user_created", "usage_history", ["user_id", "created_at"])

    # ------------------------------------------------------------------
    # styleguides / brandbooks / dashboards / landing_pages
    # ------------------------------------------------------------------
    op.create_table(
        "styleguides",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False, unique=True),
        sa.Column("template_id", sa.String(128), nullable=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("subtitle", sa.String(255), nullable=True),
        sa.Column("personal_mission", sa.Text(), nullable=True),
        sa.Column("brand_voice", sa.Text(), nullable=True),
        sa.Column("target_audience", sa.Text(), nullable=True),
        sa.Column("visual_style", sa.String(255), nullable=True),
        sa.Column("color_palette", postgresql.JSONB(), nullable=True),
        sa.Column("typography", postgresql.JSONB(), nullable=True),
        sa.Column("image_selections", postgresql.JSONB(), nullable=True),
        sa.Column("brand_personality", postgresql.JSONB(), nullable=True),
        sa.Column("business_applications", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "brandbooks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False, unique=True),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("tagline", sa.String(255), nullable=True),
        sa.Column("story", sa.Text(), nullable=True),
        sa.Column("primary_font", sa.String(128), nullable=False, server_default="Times New Roman"),
        sa.Column("secondary_font", sa.String(128), nullable=False, server_default="Inter"),
        sa.Column("primary_color", sa.String(16), nullable=False, server_default="#0a0a0a"),
        sa.Column("secondary_color", sa.String(16), nullable=False, server_default="#ffffff"),
        sa.Column("accent_color", sa.String(16), nullable=False, server_default="#f5f5f5"),
        sa.Column("logo_type", sa.String(32), nullable=False),
        sa.Column("logo_url", sa.String(1024), nullable=True),
        sa.Column("logo_prompt", sa.Text(), nullable=True),
        sa.Column("moodboard_style", sa.String(128), nullable=False),
        sa.Column("voice_tone", sa.Text(), nullable=True),
        sa.Column("voice_personality", sa.Text(), nullable=True),
        sa.Column("key_phrases", sa.Text(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("brandbook_url", sa.String(1024), nullable=True),
        sa.Column("template_type", sa.String(64), nullable=False, server_default="minimal-executive"),
        sa.Column("custom_domain", sa.String(255), nullable=True),
        sa.Column("is_live", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "dashboards",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False, unique=True),
        sa.Column("template_type", sa.String(64), nullable=False),
        sa.Column("config", postgresql.JSONB(), nullable=False),
        sa.Column("onboarding_data", postgresql.JSONB(), nullable=True),
        sa.Column("quick_links", postgresql.JSONB(), nullable=True),
        sa.Column("custom_url", sa.String(1024), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("background_color", sa.String(16), nullable=False, server_default="#ffffff"),
        sa.Column("accent_color", sa.String(16), nullable=False, server_default="#0a0a0a"),
        sa.Column("is_live", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "landing_pages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("template", sa.String(64), nullable=False),
        sa.Column("config", postgresql.JSONB(), nullable=False),
        sa.Column("onboarding_data", postgresql.JSONB(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("custom_url", sa.String(1024), nullable=True),
        sa.Column("custom_domain", sa.String(255), nullable=True),
        sa.Column("is_live", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("seo_title", sa.String(255), nullable=True),
        sa.Column("seo_description", sa.Text(), nullable=True),
        sa.Column("url", sa.String(1024), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_landing_pages_user", "landing_pages", ["user_id"])

    # ------------------------------------------------------------------
    # domains
    # ------------------------------------------------------------------
    op.create_table(
        "domains",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("subdomain", sa.String(255), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("dns_records", postgresql.JSONB(), nullable=True),
        sa.Column("ssl_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("connected_to", sa.String(32), nullable=True),
        sa.Column("resource_id", sa.Integer(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("domain", name="uq_domains_domain"),
        sa.UniqueConstraint("subdomain", name="uq_domains_subdomain"),
    )
    op.create_index("ix_domains_user", "domains", ["user_id"])


def downgrade() -> None:
    op.drop_table("domains")
    op.drop_table("landing_pages")
    op.drop_table("dashboards")
    op.drop_table("brandbooks")
    op.drop_table("styleguides")
    op.drop_table("usage_history")
    op.drop_table("generated_images")
    op.drop_table("user_models")
    op.drop_table("selfie_uploads")
    op.drop_table("onboarding_data")
    op.drop_table("user_usage")
    op.drop_table("subscriptions")
    op.drop_table("templates")
    op.drop_table("ai_images")
    op.drop_table("projects")
    op.drop_table("user_profiles")
    op.drop_table("users")
