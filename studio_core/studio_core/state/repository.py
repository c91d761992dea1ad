"""Repository classes providing CRUD access to the Brand Studio store.

Each repository takes an ``AsyncSession`` at construction time and operates
within the caller's transaction boundary.  All writes call ``session.flush()``
so that generated defaults are populated; the caller is responsible for calling
``session.commit()`` (or relying on the ``get_session`` context manager).

Every user-owned lookup filters on ``user_id`` so a row belonging to another
user is indistinguishable from a missing one.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studio_core.errors import (
    DuplicateResourceError,
    InvalidSelectionError,
    ResourceNotFoundError,
)
from studio_core.models.connected_resource import (
    ConnectedResource,
    ResourceKind,
    from_storage,
    to_storage,
)
from studio_core.models.enums import (
    GenerationStatus,
    ProjectStatus,
    TrainingStatus,
)
from studio_core.state.tables import (
    AiImageTable,
    BrandbookTable,
    DashboardTable,
    DomainTable,
    GeneratedImageTable,
    LandingPageTable,
    OnboardingDataTable,
    ProjectTable,
    SelfieUploadTable,
    StyleguideTable,
    SubscriptionTable,
    TemplateTable,
    UsageHistoryTable,
    UserModelTable,
    UserProfileTable,
    UserTable,
    UserUsageTable,
)

logger = logging.getLogger(__name__)


async def _dialect_upsert(
    session: AsyncSession,
    table: Any,
    values: dict[str, Any],
    index_elements: list[str],
    update_columns: list[str],
) -> Any:
    """Dialect-aware upsert: PostgreSQL ``ON CONFLICT DO UPDATE`` or SQLite equivalent.

    Parameters
    ----------
    session:
        The active async session.
    table:
        The SQLAlchemy table class to upsert into.
    values:
        Column-value mapping for the row to insert.
    index_elements:
        Column names forming the unique constraint for conflict detection.
    update_columns:
        Column names to update when a conflict occurs.
    """
    bind = session.get_bind()
    dialect_name = getattr(getattr(bind, "dialect", None), "name", "")

    stmt: Any
    if "postgresql" in str(dialect_name):
        from sqlalchemy.dialects.postgresql import insert as _pg_insert

        stmt = _pg_insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=index_elements,
            set_={col: getattr(stmt.excluded, col) for col in update_columns},
        )
    else:
        from sqlalchemy.dialects.sqlite import insert as _sqlite_insert

        stmt = _sqlite_insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=index_elements,
            set_={col: values[col] for col in update_columns},
        )
    return await session.execute(stmt)


async def _dialect_insert_ignore(session: AsyncSession, table: Any, values: dict[str, Any]) -> Any:
    """Insert *values* unless the row would violate a unique constraint."""
    bind = session.get_bind()
    dialect_name = getattr(getattr(bind, "dialect", None), "name", "")

    stmt: Any
    if "postgresql" in str(dialect_name):
        from sqlalchemy.dialects.postgresql import insert as _pg_insert

        stmt = _pg_insert(table).values(**values).on_conflict_do_nothing()
    else:
        from sqlalchemy.dialects.sqlite import insert as _sqlite_insert

        stmt = _sqlite_insert(table).values(**values).on_conflict_do_nothing()
    return await session.execute(stmt)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserRepository:
    """CRUD operations for the ``users`` table.

    Users are created on first authentication and never hard-deleted.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> UserTable | None:
        stmt = select(UserTable).where(UserTable.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def ensure_exists(
        self,
        user_id: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        profile_image_url: str | None = None,
    ) -> None:
        """Create the bare ``users`` row on a caller's first authenticated request.

        An existing row is left untouched.  Email is filled in later by
        :meth:`upsert` so a shared address cannot block the insert.
        """
        now = _utcnow()
        await _dialect_insert_ignore(
            self._session,
            UserTable,
            {
                "id": user_id,
                "first_name": first_name,
                "last_name": last_name,
                "profile_image_url": profile_image_url,
                "created_at": now,
                "updated_at": now,
            },
        )

    async def upsert(
        self,
        user_id: str,
        *,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        profile_image_url: str | None = None,
    ) -> UserTable:
        """Insert the user or refresh its identity-provider fields.

        Payment identifiers are not touched here; see
        :meth:`update_payment_ids`.
        """
        now = _utcnow()
        values: dict[str, Any] = {
            "id": user_id,
            "email": email.lower().strip() if email else None,
            "first_name": first_name,
            "last_name": last_name,
            "profile_image_url": profile_image_url,
            "created_at": now,
            "updated_at": now,
        }
        await _dialect_upsert(
            self._session,
            UserTable,
            values,
            index_elements=["id"],
            update_columns=["email", "first_name", "last_name", "profile_image_url", "updated_at"],
        )
        stmt = select(UserTable).where(UserTable.id == user_id).execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def update_payment_ids(
        self,
        user_id: str,
        *,
        customer_id: str | None,
        subscription_id: str | None,
    ) -> UserTable:
        row = await self.get_by_id(user_id)
        if row is None:
            raise ResourceNotFoundError("User", user_id)
        row.stripe_customer_id = customer_id
        row.stripe_subscription_id = subscription_id
        await self._session.flush()
        return row


class UserProfileRepository:
    """Extended profile records in ``user_profiles``."""

    _FIELDS = (
        "full_name",
        "phone",
        "birth_date",
        "location",
        "instagram_handle",
        "website_url",
        "bio",
        "brand_vibe",
        "goals",
        "preferences",
        "avatar_url",
    )

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, user_id: str) -> UserProfileTable | None:
        stmt = select(UserProfileTable).where(UserProfileTable.user_id == user_id).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, user_id: str, fields: Mapping[str, Any]) -> UserProfileTable:
        """Create the profile or merge *fields* into the existing one."""
        row = await self.get_for_user(user_id)
        if row is None:
            row = UserProfileTable(id=uuid.uuid4().hex, user_id=user_id)
            self._session.add(row)
        for name in self._FIELDS:
            if name in fields:
                setattr(row, name, fields[name])
        await self._session.flush()
        return row


# ---------------------------------------------------------------------------
# Styleguides
# ---------------------------------------------------------------------------

# Every document field except identity and timestamps.  A write sets all of
# them, so omitted fields reset to their defaults.
STYLEGUIDE_FIELDS: tuple[str, ...] = (
    "template_id",
    "title",
    "subtitle",
    "personal_mission",
    "brand_voice",
    "target_audience",
    "visual_style",
    "color_palette",
    "typography",
    "image_selections",
    "brand_personality",
    "business_applications",
)


class StyleguideRepository:
    """One styleguide per user, written with last-writer-wins semantics."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user(self, user_id: str) -> StyleguideTable | None:
        stmt = select(StyleguideTable).where(StyleguideTable.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_or_update(self, user_id: str, data: Mapping[str, Any]) -> StyleguideTable:
        """Replace the caller's styleguide with *data* and return the stored row.

        *data* is keyed by column name.  The write is a single
        ``INSERT ... ON CONFLICT (user_id) DO UPDATE`` so two concurrent
        writers never produce two rows; whichever commits last wins.
        ``created_at`` is preserved across overwrites.
        """
        now = _utcnow()
        values: dict[str, Any] = {name: data.get(name) for name in STYLEGUIDE_FIELDS}
        values["is_active"] = data.get("is_active", True)
        values["user_id"] = user_id
        values["created_at"] = now
        values["updated_at"] = now

        await _dialect_upsert(
            self._session,
            StyleguideTable,
            values,
            index_elements=["user_id"],
            update_columns=[*STYLEGUIDE_FIELDS, "is_active", "updated_at"],
        )
        stmt = (
            select(StyleguideTable)
            .where(StyleguideTable.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one()
        logger.debug("Stored styleguide id=%d for user %s", row.id, user_id)
        return row


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------

ONBOARDING_FIELDS: tuple[str, ...] = (
    "selfie_upload_status",
    "brand_vibe",
    "brand_story",
    "target_client",
    "business_type",
    "style_preferences",
    "photo_source_type",
    "own_photos_uploaded",
    "branded_photos_details",
    "trigger_word",
)


class OnboardingRepository:
    """The single onboarding record of each user."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, user_id: str) -> OnboardingDataTable | None:
        stmt = select(OnboardingDataTable).where(OnboardingDataTable.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def save_step(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        *,
        step: int | None = None,
        completed: bool = False,
    ) -> OnboardingDataTable:
        """Merge answers into the user's onboarding record.

        Only keys present in *fields* with a non-``None`` value are written.
        ``onboarding_step`` never decreases: an explicit *step* lower than
        the stored one is ignored, and no *step* advances by one.
        ``completed_at`` is set the first time *completed* is true and never
        changed afterwards.
        """
        row = await self.get_for_user(user_id)
        if row is None:
            row = OnboardingDataTable(user_id=user_id, onboarding_step=max(step or 1, 1))
            self._session.add(row)
        elif step is None:
            row.onboarding_step = row.onboarding_step + 1
        else:
            row.onboarding_step = max(row.onboarding_step, step)

        for name in ONBOARDING_FIELDS:
            value = fields.get(name)
            if value is not None:
                setattr(row, name, value)

        if completed and row.completed_at is None:
            row.completed_at = _utcnow()

        await self._session.flush()
        return row


# ---------------------------------------------------------------------------
# Projects and AI images
# ---------------------------------------------------------------------------


class ProjectRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: str,
        name: str,
        *,
        description: str | None = None,
        template_id: str | None = None,
    ) -> ProjectTable:
        row = ProjectTable(
            user_id=user_id,
            name=name,
            description=description,
            template_id=template_id,
            status=ProjectStatus.DRAFT.value,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def get(self, user_id: str, project_id: int) -> ProjectTable | None:
        stmt = select(ProjectTable).where(
            ProjectTable.id == project_id,
            ProjectTable.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> Sequence[ProjectTable]:
        stmt = (
            select(ProjectTable)
            .where(ProjectTable.user_id == user_id)
            .order_by(ProjectTable.created_at.desc(), ProjectTable.id.desc())
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def update_status(self, user_id: str, project_id: int, status: str) -> ProjectTable:
        row = await self.get(user_id, project_id)
        if row is None:
            raise ResourceNotFoundError("Project", project_id)
        row.status = status
        await self._session.flush()
        return row


class AiImageRepository:
    """Candidate images from external generation requests."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: str,
        image_url: str,
        *,
        project_id: int | None = None,
        prompt: str | None = None,
        style: str | None = None,
        prediction_id: str | None = None,
        generation_status: str = GenerationStatus.PENDING.value,
    ) -> AiImageTable:
        row = AiImageTable(
            user_id=user_id,
            image_url=image_url,
            project_id=project_id,
            prompt=prompt,
            style=style,
            prediction_id=prediction_id,
            generation_status=generation_status,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def list_for_user(self, user_id: str, *, project_id: int | None = None) -> Sequence[AiImageTable]:
        stmt = select(AiImageTable).where(AiImageTable.user_id == user_id)
        if project_id is not None:
            stmt = stmt.where(AiImageTable.project_id == project_id)
        stmt = stmt.order_by(AiImageTable.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def update_generation_status(self, prediction_id: str, status: str) -> int:
        """Set the status of every image of one prediction; returns rows changed."""
        stmt = (
            update(AiImageTable)
            .where(AiImageTable.prediction_id == prediction_id)
            .values(generation_status=status)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

    async def select(self, user_id: str, image_id: int) -> AiImageTable:
        """Mark one image as the chosen candidate.

        Clears ``is_selected`` on the user's other images of the same
        project (or on the user's project-less images when it has none).
        """
        stmt = select(AiImageTable).where(
            AiImageTable.id == image_id,
            AiImageTable.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            raise ResourceNotFoundError("AI image", image_id)

        clear = update(AiImageTable).where(
            AiImageTable.user_id == user_id,
            AiImageTable.id != image_id,
        )
        if row.project_id is None:
            clear = clear.where(AiImageTable.project_id.is_(None))
        else:
            clear = clear.where(AiImageTable.project_id == row.project_id)
        await self._session.execute(clear.values(is_selected=False).execution_options(synchronize_session="fetch"))

        row.is_selected = True
        await self._session.flush()
        return row


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateRecordRepository:
    """Rows of the ``templates`` catalog table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        name: str,
        *,
        description: str | None = None,
        category: str | None = None,
        preview_image_url: str | None = None,
        template_data: dict[str, Any] | None = None,
        is_active: bool = True,
    ) -> TemplateTable:
        row = TemplateTable(
            name=name,
            description=description,
            category=category,
            preview_image_url=preview_image_url,
            template_data=template_data,
            is_active=is_active,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def list_active(self) -> Sequence[TemplateTable]:
        stmt = select(TemplateTable).where(TemplateTable.is_active.is_(True)).order_by(TemplateTable.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()


# ---------------------------------------------------------------------------
# Subscriptions and usage
# ---------------------------------------------------------------------------


class SubscriptionRepository:
    """Subscriptions mirrored from payment-provider events."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert_from_provider(
        self,
        user_id: str,
        *,
        plan: str,
        status: str,
        stripe_subscription_id: str,
        current_period_start: datetime | None = None,
        current_period_end: datetime | None = None,
    ) -> SubscriptionTable:
        """Insert or refresh the subscription identified by the provider id."""
        now = _utcnow()
        values: dict[str, Any] = {
            "user_id": user_id,
            "plan": plan,
            "status": status,
            "stripe_subscription_id": stripe_subscription_id,
            "current_period_start": current_period_start,
            "current_period_end": current_period_end,
            "created_at": now,
            "updated_at": now,
        }
        await _dialect_upsert(
            self._session,
            SubscriptionTable,
            values,
            index_elements=["stripe_subscription_id"],
            update_columns=["plan", "status", "current_period_start", "current_period_end", "updated_at"],
        )
        stmt = (
            select(SubscriptionTable)
            .where(SubscriptionTable.stripe_subscription_id == stripe_subscription_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def get_active(self, user_id: str) -> SubscriptionTable | None:
        stmt = (
            select(SubscriptionTable)
            .where(SubscriptionTable.user_id == user_id, SubscriptionTable.status == "active")
            .order_by(SubscriptionTable.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()


class UserUsageRepository:
    """Per-(user, plan) generation counters."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str, plan: str, *, for_update: bool = False) -> UserUsageTable | None:
        """Fetch the counter row; *for_update* takes a row lock on PostgreSQL."""
        stmt = select(UserUsageTable).where(
            UserUsageTable.user_id == user_id,
            UserUsageTable.plan == plan,
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> Sequence[UserUsageTable]:
        stmt = select(UserUsageTable).where(UserUsageTable.user_id == user_id).order_by(UserUsageTable.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def create(
        self,
        user_id: str,
        plan: str,
        *,
        total_generations_allowed: int,
        monthly_generations_allowed: int | None = None,
        current_period_start: datetime | None = None,
        current_period_end: datetime | None = None,
    ) -> UserUsageTable:
        row = UserUsageTable(
            user_id=user_id,
            plan=plan,
            total_generations_allowed=total_generations_allowed,
            total_generations_used=0,
            monthly_generations_allowed=monthly_generations_allowed,
            monthly_generations_used=0,
            total_cost_incurred=Decimal("0"),
            current_period_start=current_period_start,
            current_period_end=current_period_end,
            is_limit_reached=False,
        )
        try:
            self._session.add(row)
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateResourceError("Usage record", f"user {user_id!r} plan {plan!r}") from exc
        return row


class UsageHistoryRepository:
    """Append-only ``usage_history`` ledger.

    Rows are never updated or deleted; mapper events on the table reject
    ORM-level modifications.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(
        self,
        user_id: str,
        *,
        action_type: str,
        resource_used: str,
        cost: Decimal,
        details: dict[str, Any] | None = None,
        generated_image_id: int | None = None,
    ) -> UsageHistoryTable:
        row = UsageHistoryTable(
            user_id=user_id,
            action_type=action_type,
            resource_used=resource_used,
            cost=cost,
            details=details,
            generated_image_id=generated_image_id,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def list_for_user(self, user_id: str, *, limit: int = 100) -> Sequence[UsageHistoryTable]:
        stmt = (
            select(UsageHistoryTable)
            .where(UsageHistoryTable.user_id == user_id)
            .order_by(UsageHistoryTable.created_at.desc(), UsageHistoryTable.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()


# ---------------------------------------------------------------------------
# Selfies, personal models, generated images
# ---------------------------------------------------------------------------


class SelfieUploadRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user_id: str, filename: str, original_url: str) -> SelfieUploadTable:
        row = SelfieUploadTable(user_id=user_id, filename=filename, original_url=original_url)
        self._session.add(row)
        await self._session.flush()
        return row

    async def list_for_user(self, user_id: str) -> Sequence[SelfieUploadTable]:
        stmt = select(SelfieUploadTable).where(SelfieUploadTable.user_id == user_id).order_by(SelfieUploadTable.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()


class UserModelRepository:
    """Personal trained models: at most one per user, unique trigger words."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, user_id: str) -> UserModelTable | None:
        stmt = select(UserModelTable).where(UserModelTable.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: str,
        trigger_word: str,
        *,
        model_name: str | None = None,
    ) -> UserModelTable:
        """Insert the user's model.

        The database enforces both uniqueness rules, so of two concurrent
        creations exactly one succeeds and the other raises
        :class:`DuplicateResourceError`.
        """
        row = UserModelTable(
            user_id=user_id,
            trigger_word=trigger_word,
            model_name=model_name,
            training_status=TrainingStatus.PENDING.value,
        )
        try:
            self._session.add(row)
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateResourceError("User model", f"user {user_id!r} or trigger word {trigger_word!r}") from exc
        return row

    async def update_training_status(
        self,
        user_id: str,
        status: str,
        *,
        replicate_model_id: str | None = None,
    ) -> UserModelTable:
        """Record a training transition; completion stamps ``completed_at`` once."""
        row = await self.get_for_user(user_id)
        if row is None:
            raise ResourceNotFoundError("User model", user_id)
        row.training_status = status
        if replicate_model_id is not None:
            row.replicate_model_id = replicate_model_id
        if status == TrainingStatus.COMPLETED.value and row.completed_at is None:
            row.completed_at = _utcnow()
        await self._session.flush()
        return row


class GeneratedImageRepository:
    """Candidate batches produced by a user's model."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def candidate_urls(row: GeneratedImageTable) -> list[str]:
        """Decode the JSON-encoded candidate list."""
        return list(json.loads(row.image_urls))

    async def create(
        self,
        user_id: str,
        *,
        model_id: int | None,
        category: str,
        subcategory: str,
        prompt: str,
        image_urls: Sequence[str],
    ) -> GeneratedImageTable:
        row = GeneratedImageTable(
            user_id=user_id,
            model_id=model_id,
            category=category,
            subcategory=subcategory,
            prompt=prompt,
            image_urls=json.dumps(list(image_urls)),
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def get(self, user_id: str, image_id: int) -> GeneratedImageTable | None:
        stmt = select(GeneratedImageTable).where(
            GeneratedImageTable.id == image_id,
            GeneratedImageTable.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str, *, saved_only: bool = False) -> Sequence[GeneratedImageTable]:
        stmt = select(GeneratedImageTable).where(GeneratedImageTable.user_id == user_id)
        if saved_only:
            stmt = stmt.where(GeneratedImageTable.saved.is_(True))
        stmt = stmt.order_by(GeneratedImageTable.created_at.desc(), GeneratedImageTable.id.desc())
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def select_url(self, user_id: str, image_id: int, url: str) -> GeneratedImageTable:
        """Choose one of the batch's candidates; *url* must be among them."""
        row = await self.get(user_id, image_id)
        if row is None:
            raise ResourceNotFoundError("Generated image", image_id)
        if url not in self.candidate_urls(row):
            raise InvalidSelectionError(f"{url!r} is not a candidate of generated image {image_id}")
        row.selected_url = url
        await self._session.flush()
        return row

    async def mark_saved(self, user_id: str, image_id: int, saved: bool = True) -> GeneratedImageTable:
        row = await self.get(user_id, image_id)
        if row is None:
            raise ResourceNotFoundError("Generated image", image_id)
        row.saved = saved
        await self._session.flush()
        return row


# ---------------------------------------------------------------------------
# Published content
# ---------------------------------------------------------------------------


class BrandbookRepository:
    """One brandbook per user."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, user_id: str) -> BrandbookTable | None:
        stmt = select(BrandbookTable).where(BrandbookTable.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: str,
        *,
        business_name: str,
        logo_type: str,
        moodboard_style: str,
        **fields: Any,
    ) -> BrandbookTable:
        row = BrandbookTable(
            user_id=user_id,
            business_name=business_name,
            logo_type=logo_type,
            moodboard_style=moodboard_style,
            **fields,
        )
        try:
            self._session.add(row)
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateResourceError("Brandbook", f"user {user_id!r}") from exc
        return row

    async def set_published(self, user_id: str, *, published: bool, live: bool | None = None) -> BrandbookTable:
        row = await self.get_for_user(user_id)
        if row is None:
            raise ResourceNotFoundError("Brandbook", user_id)
        row.is_published = published
        if live is not None:
            row.is_live = live
        await self._session.flush()
        return row


class DashboardRepository:
    """One dashboard per user."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, user_id: str) -> DashboardTable | None:
        stmt = select(DashboardTable).where(DashboardTable.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: str,
        *,
        template_type: str,
        config: dict[str, Any],
        **fields: Any,
    ) -> DashboardTable:
        row = DashboardTable(user_id=user_id, template_type=template_type, config=config, **fields)
        try:
            self._session.add(row)
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateResourceError("Dashboard", f"user {user_id!r}") from exc
        return row


class LandingPageRepository:
    """Landing pages; a user may own many."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: str,
        *,
        template: str,
        config: dict[str, Any],
        **fields: Any,
    ) -> LandingPageTable:
        row = LandingPageTable(user_id=user_id, template=template, config=config, **fields)
        self._session.add(row)
        await self._session.flush()
        return row

    async def get(self, user_id: str, page_id: int) -> LandingPageTable | None:
        stmt = select(LandingPageTable).where(
            LandingPageTable.id == page_id,
            LandingPageTable.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> Sequence[LandingPageTable]:
        stmt = select(LandingPageTable).where(LandingPageTable.user_id == user_id).order_by(LandingPageTable.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------

_CONNECTABLE_TABLES: dict[ResourceKind, Any] = {
    ResourceKind.BRANDBOOK: BrandbookTable,
    ResourceKind.DASHBOARD: DashboardTable,
    ResourceKind.LANDING_PAGE: LandingPageTable,
}


# PostgreSQL reports the constraint name, SQLite the table.column pair.
_DOMAIN_UNIQUE_MARKERS = ("uq_domains_domain", "uq_domains_subdomain", "domains.domain", "domains.subdomain")


def _violates_unique(exc: IntegrityError, markers: tuple[str, ...]) -> bool:
    """Return True when *exc* is a unique violation on one of *markers*."""
    message = str(exc.orig).lower()
    if "unique" not in message and "duplicate key" not in message:
        return False
    return any(marker in message for marker in markers)


class DomainRepository:
    """Custom domains and their connection to a published artifact."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: str,
        domain: str,
        *,
        subdomain: str | None = None,
        dns_records: list[dict[str, Any]] | None = None,
    ) -> DomainTable:
        """Register a domain.  Domains and subdomains are globally unique."""
        row = DomainTable(
            user_id=user_id,
            domain=domain.lower().strip(),
            subdomain=subdomain.lower().strip() if subdomain else None,
            dns_records=dns_records,
        )
        try:
            self._session.add(row)
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            if _violates_unique(exc, _DOMAIN_UNIQUE_MARKERS):
                raise DuplicateResourceError("Domain", domain) from exc
            raise
        return row

    async def get(self, user_id: str, domain_id: int) -> DomainTable | None:
        stmt = select(DomainTable).where(
            DomainTable.id == domain_id,
            DomainTable.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> Sequence[DomainTable]:
        stmt = select(DomainTable).where(DomainTable.user_id == user_id).order_by(DomainTable.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    @staticmethod
    def get_connection(row: DomainTable) -> ConnectedResource | None:
        """Decode the stored connection of *row*."""
        return from_storage(row.connected_to, row.resource_id)

    async def connect(self, user_id: str, domain_id: int, resource: ConnectedResource) -> DomainTable:
        """Point the domain at *resource*.

        Both the domain and the target must exist and belong to *user_id*;
        otherwise :class:`ResourceNotFoundError` is raised and nothing is
        written.
        """
        row = await self.get(user_id, domain_id)
        if row is None:
            raise ResourceNotFoundError("Domain", domain_id)

        kind, resource_id = to_storage(resource)
        target_table = _CONNECTABLE_TABLES[ResourceKind(kind)]
        stmt = select(target_table.id).where(
            target_table.id == resource_id,
            target_table.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundError(kind, resource_id)

        row.connected_to = kind
        row.resource_id = resource_id
        await self._session.flush()
        logger.info("Connected domain %s to %s %d", row.domain, kind, resource_id)
        return row

    async def disconnect(self, user_id: str, domain_id: int) -> DomainTable:
        row = await self.get(user_id, domain_id)
        if row is None:
            raise ResourceNotFoundError("Domain", domain_id)
        row.connected_to = None
        row.resource_id = None
        await self._session.flush()
        return row
