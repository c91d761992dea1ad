"""FastAPI dependency injection for database sessions, settings, identity and templates."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from studio_core.state.database import get_engine
from studio_core.state.database import get_session_factory as _factory_for
from studio_core.state.repository import UserRepository
from studio_core.styleguide.catalog import (
    BuiltinTemplateCatalog,
    DatabaseTemplateCatalog,
    TemplateRepository,
)

from api.config import APISettings, TemplateSource, load_api_settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

_settings_cache: APISettings | None = None


def get_settings() -> APISettings:
    """Return the cached :class:`APISettings` singleton."""
    global _settings_cache  # noqa: PLW0603
    if _settings_cache is None:
        _settings_cache = load_api_settings()
    return _settings_cache


SettingsDep = Annotated[APISettings, Depends(get_settings)]

# ---------------------------------------------------------------------------
# Database session
# ---------------------------------------------------------------------------

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_engine(settings: APISettings) -> AsyncEngine:
    """Create and cache the global async engine."""
    global _engine, _session_factory  # noqa: PLW0603
    _engine = get_engine(settings.database_url)
    _session_factory = _factory_for(_engine)
    logger.info("Database engine initialised (platform=%s)", settings.platform_env.value)
    return _engine


async def dispose_engine() -> None:
    """Dispose the global engine pool (call during shutdown)."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the global async session factory."""
    if _session_factory is None:
        raise RuntimeError(
            "Database engine has not been initialised. Ensure init_engine() is called during application startup."
        )
    return _session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an ``AsyncSession`` scoped to one request.

    The session commits on clean exit and rolls back on exception, so every
    route is a single unit of work.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

# ---------------------------------------------------------------------------
# Caller identity (populated by AuthenticationMiddleware)
# ---------------------------------------------------------------------------


async def get_current_user_id(request: Request, session: SessionDep) -> str:
    """Return the authenticated caller's id or fail with 401.

    The caller's ``users`` row is created here on first use, so owned
    rows written later in the request satisfy their foreign key.
    """
    sub = getattr(request.state, "sub", None)
    if not sub:
        raise HTTPException(status_code=401, detail="User not authenticated")
    claims = getattr(request.state, "claims", None)
    await UserRepository(session).ensure_exists(
        sub,
        first_name=getattr(claims, "first_name", None),
        last_name=getattr(claims, "last_name", None),
        profile_image_url=getattr(claims, "profile_image_url", None),
    )
    return sub


CallerDep = Annotated[str, Depends(get_current_user_id)]

# ---------------------------------------------------------------------------
# Template catalog
# ---------------------------------------------------------------------------


def get_template_repository(settings: SettingsDep, session: SessionDep) -> TemplateRepository:
    """Return the catalog selected by ``API_TEMPLATE_SOURCE``."""
    if settings.template_source is TemplateSource.DATABASE:
        return DatabaseTemplateCatalog(session)
    return BuiltinTemplateCatalog()


TemplateCatalogDep = Annotated[TemplateRepository, Depends(get_template_repository)]
