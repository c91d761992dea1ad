"""Engine construction and session scoping for the studio database.

PostgreSQL (asyncpg) in deployed environments, SQLite (aiosqlite) for local
development and tests.  The URL's backend name picks the engine flavour.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)

# Server-side guards applied to every PostgreSQL connection (milliseconds).
STATEMENT_TIMEOUT_MS = 30_000
LOCK_TIMEOUT_MS = 10_000

_factories: dict[int, async_sessionmaker[AsyncSession]] = {}


def is_sqlite_url(database_url: str) -> bool:
    """Return True when *database_url* targets SQLite."""
    return make_url(database_url).get_backend_name() == "sqlite"


def get_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
) -> AsyncEngine:
    """Build the async engine for *database_url*.

    ``pool_size`` and ``max_overflow`` apply to PostgreSQL only; SQLite
    databases get the local single-file engine.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        from studio_core.state.sqlite_adapter import get_local_engine

        return get_local_engine(url.database or ":memory:")

    engine = create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=1800,
        pool_timeout=10,
        connect_args={
            "server_settings": {
                "application_name": "brand-studio",
                "statement_timeout": str(STATEMENT_TIMEOUT_MS),
                "lock_timeout": str(LOCK_TIMEOUT_MS),
            }
        },
    )
    logger.info(
        "PostgreSQL engine ready host=%s db=%s pool_size=%d max_overflow=%d",
        url.host,
        url.database,
        pool_size,
        max_overflow,
    )
    return engine


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return the session factory for *engine*, creating it on first use."""
    factory = _factories.get(id(engine))
    if factory is None:
        factory = _factories[id(engine)] = async_sessionmaker(engine, expire_on_commit=False)
    return factory


@asynccontextmanager
async def get_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Run the body as one unit of work: commit on exit, roll back on error."""
    async with get_session_factory(engine)() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping(session: AsyncSession) -> bool:
    """Return True when the database answers a trivial query."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Database ping failed: %s", exc)
        return False
    return True
