"""SQLite backend for local development and the test suite.

Same ORM tables as PostgreSQL, with these differences:

* tables come from ``create_all`` rather than Alembic;
* JSONB columns use SQLite's JSON type (text on disk);
* ``FOR UPDATE`` is ignored by the dialect, the single writer lock
  serialises usage counter updates instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(".studio") / "studio.db"
MEMORY = ":memory:"

# Applied on every new DBAPI connection.
_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA busy_timeout=30000",
)


def _url_for(db_path: Path | str) -> str:
    if str(db_path) == MEMORY:
        return f"sqlite+aiosqlite:///{MEMORY}"
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{path}"


def get_local_engine(db_path: Path | str = DEFAULT_DB_PATH) -> AsyncEngine:
    """Return an aiosqlite engine for *db_path*.

    Missing parent directories are created.  ``":memory:"`` gives a
    throwaway database.
    """
    url = _url_for(db_path)
    engine = create_async_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(engine.sync_engine, "connect")
    def _apply_pragmas(dbapi_conn, _record) -> None:  # type: ignore[no-untyped-def]
        cursor = dbapi_conn.cursor()
        for pragma in _PRAGMAS:
            cursor.execute(pragma)
        cursor.close()

    logger.info("SQLite engine ready: %s", url)
    return engine


async def create_local_tables(engine: AsyncEngine) -> None:
    """Create any missing tables.  Safe to run on every start."""
    from studio_core.state.tables import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Studio tables present on %s", engine.url.database)
