"""Tests for the SQLite adapter and the engine/session helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect, text
from studio_core.state.database import get_engine, get_session, get_session_factory, is_sqlite_url
from studio_core.state.repository import StyleguideRepository, UserRepository
from studio_core.state.sqlite_adapter import create_local_tables, get_local_engine
from studio_core.state.tables import Base

# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------


class TestGetLocalEngine:
    def test_creates_in_memory_engine(self) -> None:
        engine = get_local_engine(":memory:")
        assert "sqlite" in str(engine.url)

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "deep" / "test.db"
        engine = get_local_engine(db_path)
        assert db_path.parent.exists()
        assert "test.db" in str(engine.url)

    def test_get_engine_routes_sqlite_urls(self, tmp_path: Path) -> None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'routed.db'}"

        engine = get_engine(url)

        assert is_sqlite_url(url)
        assert "routed.db" in str(engine.url)

    def test_postgres_url_is_not_sqlite(self) -> None:
        assert not is_sqlite_url("postgresql+asyncpg://u:p@localhost/db")


# ---------------------------------------------------------------------------
# Table creation
# ---------------------------------------------------------------------------


class TestCreateLocalTables:
    @pytest.mark.asyncio
    async def test_creates_every_table(self, tmp_path: Path) -> None:
        engine = get_local_engine(tmp_path / "tables.db")
        await create_local_tables(engine)

        async with engine.connect() as conn:
            names = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))

        assert names == set(Base.metadata.tables)
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_idempotent_creation(self, tmp_path: Path) -> None:
        engine = get_local_engine(tmp_path / "idem.db")
        await create_local_tables(engine)
        await create_local_tables(engine)
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_pragmas_applied(self, tmp_path: Path) -> None:
        engine = get_local_engine(tmp_path / "pragma.db")

        async with engine.connect() as conn:
            foreign_keys = (await conn.execute(text("PRAGMA foreign_keys"))).scalar()
            journal_mode = (await conn.execute(text("PRAGMA journal_mode"))).scalar()

        assert foreign_keys == 1
        assert journal_mode == "wal"
        await engine.dispose()


# ---------------------------------------------------------------------------
# Session management
# ---------------------------------------------------------------------------


class TestGetSession:
    @pytest.mark.asyncio
    async def test_commits_on_success(self, tmp_path: Path) -> None:
        engine = get_local_engine(tmp_path / "commit.db")
        await create_local_tables(engine)

        async with get_session(engine) as session:
            await UserRepository(session).upsert("u1")
            await StyleguideRepository(session).create_or_update("u1", {"title": "Kept"})

        async with get_session(engine) as session:
            row = await StyleguideRepository(session).get_by_user("u1")
        assert row is not None and row.title == "Kept"
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, tmp_path: Path) -> None:
        engine = get_local_engine(tmp_path / "rollback.db")
        await create_local_tables(engine)

        with pytest.raises(RuntimeError):
            async with get_session(engine) as session:
                await StyleguideRepository(session).create_or_update("u1", {"title": "Lost"})
                raise RuntimeError("abort")

        async with get_session(engine) as session:
            assert await StyleguideRepository(session).get_by_user("u1") is None
        await engine.dispose()

    def test_session_factory_cached_per_engine(self, tmp_path: Path) -> None:
        engine = get_local_engine(tmp_path / "cache.db")

        assert get_session_factory(engine) is get_session_factory(engine)
