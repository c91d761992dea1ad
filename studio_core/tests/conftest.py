"""Shared fixtures for studio_core tests.

Repository tests run against a file-backed SQLite database (aiosqlite)
so that two sessions can share one database for concurrency checks.
"""

from __future__ import annotations

from pathlib import Path

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from studio_core.state.repository import UserRepository
from studio_core.state.sqlite_adapter import create_local_tables, get_local_engine

USER_A = "user-a"
USER_B = "user-b"


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncEngine:
    eng = get_local_engine(tmp_path / "studio.db")
    await create_local_tables(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as s:
        users = UserRepository(s)
        await users.upsert(USER_A, email="a@example.com")
        await users.upsert(USER_B, email="b@example.com")
        await s.commit()
    return factory


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    """Session with two committed users, ``user-a`` and ``user-b``."""
    async with session_factory() as s:
        yield s
