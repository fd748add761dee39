"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: async SQLite engine, session, seeded rows
    - Settings Fixtures: isolated pagination settings
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from keyset_pager.core.settings import clear_settings_cache
from tests.utils import ROWS, Base, Item

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite.

    Yields:
        Async SQLAlchemy engine connected to in-memory SQLite.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with tables created.

    Yields:
        Async database session for testing.
    """
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def seeded_session(db_session: AsyncSession) -> AsyncSession:
    """Session with rows a, b, c inserted (ids 1, 2, 3).

    Example:
        async def test_first_page(seeded_session):
            page = await repo.paginate_cursor(seeded_session, order_by="id", first=1)
    """
    db_session.add_all([Item(**row) for row in ROWS])
    await db_session.flush()
    return db_session


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env overrides in a test take effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()
