"""Unit tests for the database session dependencies.

Sessions are opened without issuing queries, so no database is required.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_engine,
    get_read_session,
    get_write_engine,
    get_write_session,
)


@pytest_asyncio.fixture(autouse=True)
async def dispose_engines():
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_engines_are_cached_per_role():
    write_engine = get_write_engine()
    read_engine = get_read_engine()

    assert isinstance(write_engine, AsyncEngine)
    assert get_write_engine() is write_engine
    assert get_read_engine() is read_engine
    assert write_engine is not read_engine


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "session_factory,engine_factory",
    [
        (get_write_session, get_write_engine),
        (get_read_session, get_read_engine),
    ],
)
async def test_session_is_bound_to_its_engine(session_factory, engine_factory):
    sessions = []
    async for session in session_factory():
        sessions.append(session)
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is engine_factory().sync_engine

    assert len(sessions) == 1


@pytest.mark.asyncio
async def test_close_database_connections_recreates_engines():
    write_engine = get_write_engine()
    read_engine = get_read_engine()

    await close_database_connections()

    assert get_write_engine() is not write_engine
    assert get_read_engine() is not read_engine
