"""Database dependency injection for FastAPI.

Provides async session factories for read and write operations with proper
transaction management and connection pooling.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Engines and sessionmakers keyed by role ("write" / "read"), created on first use
_engines: dict[str, AsyncEngine] = {}
_sessionmakers: dict[str, async_sessionmaker[AsyncSession]] = {}

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()

_ENGINE_FACTORIES: dict[str, Callable[[DatabaseSettings], AsyncEngine]] = {
    "write": create_write_engine,
    "read": create_read_engine,
}


def _get_engine(role: str) -> AsyncEngine:
    """Get the engine for ``role``, creating it and its sessionmaker once.

    Uses double-check locking for thread-safe initialization.
    """
    engine = _engines.get(role)
    if engine is None:
        with _engine_lock:
            engine = _engines.get(role)
            if engine is None:
                settings = get_database_settings()
                engine = _ENGINE_FACTORIES[role](settings)
                _engines[role] = engine
                _sessionmakers[role] = async_sessionmaker(
                    engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    role=role,
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_max_connections,
                )
    return engine


def get_write_engine() -> AsyncEngine:
    """Get the write database engine (singleton)."""
    return _get_engine("write")


def get_read_engine() -> AsyncEngine:
    """Get the read database engine (singleton)."""
    return _get_engine("read")


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a write session for mutations (FastAPI dependency).

    The session is configured to NOT auto-commit. Application services
    manage transactions using `async with session.begin()`.

    Yields:
        AsyncSession for database operations
    """
    get_write_engine()
    async with _sessionmakers["write"]() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a read-only session for queries (FastAPI dependency).

    Used by permission checks and listings, which never write.

    Yields:
        AsyncSession for read-only database operations
    """
    get_read_engine()
    async with _sessionmakers["read"]() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose every engine created so far.

    Should be called on application shutdown. Sessionmakers are reset so
    that engines can be re-created afterwards.
    """
    for role in list(_engines):
        engine = _engines.pop(role)
        _sessionmakers.pop(role, None)
        await engine.dispose()
        _probe.engine_disposed(role=role)
