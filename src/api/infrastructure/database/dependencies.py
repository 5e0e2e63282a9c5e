"""Database dependency injection for FastAPI.

Provides async session factories for read and write operations. Engines are
created on first use and disposed on application shutdown.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

_write_engine: AsyncEngine | None = None
_read_engine: AsyncEngine | None = None

_write_sessionmaker: async_sessionmaker[AsyncSession] | None = None
_read_sessionmaker: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()


def get_write_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the write sessionmaker (singleton).

    Creates the engine on first call using double-check locking.

    Returns:
        Sessionmaker bound to the write engine
    """
    global _write_engine, _write_sessionmaker
    if _write_sessionmaker is None:
        with _engine_lock:
            if _write_sessionmaker is None:
                settings = get_database_settings()
                _write_engine = create_write_engine(settings)
                _write_sessionmaker = async_sessionmaker(
                    _write_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    target=settings.connection_string,
                    pool_size=settings.pool_min_connections,
                    read_only=False,
                )
    return _write_sessionmaker


def get_read_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the read sessionmaker (singleton).

    Creates the engine on first call using double-check locking.

    Returns:
        Sessionmaker bound to the read engine
    """
    global _read_engine, _read_sessionmaker
    if _read_sessionmaker is None:
        with _engine_lock:
            if _read_sessionmaker is None:
                settings = get_database_settings()
                _read_engine = create_read_engine(settings)
                _read_sessionmaker = async_sessionmaker(
                    _read_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    target=settings.connection_string,
                    pool_size=settings.pool_max_connections,
                    read_only=True,
                )
    return _read_sessionmaker


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a read-only session for lookups (FastAPI dependency).

    Every access decision and tenant resolution in a request shares this
    session through FastAPI's per-request dependency cache.

    Yields:
        AsyncSession for read-only database operations
    """
    async with get_read_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose all engines.

    Called on application shutdown. Resets sessionmakers to allow
    reinitialization.
    """
    global _write_engine, _read_engine, _write_sessionmaker, _read_sessionmaker

    if _write_engine is not None:
        await _write_engine.dispose()
        _probe.pool_closed()
        _write_engine = None
        _write_sessionmaker = None

    if _read_engine is not None:
        await _read_engine.dispose()
        _probe.pool_closed()
        _read_engine = None
        _read_sessionmaker = None
