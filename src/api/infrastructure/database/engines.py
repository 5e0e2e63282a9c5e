"""Async engines for the hosted Postgres store.

Reads and writes get separate asyncpg pools. Nearly all traffic is reads
(access decisions, tenant resolution, hub snapshots), so the read pool takes
the configured maximum while the write pool, which only resolves alerts,
stays at the minimum.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "create_write_engine",
    "create_read_engine",
    "build_async_url",
]

APPLICATION_NAME = "aethex-api"


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine used to resolve alerts.

    Args:
        settings: Database connection settings

    Returns:
        Async engine with a pool of ``pool_min_connections``
    """
    return _create_engine(
        settings,
        pool_size=settings.pool_min_connections,
        role="write",
    )


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine shared by every query path.

    Transactions on this engine are opened read-only, so a stray write
    fails at the server instead of silently succeeding.

    Args:
        settings: Database connection settings

    Returns:
        Async engine with a pool of ``pool_max_connections``
    """
    return _create_engine(
        settings,
        pool_size=settings.pool_max_connections,
        role="read",
        execution_options={"postgresql_readonly": True},
    )


def _create_engine(
    settings: DatabaseSettings,
    pool_size: int,
    role: str,
    execution_options: dict[str, Any] | None = None,
) -> AsyncEngine:
    return create_async_engine(
        build_async_url(settings),
        pool_size=pool_size,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {"application_name": f"{APPLICATION_NAME}:{role}"}
        },
        execution_options=execution_options or {},
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Render the asyncpg connection URL, credentials included.

    Hosted credentials routinely contain ``@`` or ``/``; ``URL.create``
    escapes them so the rendered string parses back to the same parts.
    """
    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    ).render_as_string(hide_password=False)
