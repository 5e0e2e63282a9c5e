"""Identity resolution dependencies shared by every bounded context.

Provides the cached bearer token validator and session resolver, and the
FastAPI dependencies resolving the identity of an HTTP request or a
WebSocket handshake.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from starlette.requests import HTTPConnection

from infrastructure.settings import get_auth_settings
from shared_kernel.auth import (
    BearerTokenValidator,
    DefaultBearerTokenProbe,
    DefaultSessionProbe,
    ResolvedSession,
    SessionResolver,
)


@lru_cache
def get_bearer_token_validator() -> BearerTokenValidator:
    """Get cached bearer token validator configured from AuthSettings."""
    settings = get_auth_settings()
    return BearerTokenValidator(
        secret=settings.jwt_secret.get_secret_value(),
        audience=settings.jwt_audience,
        probe=DefaultBearerTokenProbe(),
        algorithms=settings.jwt_algorithms,
    )


@lru_cache
def get_session_resolver() -> SessionResolver:
    """Get cached session resolver."""
    return SessionResolver(
        token_validator=get_bearer_token_validator(),
        probe=DefaultSessionProbe(),
        admin_role=get_auth_settings().admin_role,
    )


def get_cookie_session(connection: HTTPConnection) -> Mapping[str, Any] | None:
    """Return the decoded cookie session, or None without SessionMiddleware."""
    return connection.scope.get("session")


def get_resolved_session(
    connection: HTTPConnection,
    resolver: Annotated[SessionResolver, Depends(get_session_resolver)],
) -> ResolvedSession:
    """Resolve the identity of the current request or handshake (never raises)."""
    return resolver.resolve(
        session=get_cookie_session(connection),
        authorization=connection.headers.get("authorization"),
    )


def require_platform_admin(
    resolved: Annotated[ResolvedSession, Depends(get_resolved_session)],
) -> ResolvedSession:
    """Require an authenticated platform administrator.

    Raises:
        HTTPException 401: If no identity was resolved.
        HTTPException 403: If the subject is not a platform admin.
    """
    if not resolved.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Authentication required"},
        )
    if not resolved.is_platform_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "Admin access required"},
        )
    return resolved
