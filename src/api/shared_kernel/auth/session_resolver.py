"""Session resolution: who is this request acting as?

Identity comes from the signed cookie session first, then from an
``Authorization: Bearer`` token issued by the identity provider. Absence of
identity is a normal outcome, never an error; callers decide whether
anonymous access is acceptable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from shared_kernel.auth.bearer import BearerTokenValidator, InvalidTokenError
from shared_kernel.auth.observability import DefaultSessionProbe, SessionProbe

SESSION_USER_KEY = "user"
SESSION_LEGACY_USER_ID_KEY = "userId"
SESSION_ORGANIZATION_KEY = "current_org_id"


class SessionSource(StrEnum):
    """Where a request identity was read from."""

    SESSION = "session"
    BEARER = "bearer"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class ResolvedSession:
    """Identity of the current request or connection.

    Attributes:
        subject_id: Identity provider subject, or None when anonymous.
        is_platform_admin: Whether the subject carries the platform admin role.
        source: How the identity was obtained.
    """

    subject_id: str | None
    is_platform_admin: bool
    source: SessionSource

    @property
    def is_authenticated(self) -> bool:
        """Whether a subject was resolved."""
        return self.subject_id is not None

    @classmethod
    def anonymous(cls) -> ResolvedSession:
        """Identity of a request without usable credentials."""
        return cls(subject_id=None, is_platform_admin=False, source=SessionSource.ANONYMOUS)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Parse ``Bearer <token>`` from an Authorization header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class SessionResolver:
    """Resolves a request identity from a cookie session or bearer token."""

    def __init__(
        self,
        token_validator: BearerTokenValidator,
        probe: SessionProbe | None = None,
        admin_role: str = "admin",
    ) -> None:
        self._token_validator = token_validator
        self._probe = probe or DefaultSessionProbe()
        self._admin_role = admin_role

    def resolve(
        self,
        session: Mapping[str, Any] | None,
        authorization: str | None,
    ) -> ResolvedSession:
        """Resolve the identity behind a request.

        Args:
            session: Decoded cookie session, if any.
            authorization: Raw Authorization header value, if any.

        Returns:
            ResolvedSession; anonymous when nothing usable is present.
        """
        resolved = self._from_session(session) or self._from_bearer(authorization)
        if resolved is None:
            self._probe.anonymous_request()
            return ResolvedSession.anonymous()

        self._probe.subject_resolved(
            subject_id=resolved.subject_id or "",
            source=resolved.source,
            is_admin=resolved.is_platform_admin,
        )
        return resolved

    def _from_session(self, session: Mapping[str, Any] | None) -> ResolvedSession | None:
        if not session:
            return None

        user = session.get(SESSION_USER_KEY)
        if isinstance(user, Mapping) and user.get("id"):
            return ResolvedSession(
                subject_id=str(user["id"]),
                is_platform_admin=user.get("role") == self._admin_role,
                source=SessionSource.SESSION,
            )

        legacy_user_id = session.get(SESSION_LEGACY_USER_ID_KEY)
        if legacy_user_id:
            return ResolvedSession(
                subject_id=str(legacy_user_id),
                is_platform_admin=False,
                source=SessionSource.SESSION,
            )
        return None

    def _from_bearer(self, authorization: str | None) -> ResolvedSession | None:
        token = extract_bearer_token(authorization)
        if token is None:
            return None

        try:
            claims = self._token_validator.validate_token(token)
        except InvalidTokenError as e:
            self._probe.bearer_token_rejected(reason=str(e))
            return None

        return ResolvedSession(
            subject_id=claims.sub,
            is_platform_admin=claims.app_role == self._admin_role,
            source=SessionSource.BEARER,
        )
