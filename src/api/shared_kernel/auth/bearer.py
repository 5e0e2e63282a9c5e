"""Bearer token validation for identities issued by the identity provider.

The hosted identity provider signs access tokens with a shared secret
(HS256). This module only reads the identity those tokens carry; issuing
tokens and verifying login credentials stay with the provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import BearerTokenProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated bearer token claims."""

    sub: str
    email: str | None
    app_role: str | None


class InvalidTokenError(Exception):
    """Raised when bearer token validation fails."""

    pass


class BearerTokenValidator:
    """Validates bearer tokens signed with the identity provider's secret.

    Validates signature, expiry and audience. The platform role is read from
    the ``app_metadata.role`` claim, which only the provider can set.
    """

    def __init__(
        self,
        secret: str,
        audience: str,
        probe: BearerTokenProbe,
        algorithms: list[str] | None = None,
    ):
        """Initialize the validator.

        Args:
            secret: Shared signing secret. An empty secret disables bearer
                authentication; every token is then rejected.
            audience: Expected audience claim value.
            probe: Observability probe for logging events.
            algorithms: Accepted signing algorithms (default: HS256).
        """
        self._secret = secret
        self._audience = audience
        self._probe = probe
        self._algorithms = algorithms or ["HS256"]

    @property
    def enabled(self) -> bool:
        """Whether a signing secret is configured."""
        return bool(self._secret)

    def validate_token(self, token: str) -> TokenClaims:
        """Validate a bearer token and return its claims.

        Args:
            token: The encoded JWT.

        Returns:
            TokenClaims containing the validated claims.

        Raises:
            InvalidTokenError: If the token is invalid, expired, or bearer
                authentication is not configured.
        """
        if not self.enabled:
            self._probe.token_validation_failed(reason="Bearer tokens not configured")
            raise InvalidTokenError("Bearer token authentication is not configured")

        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                options={
                    "verify_signature": True,
                    "verify_aud": True,
                    "verify_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = claims.get("sub")
        if not subject:
            self._probe.token_validation_failed(reason="Missing sub claim")
            raise InvalidTokenError("Missing required claim: sub")

        app_metadata = claims.get("app_metadata") or {}
        app_role = app_metadata.get("role") if isinstance(app_metadata, dict) else None
        email = claims.get("email")

        self._probe.token_validated(subject_id=str(subject))

        return TokenClaims(
            sub=str(subject),
            email=str(email) if email is not None else None,
            app_role=str(app_role) if app_role is not None else None,
        )
