"""Authentication shared kernel module.

Resolves the identity a request or hub connection acts as. Used by the IAM
and realtime bounded contexts alike.
"""

from shared_kernel.auth.bearer import (
    BearerTokenValidator,
    InvalidTokenError,
    TokenClaims,
)
from shared_kernel.auth.observability import (
    BearerTokenProbe,
    DefaultBearerTokenProbe,
    DefaultSessionProbe,
    SessionProbe,
)
from shared_kernel.auth.session_resolver import (
    SESSION_ORGANIZATION_KEY,
    SESSION_USER_KEY,
    ResolvedSession,
    SessionResolver,
    SessionSource,
    extract_bearer_token,
)

__all__ = [
    "BearerTokenProbe",
    "BearerTokenValidator",
    "DefaultBearerTokenProbe",
    "DefaultSessionProbe",
    "InvalidTokenError",
    "ResolvedSession",
    "SESSION_ORGANIZATION_KEY",
    "SESSION_USER_KEY",
    "SessionProbe",
    "SessionResolver",
    "SessionSource",
    "TokenClaims",
    "extract_bearer_token",
]
