"""Session FastAPI dependencies for IAM routes.

Identity resolution itself is shared infrastructure; this module adds the
guards IAM routes compose.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        subject_id: Annotated[str, Depends(require_subject)],
    ):
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from iam.dependencies.errors import to_http_exception
from iam.ports.exceptions import AuthenticationAbsentError
from infrastructure.auth_dependencies import (
    get_cookie_session,
    get_resolved_session,
    require_platform_admin,
)
from shared_kernel.auth import ResolvedSession

__all__ = [
    "get_cookie_session",
    "get_resolved_session",
    "require_platform_admin",
    "require_subject",
]


def require_subject(
    resolved: Annotated[ResolvedSession, Depends(get_resolved_session)],
) -> str:
    """Require an authenticated subject.

    Raises:
        HTTPException 401: If no identity was resolved.
    """
    if resolved.subject_id is None:
        raise to_http_exception(AuthenticationAbsentError())
    return resolved.subject_id
