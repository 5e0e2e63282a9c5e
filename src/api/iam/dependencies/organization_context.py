"""Organization context FastAPI dependencies.

Resolves the organization a request acts under from the organization
selector header, the sticky choice stored in the cookie session, or the
subject's default membership.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        organization: Annotated[
            OrganizationContext, Depends(require_organization_context)
        ],
    ):
        # organization.organization_id is the acting tenant
        ...

    @router.delete(
        "/example",
        dependencies=[Depends(require_organization_role(MembershipRole.ADMIN))],
    )
    async def admin_only(): ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from iam.application.services import (
    OrganizationContextResolution,
    OrganizationContextService,
)
from iam.dependencies.errors import to_http_exception
from iam.dependencies.repositories import get_membership_repository
from iam.dependencies.session import get_cookie_session, get_resolved_session, require_subject
from iam.ports.exceptions import (
    InsufficientOrganizationRoleError,
    OrganizationContextAbsentError,
)
from iam.ports.repositories import IMembershipRepository
from infrastructure.settings import get_access_settings
from shared_kernel.auth import SESSION_ORGANIZATION_KEY, ResolvedSession
from shared_kernel.authorization.roles import MembershipRole, meets_minimum
from shared_kernel.middleware.observability import DefaultOrganizationContextProbe
from shared_kernel.middleware.organization_context import OrganizationContext


def get_organization_context_service(
    membership_repository: Annotated[
        IMembershipRepository, Depends(get_membership_repository)
    ],
) -> OrganizationContextService:
    """Get OrganizationContextService instance."""
    return OrganizationContextService(
        membership_repository=membership_repository,
        probe=DefaultOrganizationContextProbe(),
    )


async def get_organization_context_resolution(
    connection: HTTPConnection,
    resolved: Annotated[ResolvedSession, Depends(get_resolved_session)],
    service: Annotated[
        OrganizationContextService, Depends(get_organization_context_service)
    ],
) -> OrganizationContextResolution:
    """Resolve the organization context of the current request (never raises)."""
    settings = get_access_settings()
    session = get_cookie_session(connection) or {}
    sticky_choice = session.get(SESSION_ORGANIZATION_KEY)

    return await service.resolve(
        subject_id=resolved.subject_id,
        requested_organization_id=connection.headers.get(settings.organization_header),
        session_organization_id=sticky_choice if isinstance(sticky_choice, str) else None,
    )


def get_organization_context(
    resolution: Annotated[
        OrganizationContextResolution, Depends(get_organization_context_resolution)
    ],
) -> OrganizationContext | None:
    """Optional organization context; None when resolution came up empty."""
    return resolution.context


def require_organization_context(
    _: Annotated[str, Depends(require_subject)],
    resolution: Annotated[
        OrganizationContextResolution, Depends(get_organization_context_resolution)
    ],
) -> OrganizationContext:
    """Require an organization context.

    Raises:
        HTTPException 401: If no identity was resolved.
        HTTPException 400: If no organization context could be resolved.
    """
    if resolution.context is None:
        raise to_http_exception(OrganizationContextAbsentError(resolution.outcome))
    return resolution.context


def require_organization_role(
    minimum: MembershipRole,
) -> Callable[..., Awaitable[OrganizationContext]]:
    """Build a dependency requiring at least ``minimum`` in the acting organization.

    Args:
        minimum: Lowest acceptable membership role.

    Returns:
        FastAPI dependency returning the OrganizationContext.
    """

    async def dependency(
        context: Annotated[OrganizationContext, Depends(require_organization_context)],
    ) -> OrganizationContext:
        if not meets_minimum(context.role, minimum):
            raise to_http_exception(
                InsufficientOrganizationRoleError(role=context.role, minimum=minimum)
            )
        return context

    return dependency


def organization_scope(
    context: Annotated[OrganizationContext, Depends(require_organization_context)],
) -> str:
    """Return the acting organization id for scoping queries.

    Raises:
        HTTPException 400: If no organization context could be resolved.
    """
    return context.organization_id
