"""Resource access FastAPI dependencies.

Usage in FastAPI routes:
    @router.delete("/projects/{project_id}")
    async def delete_project(
        decision: Annotated[
            ResourceAccessDecision,
            Depends(
                require_resource_access(
                    ResourceKind.PROJECT, GrantRole.ADMIN, path_param="project_id"
                )
            ),
        ],
    ):
        ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from iam.application.observability import DefaultResourceAccessProbe
from iam.application.services import ResourceAccessDecision, ResourceAccessService
from iam.dependencies.errors import to_http_exception
from iam.dependencies.repositories import (
    get_collaboration_grant_repository,
    get_membership_repository,
    get_resource_repository,
)
from iam.dependencies.session import require_subject
from iam.domain.value_objects import ResourceKind, ResourceRef
from iam.ports.exceptions import ResourceAccessDeniedError
from iam.ports.repositories import (
    ICollaborationGrantRepository,
    IMembershipRepository,
    IResourceRepository,
)
from shared_kernel.authorization.roles import GrantRole


def get_resource_access_service(
    resource_repository: Annotated[IResourceRepository, Depends(get_resource_repository)],
    grant_repository: Annotated[
        ICollaborationGrantRepository, Depends(get_collaboration_grant_repository)
    ],
    membership_repository: Annotated[
        IMembershipRepository, Depends(get_membership_repository)
    ],
) -> ResourceAccessService:
    """Get ResourceAccessService instance."""
    return ResourceAccessService(
        resource_repository=resource_repository,
        grant_repository=grant_repository,
        membership_repository=membership_repository,
        probe=DefaultResourceAccessProbe(),
    )


def require_resource_access(
    kind: ResourceKind,
    minimum: GrantRole = GrantRole.VIEWER,
    path_param: str = "resource_id",
) -> Callable[..., Awaitable[ResourceAccessDecision]]:
    """Build a dependency requiring access to the resource named in the path.

    Args:
        kind: Kind of resource the route operates on.
        minimum: Lowest collaboration role the route needs.
        path_param: Path parameter carrying the resource id.

    Returns:
        FastAPI dependency returning the allowing ResourceAccessDecision.
    """

    async def dependency(
        connection: HTTPConnection,
        subject_id: Annotated[str, Depends(require_subject)],
        service: Annotated[ResourceAccessService, Depends(get_resource_access_service)],
    ) -> ResourceAccessDecision:
        ref = ResourceRef(kind=kind, id=str(connection.path_params[path_param]))
        decision = await service.resolve(ref, subject_id=subject_id, minimum_role=minimum)
        if not decision.allowed:
            raise to_http_exception(ResourceAccessDeniedError(decision))
        return decision

    return dependency
