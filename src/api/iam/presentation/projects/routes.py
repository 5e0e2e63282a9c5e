"""HTTP routes for hub projects, guarded per instance.

The capability policy for ``/api/hub/projects`` applies application-wide;
each handler additionally checks access to the specific project.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from iam.application.services import ResourceAccessDecision, ResourceAccessService
from iam.dependencies.errors import to_http_exception
from iam.dependencies.repositories import get_resource_repository
from iam.dependencies.resource_access import (
    get_resource_access_service,
    require_resource_access,
)
from iam.dependencies.session import require_subject
from iam.domain.value_objects import ResourceKind, ResourceRef
from iam.ports.exceptions import ResourceAccessDeniedError
from iam.ports.repositories import IResourceRepository
from iam.presentation.projects.models import AccessReportResponse, ProjectResponse
from shared_kernel.authorization.roles import GrantRole
from shared_kernel.exceptions import BackingStoreUnavailableError

router = APIRouter(
    prefix="/api/hub/projects",
    tags=["projects"],
)


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    decision: Annotated[
        ResourceAccessDecision,
        Depends(
            require_resource_access(
                ResourceKind.PROJECT, GrantRole.VIEWER, path_param="project_id"
            )
        ),
    ],
    resource_repository: Annotated[IResourceRepository, Depends(get_resource_repository)],
) -> ProjectResponse:
    """Get a project the caller may view.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 403 if the project is missing or inaccessible
        HTTPException: 503 if the backing store is unavailable
    """
    try:
        resource = await resource_repository.get(
            ResourceRef(kind=ResourceKind.PROJECT, id=project_id)
        )
    except BackingStoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Project is temporarily unavailable",
        ) from e

    if resource is None:
        raise to_http_exception(ResourceAccessDeniedError(decision))
    return ProjectResponse.from_domain(resource, decision)


@router.get("/{project_id}/access")
async def get_project_access(
    project_id: str,
    subject_id: Annotated[str, Depends(require_subject)],
    service: Annotated[ResourceAccessService, Depends(get_resource_access_service)],
    minimum_role: Annotated[GrantRole, Query()] = GrantRole.VIEWER,
) -> AccessReportResponse:
    """Report whether the caller may act on a project at ``minimum_role``.

    Raises:
        HTTPException: 401 if not authenticated
    """
    decision = await service.resolve(
        ResourceRef(kind=ResourceKind.PROJECT, id=project_id),
        subject_id=subject_id,
        minimum_role=minimum_role,
    )
    return AccessReportResponse.from_domain(decision, minimum_role=str(minimum_role))
