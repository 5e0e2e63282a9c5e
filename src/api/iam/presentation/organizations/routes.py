"""HTTP routes for the caller's organizations."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from iam.application.services import (
    OrganizationContextResolution,
    OrganizationContextService,
)
from iam.dependencies.errors import to_http_exception
from iam.dependencies.organization_context import (
    get_organization_context_resolution,
    get_organization_context_service,
)
from iam.dependencies.repositories import (
    get_membership_repository,
    get_organization_repository,
)
from iam.dependencies.session import require_subject
from iam.ports.exceptions import NotAnOrganizationMemberError
from iam.ports.repositories import IMembershipRepository, IOrganizationRepository
from iam.presentation.organizations.models import (
    OrganizationMembershipResponse,
    SelectOrganizationRequest,
)
from iam.presentation.session.models import OrganizationContextResponse
from shared_kernel.auth import SESSION_ORGANIZATION_KEY
from shared_kernel.exceptions import BackingStoreUnavailableError

router = APIRouter(
    prefix="/organizations",
    tags=["organizations"],
)


@router.get("")
async def list_organizations(
    subject_id: Annotated[str, Depends(require_subject)],
    membership_repository: Annotated[
        IMembershipRepository, Depends(get_membership_repository)
    ],
    organization_repository: Annotated[
        IOrganizationRepository, Depends(get_organization_repository)
    ],
    resolution: Annotated[
        OrganizationContextResolution, Depends(get_organization_context_resolution)
    ],
) -> list[OrganizationMembershipResponse]:
    """List the organizations the caller belongs to.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 503 if the backing store is unavailable
    """
    try:
        memberships = await membership_repository.list_for_subject(subject_id)
        organizations = await organization_repository.list_by_ids(
            [m.organization_id for m in memberships]
        )
    except BackingStoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Organizations are temporarily unavailable",
        ) from e

    by_id = {organization.id: organization for organization in organizations}
    current = resolution.context.organization_id if resolution.context else None
    return [
        OrganizationMembershipResponse.from_domain(
            membership, by_id.get(membership.organization_id), current
        )
        for membership in memberships
    ]


@router.put("/current")
async def select_current_organization(
    body: SelectOrganizationRequest,
    request: Request,
    subject_id: Annotated[str, Depends(require_subject)],
    service: Annotated[
        OrganizationContextService, Depends(get_organization_context_service)
    ],
) -> OrganizationContextResponse:
    """Make an organization the caller's sticky acting organization.

    The choice is stored in the cookie session and used whenever the
    organization selector header is absent.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 403 if the caller is not a member
        HTTPException: 503 if the backing store is unavailable
    """
    try:
        context = await service.select(subject_id, body.organization_id)
    except NotAnOrganizationMemberError as e:
        raise to_http_exception(e) from e
    except BackingStoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Organization membership could not be verified",
        ) from e

    request.session[SESSION_ORGANIZATION_KEY] = context.organization_id
    return OrganizationContextResponse.from_domain(context)
