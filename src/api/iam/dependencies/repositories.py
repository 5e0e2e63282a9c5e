"""Repository FastAPI dependencies for IAM bounded context.

All repositories in a request share the per-request read session.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.infrastructure.membership_repository import MembershipRepository
from iam.infrastructure.organization_repository import OrganizationRepository
from iam.infrastructure.resource_repository import (
    CollaborationGrantRepository,
    ResourceRepository,
)
from iam.ports.repositories import (
    ICollaborationGrantRepository,
    IMembershipRepository,
    IOrganizationRepository,
    IResourceRepository,
)
from infrastructure.database.dependencies import get_read_session


def get_membership_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> IMembershipRepository:
    """Get MembershipRepository instance."""
    return MembershipRepository(session=session)


def get_organization_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> IOrganizationRepository:
    """Get OrganizationRepository instance."""
    return OrganizationRepository(session=session)


def get_resource_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> IResourceRepository:
    """Get ResourceRepository instance."""
    return ResourceRepository(session=session)


def get_collaboration_grant_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> ICollaborationGrantRepository:
    """Get CollaborationGrantRepository instance."""
    return CollaborationGrantRepository(session=session)
