"""PostgreSQL implementations of IResourceRepository and ICollaborationGrantRepository.

Each resource kind lives in its own table with its own owner column(s);
see ``resource_tables`` for the per-kind layout. Collaboration grants exist
for projects only; other kinds never carry grants.
"""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.value_objects import (
    CollaborationGrant,
    Resource,
    ResourceKind,
    ResourceRef,
)
from iam.infrastructure.models import ProjectCollaboratorModel
from iam.infrastructure.observability import (
    DefaultResourceRepositoryProbe,
    ResourceRepositoryProbe,
)
from iam.infrastructure.resource_tables import RESOURCE_TABLES, ResourceTableSpec
from iam.ports.repositories import (
    ICollaborationGrantRepository,
    IResourceRepository,
)
from infrastructure.database import normalize_uuid, translate_store_errors
from shared_kernel.authorization.roles import GrantRole


def _optional_str(value: object) -> str | None:
    return str(value) if value is not None else None


class ResourceRepository(IResourceRepository):
    """Repository reading resource ownership from the per-kind tables."""

    def __init__(
        self,
        session: AsyncSession,
        probe: ResourceRepositoryProbe | None = None,
        tables: Mapping[ResourceKind, ResourceTableSpec] = RESOURCE_TABLES,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
            tables: Table layout per resource kind
        """
        self._session = session
        self._probe = probe or DefaultResourceRepositoryProbe()
        self._tables = tables

    async def get(self, ref: ResourceRef) -> Resource | None:
        """Fetch a resource with its owner and organization scope.

        The owner is the first non-null owner column of the row.

        Args:
            ref: Kind and identifier of the resource

        Returns:
            The Resource, or None if not found
        """
        resource_id = normalize_uuid(ref.id)
        spec = self._tables.get(ref.kind)
        if resource_id is None or spec is None:
            self._probe.resource_not_found(resource=str(ref))
            return None

        stmt = select(*spec.selected_columns()).where(spec.id_column == resource_id)
        with translate_store_errors(f"resource.get.{ref.kind}"):
            result = await self._session.execute(stmt)
            row = result.mappings().first()

        if row is None:
            self._probe.resource_not_found(resource=str(ref))
            return None

        owner = next(
            (row[name] for name in spec.owner_columns if row[name] is not None),
            None,
        )
        return Resource(
            ref=ref,
            owner_subject_id=_optional_str(owner),
            organization_id=_optional_str(row[spec.organization_column]),
            title=_optional_str(row[spec.title_column]) if spec.title_column else None,
        )


class CollaborationGrantRepository(ICollaborationGrantRepository):
    """Repository reading project collaboration grants from PostgreSQL.

    Stored roles outside the known hierarchy grant nothing.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: ResourceRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultResourceRepositoryProbe()

    async def get(self, ref: ResourceRef, subject_id: str) -> CollaborationGrant | None:
        """Fetch the subject's grant on a project.

        Args:
            ref: The resource the grant applies to
            subject_id: The subject holding the grant

        Returns:
            The CollaborationGrant, or None if the subject holds none
        """
        if ref.kind is not ResourceKind.PROJECT:
            return None

        project_id = normalize_uuid(ref.id)
        user_id = normalize_uuid(subject_id)
        if project_id is None or user_id is None:
            return None

        stmt = select(ProjectCollaboratorModel.role).where(
            ProjectCollaboratorModel.project_id == project_id,
            ProjectCollaboratorModel.user_id == user_id,
        )
        with translate_store_errors("collaboration_grant.get"):
            result = await self._session.execute(stmt)
            role = result.scalar_one_or_none()

        if role is None:
            return None

        try:
            grant_role = GrantRole(role)
        except ValueError:
            self._probe.unknown_grant_role(resource=str(ref), role=str(role))
            return None

        return CollaborationGrant(resource=ref, subject_id=user_id, role=grant_role)
