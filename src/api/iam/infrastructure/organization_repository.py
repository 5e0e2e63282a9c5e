"""PostgreSQL implementation of IOrganizationRepository."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.value_objects import Organization
from iam.infrastructure.models import OrganizationModel
from iam.ports.repositories import IOrganizationRepository
from infrastructure.database import normalize_uuid, translate_store_errors


def _to_organization(model: OrganizationModel) -> Organization:
    return Organization(
        id=str(model.id),
        name=model.name,
        slug=model.slug,
        owner_subject_id=str(model.owner_user_id) if model.owner_user_id else None,
        plan=model.plan or "free",
    )


class OrganizationRepository(IOrganizationRepository):
    """Repository reading organization metadata from PostgreSQL."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
        """
        self._session = session

    async def get_by_id(self, organization_id: str) -> Organization | None:
        """Fetch an organization by its ID.

        Args:
            organization_id: The unique identifier of the organization

        Returns:
            The Organization, or None if not found
        """
        normalized = normalize_uuid(organization_id)
        if normalized is None:
            return None

        stmt = select(OrganizationModel).where(OrganizationModel.id == normalized)
        with translate_store_errors("organization.get_by_id"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        return _to_organization(model) if model else None

    async def list_by_ids(self, organization_ids: Sequence[str]) -> list[Organization]:
        """Fetch several organizations at once.

        Args:
            organization_ids: Identifiers to load; unknown ids are skipped

        Returns:
            List of the Organizations found, ordered by name
        """
        normalized = [
            value
            for value in (normalize_uuid(raw) for raw in organization_ids)
            if value is not None
        ]
        if not normalized:
            return []

        stmt = (
            select(OrganizationModel)
            .where(OrganizationModel.id.in_(normalized))
            .order_by(OrganizationModel.name)
        )
        with translate_store_errors("organization.list_by_ids"):
            result = await self._session.execute(stmt)
            models = result.scalars().all()

        return [_to_organization(model) for model in models]
