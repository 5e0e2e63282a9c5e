"""PostgreSQL implementation of IMembershipRepository.

Reads organization memberships from the hosted backend's
``organization_members`` table.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.value_objects import Membership
from iam.infrastructure.models import OrganizationMemberModel
from iam.infrastructure.observability import (
    DefaultMembershipRepositoryProbe,
    MembershipRepositoryProbe,
)
from iam.ports.repositories import IMembershipRepository
from infrastructure.database import normalize_uuid, translate_store_errors
from shared_kernel.authorization.roles import MembershipRole


class MembershipRepository(IMembershipRepository):
    """Repository reading organization memberships from PostgreSQL.

    Stored roles outside the known hierarchy are treated as viewer, the
    lowest rank, so an unexpected value never widens access.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: MembershipRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultMembershipRepositoryProbe()

    async def get(self, organization_id: str, subject_id: str) -> Membership | None:
        """Fetch one membership by organization and subject.

        Args:
            organization_id: The organization to look in
            subject_id: The subject to look for

        Returns:
            The Membership, or None if the subject is not a member
        """
        organization_id = normalize_uuid(organization_id)
        subject_id = normalize_uuid(subject_id)
        if organization_id is None or subject_id is None:
            return None

        stmt = select(OrganizationMemberModel).where(
            OrganizationMemberModel.organization_id == organization_id,
            OrganizationMemberModel.user_id == subject_id,
        )
        with translate_store_errors("membership.get"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None
        return self._to_membership(model)

    async def get_default_for_subject(self, subject_id: str) -> Membership | None:
        """Fetch the subject's earliest-created membership.

        Args:
            subject_id: The subject to look for

        Returns:
            The oldest Membership, or None if the subject has none
        """
        subject_id = normalize_uuid(subject_id)
        if subject_id is None:
            return None

        stmt = (
            select(OrganizationMemberModel)
            .where(OrganizationMemberModel.user_id == subject_id)
            .order_by(
                OrganizationMemberModel.created_at.asc(),
                OrganizationMemberModel.id.asc(),
            )
            .limit(1)
        )
        with translate_store_errors("membership.get_default"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None
        return self._to_membership(model)

    async def list_for_subject(self, subject_id: str) -> list[Membership]:
        """Fetch all memberships of a subject, oldest first.

        Args:
            subject_id: The subject to list memberships for

        Returns:
            List of Membership value objects
        """
        normalized = normalize_uuid(subject_id)
        if normalized is None:
            return []

        stmt = (
            select(OrganizationMemberModel)
            .where(OrganizationMemberModel.user_id == normalized)
            .order_by(
                OrganizationMemberModel.created_at.asc(),
                OrganizationMemberModel.id.asc(),
            )
        )
        with translate_store_errors("membership.list_for_subject"):
            result = await self._session.execute(stmt)
            models = result.scalars().all()

        memberships = [self._to_membership(model) for model in models]
        self._probe.memberships_listed(subject_id=normalized, count=len(memberships))
        return memberships

    def _to_membership(self, model: OrganizationMemberModel) -> Membership:
        try:
            role = MembershipRole(model.role)
        except ValueError:
            self._probe.unknown_membership_role(
                organization_id=str(model.organization_id), role=str(model.role)
            )
            role = MembershipRole.VIEWER

        return Membership(
            id=str(model.id),
            organization_id=str(model.organization_id),
            subject_id=str(model.user_id),
            role=role,
            created_at=model.created_at,
        )
