"""Organization context application service for IAM bounded context.

Chooses the organization a request acts under. Resolution never raises:
absence is a normal outcome tagged with the reason, and route guards decide
whether an absent context is acceptable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from iam.domain.value_objects import Membership
from iam.ports.exceptions import NotAnOrganizationMemberError
from iam.ports.repositories import IMembershipRepository
from shared_kernel.exceptions import BackingStoreUnavailableError
from shared_kernel.middleware.observability import (
    DefaultOrganizationContextProbe,
    OrganizationContextProbe,
)
from shared_kernel.middleware.organization_context import OrganizationContext


class ResolutionOutcome(StrEnum):
    """Why an organization context resolution ended the way it did."""

    RESOLVED = "resolved"
    ANONYMOUS = "anonymous"
    NOT_A_MEMBER = "not_a_member"
    NO_MEMBERSHIP = "no_membership"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class OrganizationContextResolution:
    """Tagged result of organization context resolution.

    ``context`` is set exactly when ``outcome`` is RESOLVED.
    """

    outcome: ResolutionOutcome
    context: OrganizationContext | None = None

    @property
    def is_resolved(self) -> bool:
        """Whether an organization context was found."""
        return self.context is not None

    @classmethod
    def resolved(cls, context: OrganizationContext) -> OrganizationContextResolution:
        return cls(outcome=ResolutionOutcome.RESOLVED, context=context)

    @classmethod
    def absent(cls, outcome: ResolutionOutcome) -> OrganizationContextResolution:
        return cls(outcome=outcome)


def _to_context(membership: Membership, source: str) -> OrganizationContext:
    return OrganizationContext(
        organization_id=membership.organization_id,
        role=membership.role,
        membership_id=membership.id,
        source=source,
    )


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class OrganizationContextService:
    """Application service resolving the acting organization of a request.

    Selection order:

    1. The explicit selector (header). A selector naming an organization the
       subject does not belong to yields no context; it never falls back.
    2. The sticky session choice, when its membership still exists.
    3. The subject's earliest-created membership.
    """

    def __init__(
        self,
        membership_repository: IMembershipRepository,
        probe: OrganizationContextProbe | None = None,
    ):
        """Initialize OrganizationContextService with dependencies.

        Args:
            membership_repository: Repository for membership lookups
            probe: Optional domain probe for observability
        """
        self._membership_repository = membership_repository
        self._probe = probe or DefaultOrganizationContextProbe()

    async def resolve(
        self,
        subject_id: str | None,
        requested_organization_id: str | None = None,
        session_organization_id: str | None = None,
    ) -> OrganizationContextResolution:
        """Resolve the organization context for a subject.

        Args:
            subject_id: The resolved subject, or None when anonymous
            requested_organization_id: Value of the explicit selector header
            session_organization_id: Organization stored as the sticky choice

        Returns:
            OrganizationContextResolution; never raises for lookup failures.
        """
        if subject_id is None:
            return OrganizationContextResolution.absent(ResolutionOutcome.ANONYMOUS)

        requested_organization_id = _clean(requested_organization_id)
        session_organization_id = _clean(session_organization_id)

        try:
            if requested_organization_id is not None:
                membership = await self._membership_repository.get(
                    organization_id=requested_organization_id,
                    subject_id=subject_id,
                )
                if membership is None:
                    self._probe.selector_not_a_member(
                        organization_id=requested_organization_id,
                        subject_id=subject_id,
                    )
                    return OrganizationContextResolution.absent(
                        ResolutionOutcome.NOT_A_MEMBER
                    )
                return self._resolved(membership, source="header")

            if session_organization_id is not None:
                membership = await self._membership_repository.get(
                    organization_id=session_organization_id,
                    subject_id=subject_id,
                )
                if membership is not None:
                    return self._resolved(membership, source="session")
                self._probe.stale_session_selection(
                    organization_id=session_organization_id,
                    subject_id=subject_id,
                )

            membership = await self._membership_repository.get_default_for_subject(
                subject_id
            )
        except BackingStoreUnavailableError as e:
            self._probe.lookup_failed(subject_id=subject_id, error=e)
            return OrganizationContextResolution.absent(
                ResolutionOutcome.STORE_UNAVAILABLE
            )

        if membership is None:
            self._probe.no_membership(subject_id=subject_id)
            return OrganizationContextResolution.absent(
                ResolutionOutcome.NO_MEMBERSHIP
            )
        return self._resolved(membership, source="default")

    async def select(self, subject_id: str, organization_id: str) -> OrganizationContext:
        """Verify membership before an organization becomes the sticky choice.

        Args:
            subject_id: The subject making the choice
            organization_id: The organization to select

        Returns:
            The OrganizationContext the choice will resolve to

        Raises:
            NotAnOrganizationMemberError: If the subject is not a member
            BackingStoreUnavailableError: If membership cannot be verified
        """
        membership = await self._membership_repository.get(
            organization_id=organization_id,
            subject_id=subject_id,
        )
        if membership is None:
            raise NotAnOrganizationMemberError(organization_id)

        self._probe.organization_selected(
            organization_id=organization_id,
            subject_id=subject_id,
        )
        return _to_context(membership, source="session")

    def _resolved(
        self, membership: Membership, source: str
    ) -> OrganizationContextResolution:
        self._probe.organization_resolved(
            organization_id=membership.organization_id,
            subject_id=membership.subject_id,
            source=source,
        )
        return OrganizationContextResolution.resolved(_to_context(membership, source))
