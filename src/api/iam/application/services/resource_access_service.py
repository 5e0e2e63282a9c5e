"""Resource access application service for IAM bounded context.

Instance-level gate for subject-owned resources. Access is granted, in
order, to the owner, to collaborators whose grant meets the requested
role, and to members of the resource's organization. Any lookup failure
denies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from iam.application.observability import (
    DefaultResourceAccessProbe,
    ResourceAccessProbe,
)
from iam.domain.value_objects import ResourceRef
from iam.ports.repositories import (
    ICollaborationGrantRepository,
    IMembershipRepository,
    IResourceRepository,
)
from shared_kernel.authorization.roles import (
    ORGANIZATION_MANAGER_ROLES,
    GrantRole,
    MembershipRole,
    meets_minimum,
)
from shared_kernel.exceptions import BackingStoreUnavailableError


class AccessBasis(StrEnum):
    """What entitled the subject to a resource."""

    OWNER = "owner"
    COLLABORATOR = "collaborator"
    ORGANIZATION_MEMBER = "organization_member"


class AccessDenialReason(StrEnum):
    """Why access to a resource was denied."""

    NOT_FOUND = "not_found"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class ResourceAccessDecision:
    """Outcome of a resource access check.

    Attributes:
        resource: The resource that was checked
        allowed: Whether access is granted
        basis: Entitlement used when allowed
        reason: Denial reason when denied
        role: The grant or membership role behind the decision, if any
    """

    resource: ResourceRef
    allowed: bool
    basis: AccessBasis | None = None
    reason: AccessDenialReason | None = None
    role: GrantRole | MembershipRole | None = None

    @classmethod
    def allow(
        cls,
        resource: ResourceRef,
        basis: AccessBasis,
        role: GrantRole | MembershipRole | None = None,
    ) -> ResourceAccessDecision:
        return cls(resource=resource, allowed=True, basis=basis, role=role)

    @classmethod
    def deny(
        cls, resource: ResourceRef, reason: AccessDenialReason
    ) -> ResourceAccessDecision:
        return cls(resource=resource, allowed=False, reason=reason)


class ResourceAccessService:
    """Application service deciding access to individual resources."""

    def __init__(
        self,
        resource_repository: IResourceRepository,
        grant_repository: ICollaborationGrantRepository,
        membership_repository: IMembershipRepository,
        probe: ResourceAccessProbe | None = None,
    ):
        """Initialize ResourceAccessService with dependencies.

        Args:
            resource_repository: Repository for resource ownership lookups
            grant_repository: Repository for collaboration grants
            membership_repository: Repository for organization memberships
            probe: Optional domain probe for observability
        """
        self._resource_repository = resource_repository
        self._grant_repository = grant_repository
        self._membership_repository = membership_repository
        self._probe = probe or DefaultResourceAccessProbe()

    async def resolve(
        self,
        resource: ResourceRef,
        subject_id: str,
        minimum_role: GrantRole = GrantRole.VIEWER,
    ) -> ResourceAccessDecision:
        """Decide whether ``subject_id`` may act on ``resource``.

        Organization members get viewer-level access; members holding a
        manager role (admin or owner) get access at any level.

        Args:
            resource: The resource being accessed
            subject_id: The acting subject
            minimum_role: Lowest collaboration role the operation needs

        Returns:
            ResourceAccessDecision; never raises for lookup failures.
        """
        try:
            decision = await self._decide(resource, subject_id, minimum_role)
        except BackingStoreUnavailableError as e:
            self._probe.lookup_failed(
                resource=str(resource), subject_id=subject_id, error=e
            )
            decision = ResourceAccessDecision.deny(
                resource, AccessDenialReason.STORE_UNAVAILABLE
            )

        if decision.allowed:
            self._probe.access_allowed(
                resource=str(resource),
                subject_id=subject_id,
                basis=str(decision.basis),
            )
        else:
            self._probe.access_denied(
                resource=str(resource),
                subject_id=subject_id,
                reason=str(decision.reason),
            )
        return decision

    async def _decide(
        self,
        ref: ResourceRef,
        subject_id: str,
        minimum_role: GrantRole,
    ) -> ResourceAccessDecision:
        resource = await self._resource_repository.get(ref)
        if resource is None:
            return ResourceAccessDecision.deny(ref, AccessDenialReason.NOT_FOUND)

        if resource.is_owned_by(subject_id):
            return ResourceAccessDecision.allow(ref, AccessBasis.OWNER)

        grant = await self._grant_repository.get(ref, subject_id)
        if grant is not None and meets_minimum(grant.role, minimum_role):
            return ResourceAccessDecision.allow(
                ref, AccessBasis.COLLABORATOR, role=grant.role
            )

        if resource.organization_id is not None:
            membership = await self._membership_repository.get(
                organization_id=resource.organization_id,
                subject_id=subject_id,
            )
            if membership is not None and (
                minimum_role == GrantRole.VIEWER
                or membership.role in ORGANIZATION_MANAGER_ROLES
            ):
                return ResourceAccessDecision.allow(
                    ref, AccessBasis.ORGANIZATION_MEMBER, role=membership.role
                )

        return ResourceAccessDecision.deny(
            ref, AccessDenialReason.INSUFFICIENT_PERMISSIONS
        )
