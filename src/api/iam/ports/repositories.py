"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the read interface onto the hosted backing
store that owns organizations, memberships, resources and collaboration
grants. This service never writes these records.

Implementations raise ``BackingStoreUnavailableError`` when the store
cannot be reached; "not found" is always reported as ``None``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from iam.domain.value_objects import (
    CollaborationGrant,
    Membership,
    Organization,
    Resource,
    ResourceRef,
)


@runtime_checkable
class IMembershipRepository(Protocol):
    """Repository for organization memberships."""

    async def get(self, organization_id: str, subject_id: str) -> Membership | None:
        """Retrieve the subject's membership in one organization.

        Args:
            organization_id: The organization to look in
            subject_id: The subject to look for

        Returns:
            The Membership, or None if the subject is not a member
        """
        ...

    async def get_default_for_subject(self, subject_id: str) -> Membership | None:
        """Retrieve the subject's earliest-created membership.

        Args:
            subject_id: The subject to look for

        Returns:
            The oldest Membership, or None if the subject has none
        """
        ...

    async def list_for_subject(self, subject_id: str) -> list[Membership]:
        """List all memberships of a subject, oldest first.

        Args:
            subject_id: The subject to list memberships for

        Returns:
            List of Membership value objects
        """
        ...


@runtime_checkable
class IOrganizationRepository(Protocol):
    """Repository for organization metadata."""

    async def get_by_id(self, organization_id: str) -> Organization | None:
        """Retrieve an organization by its ID.

        Args:
            organization_id: The unique identifier of the organization

        Returns:
            The Organization, or None if not found
        """
        ...

    async def list_by_ids(self, organization_ids: Sequence[str]) -> list[Organization]:
        """Retrieve several organizations at once.

        Args:
            organization_ids: Identifiers to load; unknown ids are skipped

        Returns:
            List of the Organizations found
        """
        ...


@runtime_checkable
class IResourceRepository(Protocol):
    """Repository for subject-owned resource instances of every kind."""

    async def get(self, ref: ResourceRef) -> Resource | None:
        """Retrieve a resource with its owner and organization scope.

        Args:
            ref: Kind and identifier of the resource

        Returns:
            The Resource, or None if not found
        """
        ...


@runtime_checkable
class ICollaborationGrantRepository(Protocol):
    """Repository for direct per-resource collaboration grants."""

    async def get(self, ref: ResourceRef, subject_id: str) -> CollaborationGrant | None:
        """Retrieve the subject's grant on a resource.

        Args:
            ref: The resource the grant applies to
            subject_id: The subject holding the grant

        Returns:
            The CollaborationGrant, or None if the subject holds none
        """
        ...
