"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories without specifying
implementation details. This allows for dependency inversion and makes
the application layer independent of infrastructure.
"""

from iam.ports.exceptions import (
    AuthenticationAbsentError,
    CapabilityDeniedError,
    InsufficientOrganizationRoleError,
    NotAnOrganizationMemberError,
    OrganizationContextAbsentError,
    ResourceAccessDeniedError,
)
from iam.ports.repositories import (
    ICollaborationGrantRepository,
    IMembershipRepository,
    IOrganizationRepository,
    IResourceRepository,
)

__all__ = [
    "AuthenticationAbsentError",
    "CapabilityDeniedError",
    "ICollaborationGrantRepository",
    "IMembershipRepository",
    "IOrganizationRepository",
    "IResourceRepository",
    "InsufficientOrganizationRoleError",
    "NotAnOrganizationMemberError",
    "OrganizationContextAbsentError",
    "ResourceAccessDeniedError",
]
