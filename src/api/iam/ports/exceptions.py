"""Domain exceptions for IAM bounded context.

These exceptions represent access-control failures raised by the
decision layer. Route dependencies translate them into HTTP responses;
resolution-layer lookups report absence instead of raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared_kernel.authorization.roles import MembershipRole

if TYPE_CHECKING:
    from iam.application.services.capability_policy_service import (
        CapabilityDecision,
    )
    from iam.application.services.organization_context_service import (
        ResolutionOutcome,
    )
    from iam.application.services.resource_access_service import (
        ResourceAccessDecision,
    )


class AuthenticationAbsentError(Exception):
    """Raised when an operation requires an identity and none was resolved.

    Surfaces as HTTP 401.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class OrganizationContextAbsentError(Exception):
    """Raised when an operation requires an acting organization and none resolved.

    Surfaces as HTTP 400. The outcome records why resolution came up empty.
    """

    def __init__(self, outcome: ResolutionOutcome) -> None:
        self.outcome = outcome
        super().__init__("Organization context required")


class InsufficientOrganizationRoleError(Exception):
    """Raised when the subject's membership role is below the required minimum.

    Surfaces as HTTP 403.
    """

    def __init__(self, role: MembershipRole, minimum: MembershipRole) -> None:
        self.role = role
        self.minimum = minimum
        super().__init__(f"Requires {minimum} role or higher")


class NotAnOrganizationMemberError(Exception):
    """Raised when selecting an organization the subject does not belong to.

    Surfaces as HTTP 403.
    """

    def __init__(self, organization_id: str) -> None:
        self.organization_id = organization_id
        super().__init__("You are not a member of this organization")


class CapabilityDeniedError(Exception):
    """Raised when the caller's realm does not satisfy a route's policy.

    Surfaces as HTTP 403; the response body carries the reason together
    with the required and available capabilities.
    """

    def __init__(self, decision: CapabilityDecision) -> None:
        self.decision = decision
        super().__init__(decision.message)


class ResourceAccessDeniedError(Exception):
    """Raised when the subject may not act on a resource instance.

    Surfaces as HTTP 403 with a body that is identical whether the resource
    is missing or merely inaccessible.
    """

    def __init__(self, decision: ResourceAccessDecision) -> None:
        self.decision = decision
        super().__init__("Insufficient permissions")
