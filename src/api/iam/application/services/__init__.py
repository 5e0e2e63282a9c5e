"""Application services for IAM bounded context.

Application services orchestrate repositories and domain policies to
fulfill use cases. They are the "front door" to the IAM context.
"""

from iam.application.services.capability_policy_service import (
    CapabilityDecision,
    CapabilityPolicyService,
    CapabilityPolicyTable,
    DenialReason,
)
from iam.application.services.organization_context_service import (
    OrganizationContextResolution,
    OrganizationContextService,
    ResolutionOutcome,
)
from iam.application.services.resource_access_service import (
    AccessBasis,
    AccessDenialReason,
    ResourceAccessDecision,
    ResourceAccessService,
)

__all__ = [
    "AccessBasis",
    "AccessDenialReason",
    "CapabilityDecision",
    "CapabilityPolicyService",
    "CapabilityPolicyTable",
    "DenialReason",
    "OrganizationContextResolution",
    "OrganizationContextService",
    "ResolutionOutcome",
    "ResourceAccessDecision",
    "ResourceAccessService",
]
