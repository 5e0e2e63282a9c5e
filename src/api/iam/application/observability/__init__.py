"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.capability_policy_probe import (
    CapabilityPolicyProbe,
    DefaultCapabilityPolicyProbe,
)
from iam.application.observability.resource_access_probe import (
    DefaultResourceAccessProbe,
    ResourceAccessProbe,
)

__all__ = [
    "CapabilityPolicyProbe",
    "DefaultCapabilityPolicyProbe",
    "ResourceAccessProbe",
    "DefaultResourceAccessProbe",
]
