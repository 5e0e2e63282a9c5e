"""Domain-Oriented Observability for IAM infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from iam.infrastructure.observability.repository_probe import (
    DefaultMembershipRepositoryProbe,
    DefaultResourceRepositoryProbe,
    MembershipRepositoryProbe,
    ResourceRepositoryProbe,
)

__all__ = [
    "MembershipRepositoryProbe",
    "DefaultMembershipRepositoryProbe",
    "ResourceRepositoryProbe",
    "DefaultResourceRepositoryProbe",
]
