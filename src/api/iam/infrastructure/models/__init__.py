"""SQLAlchemy ORM models for IAM bounded context.

These models map to tables owned by the hosted backend and are used by
repository implementations for read access.
"""

from iam.infrastructure.models.collaborator import ProjectCollaboratorModel
from iam.infrastructure.models.organization import (
    OrganizationMemberModel,
    OrganizationModel,
)

__all__ = [
    "OrganizationMemberModel",
    "OrganizationModel",
    "ProjectCollaboratorModel",
]
