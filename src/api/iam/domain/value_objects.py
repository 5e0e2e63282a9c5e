"""Value objects for the IAM bounded context.

Value objects are immutable and defined by their attributes. Identifiers
are opaque strings issued by the hosted backing store or the identity
provider, so they are carried as plain ``str`` values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from shared_kernel.authorization.roles import GrantRole, MembershipRole


class ResourceKind(StrEnum):
    """Kinds of subject-owned resources subject to instance-level access."""

    PROJECT = "project"
    SITE = "site"
    LISTING = "listing"
    FILE = "file"


@dataclass(frozen=True)
class ResourceRef:
    """Reference to a single resource instance."""

    kind: ResourceKind
    id: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"


@dataclass(frozen=True)
class Organization:
    """A tenant: the top-level isolation boundary for shared data.

    Attributes:
        id: Organization identifier
        name: Display name
        slug: Unique URL-safe name
        owner_subject_id: Subject that created the organization
        plan: Billing plan (free, pro, ...)
    """

    id: str
    name: str
    slug: str
    owner_subject_id: str | None = None
    plan: str = "free"


@dataclass(frozen=True)
class Membership:
    """A subject's membership in an organization.

    At most one membership exists per (organization, subject) pair.
    """

    id: str
    organization_id: str
    subject_id: str
    role: MembershipRole
    created_at: datetime | None = None


@dataclass(frozen=True)
class Resource:
    """A resource instance with its ownership and tenant scoping.

    Attributes:
        ref: Kind and identifier of the resource
        owner_subject_id: Owning subject, if the record names one
        organization_id: Organization the resource is scoped to, if any
        title: Human-readable name, when the kind carries one
    """

    ref: ResourceRef
    owner_subject_id: str | None = None
    organization_id: str | None = None
    title: str | None = None

    def is_owned_by(self, subject_id: str) -> bool:
        """Check whether the subject owns this resource."""
        return self.owner_subject_id is not None and self.owner_subject_id == subject_id


@dataclass(frozen=True)
class CollaborationGrant:
    """A direct grant of a role on one resource to one subject."""

    resource: ResourceRef
    subject_id: str
    role: GrantRole
