"""Organization context value object for the resolved acting tenant.

This module contains the pure value object that represents a resolved
organization context. It is framework-agnostic and contains no business
logic, making it safe for the shared kernel.

The actual resolution logic (header and session selection, membership
verification) lives in the IAM bounded context's application layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.authorization.roles import MembershipRole


@dataclass(frozen=True)
class OrganizationContext:
    """Resolved organization context for the current request.

    This is a shared kernel value object used across bounded contexts
    to carry the acting tenant and the subject's role within it.

    Attributes:
        organization_id: The organization the request acts under.
        role: The subject's membership role in that organization.
        membership_id: Identifier of the backing membership record.
        source: How the organization was selected - 'header' if from the
            explicit selector header, 'session' if from the sticky session
            choice, 'default' if it is the subject's earliest membership.
    """

    organization_id: str
    role: MembershipRole
    membership_id: str
    source: str
