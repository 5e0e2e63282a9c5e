"""Role hierarchies for tenant memberships and collaboration grants.

Two independent orderings exist and must never be compared with each other:

* ``MembershipRole`` ranks a subject's role inside an organization.
* ``GrantRole`` ranks a subject's direct role on a single resource.

Both enums are ``StrEnum`` so ``MembershipRole.ADMIN == GrantRole.ADMIN`` is
true as plain strings; ``meets_minimum`` therefore checks the enum types
before comparing ranks.
"""

from __future__ import annotations

from enum import StrEnum


class MembershipRole(StrEnum):
    """Role of a subject within an organization."""

    VIEWER = "viewer"
    MEMBER = "member"
    ADMIN = "admin"
    OWNER = "owner"


class GrantRole(StrEnum):
    """Role of a subject on one resource via a collaboration grant."""

    VIEWER = "viewer"
    CONTRIBUTOR = "contributor"
    ADMIN = "admin"
    OWNER = "owner"


_MEMBERSHIP_RANKS: dict[MembershipRole, int] = {
    MembershipRole.VIEWER: 0,
    MembershipRole.MEMBER: 1,
    MembershipRole.ADMIN: 2,
    MembershipRole.OWNER: 3,
}

_GRANT_RANKS: dict[GrantRole, int] = {
    GrantRole.VIEWER: 0,
    GrantRole.CONTRIBUTOR: 1,
    GrantRole.ADMIN: 2,
    GrantRole.OWNER: 3,
}

# Membership roles that may act on any organization resource above viewer level.
ORGANIZATION_MANAGER_ROLES: frozenset[MembershipRole] = frozenset(
    {MembershipRole.ADMIN, MembershipRole.OWNER}
)


def membership_rank(role: MembershipRole) -> int:
    """Rank a membership role (viewer=0 ... owner=3)."""
    return _MEMBERSHIP_RANKS[role]


def grant_rank(role: GrantRole) -> int:
    """Rank a collaboration grant role (viewer=0 ... owner=3)."""
    return _GRANT_RANKS[role]


def meets_minimum(
    role: MembershipRole | GrantRole,
    minimum: MembershipRole | GrantRole,
) -> bool:
    """Check that ``role`` is at least ``minimum`` within one ordering.

    Args:
        role: The role held.
        minimum: The lowest acceptable role, of the same enum type.

    Returns:
        True if the held role ranks at or above the minimum.

    Raises:
        TypeError: If the roles belong to different orderings.
    """
    if isinstance(role, MembershipRole) and isinstance(minimum, MembershipRole):
        return membership_rank(role) >= membership_rank(minimum)
    if isinstance(role, GrantRole) and isinstance(minimum, GrantRole):
        return grant_rank(role) >= grant_rank(minimum)
    raise TypeError(
        f"Cannot compare {type(role).__name__} with {type(minimum).__name__}"
    )
