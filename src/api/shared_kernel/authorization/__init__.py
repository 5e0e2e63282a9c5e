"""Authorization primitives shared across bounded contexts.

Role hierarchies for memberships and collaboration grants, and the realm
and capability vocabulary consulted by the capability policy engine.
"""

from shared_kernel.authorization.capabilities import (
    REALM_CAPABILITIES,
    Capability,
    Realm,
    parse_realm,
)
from shared_kernel.authorization.roles import (
    ORGANIZATION_MANAGER_ROLES,
    GrantRole,
    MembershipRole,
    grant_rank,
    meets_minimum,
    membership_rank,
)

__all__ = [
    "Capability",
    "GrantRole",
    "MembershipRole",
    "ORGANIZATION_MANAGER_ROLES",
    "REALM_CAPABILITIES",
    "Realm",
    "grant_rank",
    "meets_minimum",
    "membership_rank",
    "parse_realm",
]
