"""Capability policies guarding route prefixes.

A policy states which realm and which capabilities a caller must hold to
use every route under a prefix. Routes not covered by any policy are open.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shared_kernel.authorization.capabilities import Capability, Realm


@dataclass(frozen=True)
class CapabilityPolicy:
    """Requirements for routes under ``route_prefix``.

    Attributes:
        route_prefix: Path prefix the policy applies to (plain string prefix)
        required_capabilities: Capabilities the caller's realm must grant
        required_realm: Realm the caller must act in, or None for any realm
    """

    route_prefix: str
    required_capabilities: frozenset[Capability] = field(default_factory=frozenset)
    required_realm: Realm | None = None

    def __post_init__(self) -> None:
        if not self.route_prefix:
            raise ValueError("route_prefix must not be empty")


DEFAULT_CAPABILITY_POLICIES: tuple[CapabilityPolicy, ...] = (
    CapabilityPolicy(
        route_prefix="/api/hub/messaging",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset({Capability.SOCIAL, Capability.MESSAGING}),
    ),
    CapabilityPolicy(
        route_prefix="/api/hub/marketplace",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset(
            {Capability.COMMERCE, Capability.MARKETPLACE}
        ),
    ),
    CapabilityPolicy(
        route_prefix="/api/hub/projects",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset({Capability.SOCIAL}),
    ),
    CapabilityPolicy(
        route_prefix="/api/hub/analytics",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset({Capability.ANALYTICS}),
    ),
    CapabilityPolicy(
        route_prefix="/api/hub/file-manager",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset({Capability.FILE_STORAGE}),
    ),
    CapabilityPolicy(
        route_prefix="/api/hub/code-gallery",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset({Capability.SOCIAL}),
    ),
    CapabilityPolicy(
        route_prefix="/api/hub/notifications",
        required_realm=Realm.CORPORATION,
        required_capabilities=frozenset({Capability.SOCIAL}),
    ),
    CapabilityPolicy(
        route_prefix="/api/os/entitlements/issue",
        required_capabilities=frozenset({Capability.CREDENTIAL_VERIFICATION}),
    ),
    CapabilityPolicy(
        route_prefix="/api/os/entitlements/verify",
        required_capabilities=frozenset({Capability.CREDENTIAL_VERIFICATION}),
    ),
    CapabilityPolicy(
        route_prefix="/api/os/link",
        required_capabilities=frozenset({Capability.IDENTITY_LINKING}),
    ),
)
