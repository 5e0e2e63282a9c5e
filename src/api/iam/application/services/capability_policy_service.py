"""Capability policy application service for IAM bounded context.

Route-level gate: decides whether the caller's realm grants every
capability a route prefix requires. Checks are pure functions of the route,
the realm and the immutable policy table.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from iam.application.observability import (
    CapabilityPolicyProbe,
    DefaultCapabilityPolicyProbe,
)
from iam.domain.policies import DEFAULT_CAPABILITY_POLICIES, CapabilityPolicy
from shared_kernel.authorization.capabilities import (
    REALM_CAPABILITIES,
    Capability,
    Realm,
)


class DenialReason(StrEnum):
    """Why a capability check denied a route."""

    REALM_MISMATCH = "realm_mismatch"
    MISSING_CAPABILITIES = "missing_capabilities"


@dataclass(frozen=True)
class CapabilityDecision:
    """Outcome of a capability check.

    Attributes:
        allowed: Whether the route may proceed
        realm: The realm the caller acts in
        matched_policy: Policy that covered the route, or None when unguarded
        reason: Denial reason, None when allowed
        required: Capabilities the matched policy requires
        available: Capabilities the caller's realm grants
    """

    allowed: bool
    realm: Realm
    matched_policy: CapabilityPolicy | None = None
    reason: DenialReason | None = None
    required: frozenset[Capability] = field(default_factory=frozenset)
    available: frozenset[Capability] = field(default_factory=frozenset)

    @property
    def missing(self) -> frozenset[Capability]:
        """Required capabilities the realm does not grant."""
        return self.required - self.available

    @property
    def message(self) -> str:
        """Human-readable summary for error responses."""
        if self.allowed:
            return "Allowed"
        if self.reason is DenialReason.REALM_MISMATCH and self.matched_policy:
            return f"This endpoint requires {self.matched_policy.required_realm} realm"
        return "Missing required capabilities"


class CapabilityPolicyTable:
    """Immutable lookup table of capability policies.

    Entries are ordered by descending prefix length, ties keeping their
    registration order, so the most specific prefix wins.
    """

    def __init__(self, policies: Iterable[CapabilityPolicy]):
        indexed = list(enumerate(policies))
        indexed.sort(key=lambda item: (-len(item[1].route_prefix), item[0]))
        self._policies: tuple[CapabilityPolicy, ...] = tuple(p for _, p in indexed)

    def match(self, route: str) -> CapabilityPolicy | None:
        """Return the first policy whose prefix starts ``route``."""
        for policy in self._policies:
            if route.startswith(policy.route_prefix):
                return policy
        return None

    def __iter__(self) -> Iterator[CapabilityPolicy]:
        return iter(self._policies)

    def __len__(self) -> int:
        return len(self._policies)


class CapabilityPolicyService:
    """Application service checking routes against the capability policy table."""

    def __init__(
        self,
        table: CapabilityPolicyTable | None = None,
        realm_capabilities: Mapping[Realm, frozenset[Capability]] = REALM_CAPABILITIES,
        probe: CapabilityPolicyProbe | None = None,
    ):
        """Initialize CapabilityPolicyService.

        Args:
            table: Policy table; defaults to the platform's built-in policies
            realm_capabilities: Capabilities granted per realm
            probe: Optional domain probe for observability
        """
        if table is None:
            table = CapabilityPolicyTable(DEFAULT_CAPABILITY_POLICIES)
        self._table = table
        self._realm_capabilities = realm_capabilities
        self._probe = probe or DefaultCapabilityPolicyProbe()

    @property
    def table(self) -> CapabilityPolicyTable:
        return self._table

    def check(self, route: str, realm: Realm) -> CapabilityDecision:
        """Decide whether a caller in ``realm`` may use ``route``.

        Args:
            route: Request path
            realm: The caller's realm

        Returns:
            CapabilityDecision; unguarded routes are allowed.
        """
        available = self._realm_capabilities.get(realm, frozenset())
        policy = self._table.match(route)

        if policy is None:
            self._probe.route_unguarded(route=route)
            return CapabilityDecision(allowed=True, realm=realm, available=available)

        if policy.required_realm is not None and policy.required_realm != realm:
            self._probe.realm_mismatch(
                route=route,
                route_prefix=policy.route_prefix,
                realm=realm,
                required_realm=policy.required_realm,
            )
            return CapabilityDecision(
                allowed=False,
                realm=realm,
                matched_policy=policy,
                reason=DenialReason.REALM_MISMATCH,
                required=policy.required_capabilities,
                available=available,
            )

        if not policy.required_capabilities <= available:
            self._probe.capabilities_missing(
                route=route,
                route_prefix=policy.route_prefix,
                realm=realm,
                missing=policy.required_capabilities - available,
            )
            return CapabilityDecision(
                allowed=False,
                realm=realm,
                matched_policy=policy,
                reason=DenialReason.MISSING_CAPABILITIES,
                required=policy.required_capabilities,
                available=available,
            )

        self._probe.capability_allowed(
            route=route, route_prefix=policy.route_prefix, realm=realm
        )
        return CapabilityDecision(
            allowed=True,
            realm=realm,
            matched_policy=policy,
            required=policy.required_capabilities,
            available=available,
        )
