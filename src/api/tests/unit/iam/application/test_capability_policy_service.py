"""Unit tests for the capability policy table and service."""

from unittest.mock import MagicMock

import pytest

from iam.application.observability import CapabilityPolicyProbe
from iam.application.services import (
    CapabilityPolicyService,
    CapabilityPolicyTable,
    DenialReason,
)
from iam.domain.policies import DEFAULT_CAPABILITY_POLICIES, CapabilityPolicy
from shared_kernel.authorization.capabilities import (
    REALM_CAPABILITIES,
    Capability,
    Realm,
)


@pytest.fixture
def mock_probe():
    return MagicMock(spec=CapabilityPolicyProbe)


@pytest.fixture
def service(mock_probe):
    return CapabilityPolicyService(probe=mock_probe)


class TestCapabilityPolicy:
    """Tests for policy construction."""

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError):
            CapabilityPolicy(route_prefix="")


class TestCapabilityPolicyTable:
    """Longest prefix wins; ties keep registration order."""

    def test_longest_prefix_wins(self):
        broad = CapabilityPolicy(route_prefix="/api/hub")
        narrow = CapabilityPolicy(route_prefix="/api/hub/projects")
        table = CapabilityPolicyTable([broad, narrow])

        assert table.match("/api/hub/projects/1") is narrow
        assert table.match("/api/hub/other") is broad

    def test_equal_length_keeps_registration_order(self):
        first = CapabilityPolicy(
            route_prefix="/api/x",
            required_capabilities=frozenset({Capability.SOCIAL}),
        )
        second = CapabilityPolicy(
            route_prefix="/api/x",
            required_capabilities=frozenset({Capability.COMMERCE}),
        )
        table = CapabilityPolicyTable([first, second])

        assert table.match("/api/x/1") is first

    def test_plain_string_prefix(self):
        table = CapabilityPolicyTable([CapabilityPolicy(route_prefix="/api/os/link")])

        assert table.match("/api/os/linked-accounts") is not None

    def test_no_match(self):
        table = CapabilityPolicyTable(DEFAULT_CAPABILITY_POLICIES)

        assert table.match("/health") is None

    def test_default_table_size(self):
        assert len(CapabilityPolicyTable(DEFAULT_CAPABILITY_POLICIES)) == 10


class TestCheck:
    """Tests for CapabilityPolicyService.check."""

    def test_unguarded_route_allowed(self, service, mock_probe):
        decision = service.check("/iam/session", Realm.FOUNDATION)

        assert decision.allowed
        assert decision.matched_policy is None
        mock_probe.route_unguarded.assert_called_once_with(route="/iam/session")

    def test_foundation_denied_corporation_route(self, service):
        decision = service.check("/api/hub/messaging/threads", Realm.FOUNDATION)

        assert not decision.allowed
        assert decision.reason is DenialReason.REALM_MISMATCH
        assert decision.message == "This endpoint requires corporation realm"
        assert decision.required == {Capability.SOCIAL, Capability.MESSAGING}
        assert decision.available == REALM_CAPABILITIES[Realm.FOUNDATION]

    def test_corporation_allowed_corporation_route(self, service, mock_probe):
        decision = service.check("/api/hub/marketplace", Realm.CORPORATION)

        assert decision.allowed
        assert decision.matched_policy.route_prefix == "/api/hub/marketplace"
        mock_probe.capability_allowed.assert_called_once()

    def test_any_realm_route_allowed_for_foundation(self, service):
        decision = service.check("/api/os/entitlements/verify", Realm.FOUNDATION)

        assert decision.allowed

    def test_missing_capabilities(self, mock_probe):
        service = CapabilityPolicyService(
            realm_capabilities={Realm.FOUNDATION: frozenset()},
            probe=mock_probe,
        )

        decision = service.check("/api/os/link", Realm.FOUNDATION)

        assert not decision.allowed
        assert decision.reason is DenialReason.MISSING_CAPABILITIES
        assert decision.missing == {Capability.IDENTITY_LINKING}
        assert decision.message == "Missing required capabilities"
        mock_probe.capabilities_missing.assert_called_once()

    def test_empty_table_allows_every_route(self, mock_probe):
        service = CapabilityPolicyService(
            table=CapabilityPolicyTable([]), probe=mock_probe
        )

        assert len(service.table) == 0
        for route in ("/api/hub/marketplace", "/api/os/entities", "/anything"):
            decision = service.check(route, Realm.FOUNDATION)
            assert decision.allowed
            assert decision.matched_policy is None

    def test_checks_are_deterministic(self, service):
        first = service.check("/api/hub/projects/7", Realm.CORPORATION)
        second = service.check("/api/hub/projects/7", Realm.CORPORATION)

        assert first == second
