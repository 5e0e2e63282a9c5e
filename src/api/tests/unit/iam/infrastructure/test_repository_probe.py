"""Unit tests for IAM repository domain probes."""

from unittest.mock import Mock

from iam.infrastructure.observability import (
    DefaultMembershipRepositoryProbe,
    DefaultResourceRepositoryProbe,
)


class TestDefaultMembershipRepositoryProbe:
    """Tests for DefaultMembershipRepositoryProbe."""

    def test_creates_with_default_logger(self):
        probe = DefaultMembershipRepositoryProbe()
        assert probe._logger is not None

    def test_memberships_listed(self):
        mock_logger = Mock()
        probe = DefaultMembershipRepositoryProbe(logger=mock_logger)

        probe.memberships_listed(subject_id="u-1", count=3)

        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "memberships_listed"
        assert call_args[1]["subject_id"] == "u-1"
        assert call_args[1]["count"] == 3

    def test_unknown_role_is_a_warning(self):
        mock_logger = Mock()
        probe = DefaultMembershipRepositoryProbe(logger=mock_logger)

        probe.unknown_membership_role(organization_id="org-1", role="superuser")

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[1]["role"] == "superuser"

    def test_with_context_preserves_logger(self):
        custom_logger = Mock()
        mock_context = Mock()
        probe = DefaultMembershipRepositoryProbe(logger=custom_logger)

        new_probe = probe.with_context(mock_context)

        assert new_probe._logger is custom_logger
        assert new_probe._context is mock_context

    def test_context_included_in_log_calls(self):
        mock_logger = Mock()
        mock_context = Mock()
        mock_context.as_dict.return_value = {"request_id": "req-123"}
        probe = DefaultMembershipRepositoryProbe(logger=mock_logger, context=mock_context)

        probe.memberships_listed(subject_id="u-1", count=0)

        assert mock_logger.debug.call_args[1]["request_id"] == "req-123"


class TestDefaultResourceRepositoryProbe:
    """Tests for DefaultResourceRepositoryProbe."""

    def test_resource_not_found(self):
        mock_logger = Mock()
        probe = DefaultResourceRepositoryProbe(logger=mock_logger)

        probe.resource_not_found(resource="project:p-1")

        mock_logger.debug.assert_called_once_with(
            "resource_not_found", resource="project:p-1"
        )

    def test_unknown_grant_role(self):
        mock_logger = Mock()
        probe = DefaultResourceRepositoryProbe(logger=mock_logger)

        probe.unknown_grant_role(resource="project:p-1", role="janitor")

        mock_logger.warning.assert_called_once_with(
            "collaboration_grant_role_unknown", resource="project:p-1", role="janitor"
        )
