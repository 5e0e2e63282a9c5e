"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import structlog

from infrastructure.observability import DefaultStartupProbe, ObservationContext
from infrastructure.observability.probes import DefaultConnectionProbe
from realtime.application.observability import (
    DefaultBroadcasterProbe,
    DefaultEventHubProbe,
)


def _logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_engine_created_logs_info(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created(target="db:5432/postgres", pool_size=10, read_only=True)

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            target="db:5432/postgres",
            pool_size=10,
            read_only=True,
        )

    def test_pool_closed_logs_info(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.pool_closed()

        mock_logger.info.assert_called_once_with("connection_pool_closed")


class TestStartupProbe:
    def test_application_started(self):
        mock_logger = _logger()
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.application_started(version="0.1.0", broadcaster_enabled=True)

        mock_logger.info.assert_called_once_with(
            "application_started",
            version="0.1.0",
            broadcaster_enabled=True,
        )


class TestEventHubProbe:
    def test_message_dropped_is_a_warning(self):
        mock_logger = _logger()
        probe = DefaultEventHubProbe(logger=mock_logger)

        probe.message_dropped(connection_id="c-1", event="metrics")

        mock_logger.warning.assert_called_once_with(
            "hub_message_dropped",
            connection_id="c-1",
            hub_event="metrics",
        )

    def test_store_unavailable_includes_error_type(self):
        mock_logger = _logger()
        probe = DefaultEventHubProbe(logger=mock_logger)

        probe.store_unavailable(operation="alerts_snapshot", error=ConnectionError("down"))

        kwargs = mock_logger.error.call_args.kwargs
        assert kwargs["operation"] == "alerts_snapshot"
        assert kwargs["error"] == "down"
        assert kwargs["error_type"] == "ConnectionError"


class TestBroadcasterProbe:
    def test_new_alerts_watermark_rendered_iso(self):
        mock_logger = _logger()
        probe = DefaultBroadcasterProbe(logger=mock_logger)
        watermark = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

        probe.new_alerts_broadcast(count=2, watermark=watermark)

        mock_logger.info.assert_called_once_with(
            "hub_new_alerts_broadcast",
            count=2,
            watermark="2025-06-01T12:00:00+00:00",
        )


class TestObservationContext:
    def test_as_dict_omits_unset_fields(self):
        context = ObservationContext(request_id="req-1")

        assert context.as_dict() == {"request_id": "req-1"}

    def test_with_organization_and_extra(self):
        context = (
            ObservationContext(subject_id="u-1")
            .with_organization("org-1")
            .with_extra(route="/api/hub/projects")
        )

        assert context.as_dict() == {
            "subject_id": "u-1",
            "organization_id": "org-1",
            "route": "/api/hub/projects",
        }

    def test_probe_includes_bound_context(self):
        mock_logger = _logger()
        context = ObservationContext(request_id="req-9")
        probe = DefaultEventHubProbe(logger=mock_logger).with_context(context)

        probe.connection_closed(connection_id="c-9", discarded=0)

        mock_logger.info.assert_called_once_with(
            "hub_connection_closed",
            connection_id="c-9",
            discarded=0,
            request_id="req-9",
        )
