"""Protocol for event hub observability.

Defines the interface for domain probes that capture connection lifecycle,
command handling and delivery events of the real-time hub.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EventHubProbe(Protocol):
    """Domain probe for event hub operations."""

    def connection_opened(self, connection_id: str, subject_id: str | None) -> None:
        """Record that a client connected."""
        ...

    def connection_authenticated(
        self, connection_id: str, subject_id: str, is_admin: bool
    ) -> None:
        """Record that a connection was bound to a subject."""
        ...

    def auth_rejected(self, connection_id: str, reason: str) -> None:
        """Record that an auth command was refused."""
        ...

    def connection_closed(self, connection_id: str, discarded: int) -> None:
        """Record that a client disconnected."""
        ...

    def command_rejected(self, connection_id: str, command: str, reason: str) -> None:
        """Record that a client command was refused."""
        ...

    def message_dropped(self, connection_id: str, event: str) -> None:
        """Record that a message was dropped for a connection with a full queue."""
        ...

    def alert_resolved(self, alert_id: str, connection_id: str, changed: bool) -> None:
        """Record that a connection resolved an alert."""
        ...

    def event_published(self, event: str, room: str, delivered: int) -> None:
        """Record that an event was multicast to a room."""
        ...

    def store_unavailable(self, operation: str, error: Exception) -> None:
        """Record that the backing store failed during hub work."""
        ...

    def with_context(self, context: ObservationContext) -> EventHubProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEventHubProbe:
    """Default implementation of EventHubProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultEventHubProbe:
        """Create a new probe with observation context bound."""
        return DefaultEventHubProbe(logger=self._logger, context=context)

    def connection_opened(self, connection_id: str, subject_id: str | None) -> None:
        """Record that a client connected."""
        self._logger.info(
            "hub_connection_opened",
            connection_id=connection_id,
            subject_id=subject_id,
            **self._get_context_kwargs(),
        )

    def connection_authenticated(
        self, connection_id: str, subject_id: str, is_admin: bool
    ) -> None:
        """Record that a connection was bound to a subject."""
        self._logger.info(
            "hub_connection_authenticated",
            connection_id=connection_id,
            subject_id=subject_id,
            is_admin=is_admin,
            **self._get_context_kwargs(),
        )

    def auth_rejected(self, connection_id: str, reason: str) -> None:
        """Record that an auth command was refused."""
        self._logger.warning(
            "hub_auth_rejected",
            connection_id=connection_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def connection_closed(self, connection_id: str, discarded: int) -> None:
        """Record that a client disconnected."""
        self._logger.info(
            "hub_connection_closed",
            connection_id=connection_id,
            discarded=discarded,
            **self._get_context_kwargs(),
        )

    def command_rejected(self, connection_id: str, command: str, reason: str) -> None:
        """Record that a client command was refused."""
        self._logger.info(
            "hub_command_rejected",
            connection_id=connection_id,
            command=command,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def message_dropped(self, connection_id: str, event: str) -> None:
        """Record that a message was dropped for a connection with a full queue."""
        self._logger.warning(
            "hub_message_dropped",
            connection_id=connection_id,
            hub_event=event,
            **self._get_context_kwargs(),
        )

    def alert_resolved(self, alert_id: str, connection_id: str, changed: bool) -> None:
        """Record that a connection resolved an alert."""
        self._logger.info(
            "hub_alert_resolved",
            alert_id=alert_id,
            connection_id=connection_id,
            changed=changed,
            **self._get_context_kwargs(),
        )

    def event_published(self, event: str, room: str, delivered: int) -> None:
        """Record that an event was multicast to a room."""
        self._logger.debug(
            "hub_event_published",
            hub_event=event,
            room=room,
            delivered=delivered,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, operation: str, error: Exception) -> None:
        """Record that the backing store failed during hub work."""
        self._logger.error(
            "hub_store_unavailable",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
