"""Protocol for hub broadcaster observability."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class BroadcasterProbe(Protocol):
    """Domain probe for the periodic hub broadcaster."""

    def broadcaster_started(
        self, metrics_interval_seconds: float, alert_poll_interval_seconds: float
    ) -> None:
        """Record that the broadcaster loops started."""
        ...

    def broadcaster_stopped(self) -> None:
        """Record that the broadcaster loops stopped."""
        ...

    def metrics_broadcast(self, delivered: int) -> None:
        """Record that a metrics snapshot went out."""
        ...

    def new_alerts_broadcast(self, count: int, watermark: datetime) -> None:
        """Record that new alerts went to the admin room."""
        ...

    def tick_failed(self, task: str, error: Exception) -> None:
        """Record that one broadcaster tick failed and was skipped."""
        ...

    def with_context(self, context: ObservationContext) -> BroadcasterProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultBroadcasterProbe:
    """Default implementation of BroadcasterProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultBroadcasterProbe:
        """Create a new probe with observation context bound."""
        return DefaultBroadcasterProbe(logger=self._logger, context=context)

    def broadcaster_started(
        self, metrics_interval_seconds: float, alert_poll_interval_seconds: float
    ) -> None:
        """Record that the broadcaster loops started."""
        self._logger.info(
            "hub_broadcaster_started",
            metrics_interval_seconds=metrics_interval_seconds,
            alert_poll_interval_seconds=alert_poll_interval_seconds,
            **self._get_context_kwargs(),
        )

    def broadcaster_stopped(self) -> None:
        """Record that the broadcaster loops stopped."""
        self._logger.info("hub_broadcaster_stopped", **self._get_context_kwargs())

    def metrics_broadcast(self, delivered: int) -> None:
        """Record that a metrics snapshot went out."""
        self._logger.debug(
            "hub_metrics_broadcast",
            delivered=delivered,
            **self._get_context_kwargs(),
        )

    def new_alerts_broadcast(self, count: int, watermark: datetime) -> None:
        """Record that new alerts went to the admin room."""
        self._logger.info(
            "hub_new_alerts_broadcast",
            count=count,
            watermark=watermark.isoformat(),
            **self._get_context_kwargs(),
        )

    def tick_failed(self, task: str, error: Exception) -> None:
        """Record that one broadcaster tick failed and was skipped."""
        self._logger.error(
            "hub_broadcaster_tick_failed",
            task=task,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
