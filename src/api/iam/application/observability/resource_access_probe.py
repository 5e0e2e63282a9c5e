"""Protocol for resource access observability.

Defines the interface for domain probes that capture instance-level
access decisions on projects, sites, listings and files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResourceAccessProbe(Protocol):
    """Domain probe for resource access decisions."""

    def access_allowed(self, resource: str, subject_id: str, basis: str) -> None:
        """Record that access to a resource was allowed."""
        ...

    def access_denied(self, resource: str, subject_id: str, reason: str) -> None:
        """Record that access to a resource was denied."""
        ...

    def lookup_failed(self, resource: str, subject_id: str, error: Exception) -> None:
        """Record that a lookup failed while deciding access."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceAccessProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceAccessProbe:
    """Default implementation of ResourceAccessProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultResourceAccessProbe:
        """Create a new probe with observation context bound."""
        return DefaultResourceAccessProbe(logger=self._logger, context=context)

    def access_allowed(self, resource: str, subject_id: str, basis: str) -> None:
        """Record that access to a resource was allowed."""
        self._logger.debug(
            "resource_access_allowed",
            resource=resource,
            subject_id=subject_id,
            basis=basis,
            **self._get_context_kwargs(),
        )

    def access_denied(self, resource: str, subject_id: str, reason: str) -> None:
        """Record that access to a resource was denied."""
        self._logger.info(
            "resource_access_denied",
            resource=resource,
            subject_id=subject_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def lookup_failed(self, resource: str, subject_id: str, error: Exception) -> None:
        """Record that a lookup failed while deciding access."""
        self._logger.error(
            "resource_access_lookup_failed",
            resource=resource,
            subject_id=subject_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
