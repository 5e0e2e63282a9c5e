"""Protocol for capability policy observability.

Defines the interface for domain probes that capture route-level
capability decisions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CapabilityPolicyProbe(Protocol):
    """Domain probe for capability policy checks."""

    def route_unguarded(self, route: str) -> None:
        """Record that no policy covers a route."""
        ...

    def capability_allowed(self, route: str, route_prefix: str, realm: str) -> None:
        """Record that a guarded route was allowed."""
        ...

    def realm_mismatch(
        self, route: str, route_prefix: str, realm: str, required_realm: str
    ) -> None:
        """Record that a route was denied because of the caller's realm."""
        ...

    def capabilities_missing(
        self, route: str, route_prefix: str, realm: str, missing: Iterable[str]
    ) -> None:
        """Record that a route was denied for missing capabilities."""
        ...

    def with_context(self, context: ObservationContext) -> CapabilityPolicyProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCapabilityPolicyProbe:
    """Default implementation of CapabilityPolicyProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCapabilityPolicyProbe:
        """Create a new probe with observation context bound."""
        return DefaultCapabilityPolicyProbe(logger=self._logger, context=context)

    def route_unguarded(self, route: str) -> None:
        """Record that no policy covers a route."""
        self._logger.debug(
            "capability_route_unguarded",
            route=route,
            **self._get_context_kwargs(),
        )

    def capability_allowed(self, route: str, route_prefix: str, realm: str) -> None:
        """Record that a guarded route was allowed."""
        self._logger.debug(
            "capability_allowed",
            route=route,
            route_prefix=route_prefix,
            realm=realm,
            **self._get_context_kwargs(),
        )

    def realm_mismatch(
        self, route: str, route_prefix: str, realm: str, required_realm: str
    ) -> None:
        """Record that a route was denied because of the caller's realm."""
        self._logger.info(
            "capability_realm_mismatch",
            route=route,
            route_prefix=route_prefix,
            realm=realm,
            required_realm=required_realm,
            **self._get_context_kwargs(),
        )

    def capabilities_missing(
        self, route: str, route_prefix: str, realm: str, missing: Iterable[str]
    ) -> None:
        """Record that a route was denied for missing capabilities."""
        self._logger.info(
            "capability_missing",
            route=route,
            route_prefix=route_prefix,
            realm=realm,
            missing=sorted(missing),
            **self._get_context_kwargs(),
        )
