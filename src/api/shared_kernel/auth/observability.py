"""Domain probes for identity resolution.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to bearer token validation and session
resolution.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class BearerTokenProbe(Protocol):
    """Domain probe for bearer token validation."""

    def token_validated(self, subject_id: str) -> None:
        """Record that a token was successfully validated."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        ...

    def with_context(self, context: ObservationContext) -> BearerTokenProbe:
        """Create a new probe with observation context bound."""
        ...


class SessionProbe(Protocol):
    """Domain probe for session resolution."""

    def subject_resolved(self, subject_id: str, source: str, is_admin: bool) -> None:
        """Record that a request identity was resolved."""
        ...

    def anonymous_request(self) -> None:
        """Record that no identity could be resolved."""
        ...

    def bearer_token_rejected(self, reason: str) -> None:
        """Record that a bearer credential was present but unusable."""
        ...

    def with_context(self, context: ObservationContext) -> SessionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultBearerTokenProbe:
    """Default implementation of BearerTokenProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultBearerTokenProbe:
        """Create a new probe with observation context bound."""
        return DefaultBearerTokenProbe(logger=self._logger, context=context)

    def token_validated(self, subject_id: str) -> None:
        """Record that a token was successfully validated."""
        self._logger.debug(
            "bearer_token_validated",
            subject_id=subject_id,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        self._logger.warning(
            "bearer_token_validation_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )


class DefaultSessionProbe:
    """Default implementation of SessionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSessionProbe:
        """Create a new probe with observation context bound."""
        return DefaultSessionProbe(logger=self._logger, context=context)

    def subject_resolved(self, subject_id: str, source: str, is_admin: bool) -> None:
        """Record that a request identity was resolved."""
        self._logger.debug(
            "session_subject_resolved",
            subject_id=subject_id,
            source=source,
            is_admin=is_admin,
            **self._get_context_kwargs(),
        )

    def anonymous_request(self) -> None:
        """Record that no identity could be resolved."""
        self._logger.debug("session_anonymous", **self._get_context_kwargs())

    def bearer_token_rejected(self, reason: str) -> None:
        """Record that a bearer credential was present but unusable."""
        self._logger.info(
            "session_bearer_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )
