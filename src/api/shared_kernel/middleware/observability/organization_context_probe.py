"""Domain probe for organization context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to choosing the tenant a request acts
under, from the explicit selector header, the sticky session choice or the
subject's default membership.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OrganizationContextProbe(Protocol):
    """Domain probe for organization context resolution operations."""

    def organization_resolved(
        self,
        organization_id: str,
        subject_id: str,
        source: str,
    ) -> None:
        """Record that an organization context was resolved."""
        ...

    def selector_not_a_member(
        self,
        organization_id: str,
        subject_id: str,
    ) -> None:
        """Record that the explicit selector named an organization without membership."""
        ...

    def stale_session_selection(
        self,
        organization_id: str,
        subject_id: str,
    ) -> None:
        """Record that the sticky session choice no longer has a membership."""
        ...

    def no_membership(self, subject_id: str) -> None:
        """Record that the subject belongs to no organization."""
        ...

    def lookup_failed(self, subject_id: str, error: Exception) -> None:
        """Record that membership lookup failed during resolution."""
        ...

    def organization_selected(self, organization_id: str, subject_id: str) -> None:
        """Record that the subject made an organization their sticky choice."""
        ...

    def with_context(self, context: ObservationContext) -> OrganizationContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultOrganizationContextProbe:
    """Default implementation of OrganizationContextProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultOrganizationContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultOrganizationContextProbe(logger=self._logger, context=context)

    def organization_resolved(
        self,
        organization_id: str,
        subject_id: str,
        source: str,
    ) -> None:
        """Record that an organization context was resolved."""
        self._logger.debug(
            "organization_context_resolved",
            organization_id=organization_id,
            subject_id=subject_id,
            source=source,
            **self._get_context_kwargs(),
        )

    def selector_not_a_member(
        self,
        organization_id: str,
        subject_id: str,
    ) -> None:
        """Record that the explicit selector named an organization without membership."""
        self._logger.warning(
            "organization_context_selector_not_a_member",
            organization_id=organization_id,
            subject_id=subject_id,
            **self._get_context_kwargs(),
        )

    def stale_session_selection(
        self,
        organization_id: str,
        subject_id: str,
    ) -> None:
        """Record that the sticky session choice no longer has a membership."""
        self._logger.info(
            "organization_context_stale_session_selection",
            organization_id=organization_id,
            subject_id=subject_id,
            **self._get_context_kwargs(),
        )

    def no_membership(self, subject_id: str) -> None:
        """Record that the subject belongs to no organization."""
        self._logger.debug(
            "organization_context_no_membership",
            subject_id=subject_id,
            **self._get_context_kwargs(),
        )

    def lookup_failed(self, subject_id: str, error: Exception) -> None:
        """Record that membership lookup failed during resolution."""
        self._logger.error(
            "organization_context_lookup_failed",
            subject_id=subject_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def organization_selected(self, organization_id: str, subject_id: str) -> None:
        """Record that the subject made an organization their sticky choice."""
        self._logger.info(
            "organization_context_selected",
            organization_id=organization_id,
            subject_id=subject_id,
            **self._get_context_kwargs(),
        )
