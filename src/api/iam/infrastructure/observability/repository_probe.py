"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events while reading memberships, resources and
collaboration grants from the hosted backing store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MembershipRepositoryProbe(Protocol):
    """Domain probe for membership repository operations."""

    def memberships_listed(self, subject_id: str, count: int) -> None:
        """Record that a subject's memberships were listed."""
        ...

    def unknown_membership_role(self, organization_id: str, role: str) -> None:
        """Record that a stored membership role is not recognized."""
        ...

    def with_context(self, context: ObservationContext) -> MembershipRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class ResourceRepositoryProbe(Protocol):
    """Domain probe for resource and collaboration grant lookups."""

    def resource_not_found(self, resource: str) -> None:
        """Record that a resource lookup found nothing."""
        ...

    def unknown_grant_role(self, resource: str, role: str) -> None:
        """Record that a stored collaboration role is not recognized."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMembershipRepositoryProbe:
    """Default implementation of MembershipRepositoryProbe using structlog."""

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
    ) -> DefaultMembershipRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultMembershipRepositoryProbe(logger=self._logger, context=context)

    def memberships_listed(self, subject_id: str, count: int) -> None:
        """Record that a subject's memberships were listed."""
        self._logger.debug(
            "memberships_listed",
            subject_id=subject_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def unknown_membership_role(self, organization_id: str, role: str) -> None:
        """Record that a stored membership role is not recognized."""
        self._logger.warning(
            "membership_role_unknown",
            organization_id=organization_id,
            role=role,
            **self._get_context_kwargs(),
        )


class DefaultResourceRepositoryProbe:
    """Default implementation of ResourceRepositoryProbe using structlog."""

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
    ) -> DefaultResourceRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultResourceRepositoryProbe(logger=self._logger, context=context)

    def resource_not_found(self, resource: str) -> None:
        """Record that a resource lookup found nothing."""
        self._logger.debug(
            "resource_not_found",
            resource=resource,
            **self._get_context_kwargs(),
        )

    def unknown_grant_role(self, resource: str, role: str) -> None:
        """Record that a stored collaboration role is not recognized."""
        self._logger.warning(
            "collaboration_grant_role_unknown",
            resource=resource,
            role=role,
            **self._get_context_kwargs(),
        )
