"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        subject_id: Identity the request or connection acts as (if known).
        organization_id: Tenant the request is scoped to (if resolved).
        connection_id: Live hub connection (real-time events only).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", subject_id="u1")
        probe = DefaultResourceAccessProbe().with_context(context)
    """

    request_id: str | None = None
    subject_id: str | None = None
    organization_id: str | None = None
    connection_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.subject_id is not None:
            result["subject_id"] = self.subject_id
        if self.organization_id is not None:
            result["organization_id"] = self.organization_id
        if self.connection_id is not None:
            result["connection_id"] = self.connection_id
        result.update(self.extra)
        return result

    def with_organization(self, organization_id: str) -> ObservationContext:
        """Create a new context with the organization set."""
        return replace(self, organization_id=organization_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
