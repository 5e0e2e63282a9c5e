"""Pydantic models for session API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.application.services import OrganizationContextResolution
from shared_kernel.auth import ResolvedSession
from shared_kernel.middleware.organization_context import OrganizationContext


class OrganizationContextResponse(BaseModel):
    """Response model for a resolved organization context."""

    organization_id: str = Field(..., description="Acting organization ID")
    role: str = Field(..., description="Subject's membership role")
    source: str = Field(..., description="How the organization was selected")

    @classmethod
    def from_domain(cls, context: OrganizationContext) -> OrganizationContextResponse:
        """Convert an OrganizationContext to API response."""
        return cls(
            organization_id=context.organization_id,
            role=str(context.role),
            source=context.source,
        )


class SessionResponse(BaseModel):
    """Response model describing who the request acts as."""

    authenticated: bool = Field(..., description="Whether a subject was resolved")
    subject_id: str | None = Field(None, description="Resolved subject ID")
    is_platform_admin: bool = Field(False, description="Platform admin flag")
    source: str = Field(..., description="Where the identity was read from")
    organization: OrganizationContextResponse | None = Field(
        None, description="Resolved organization context"
    )
    organization_outcome: str = Field(
        ..., description="Outcome of organization context resolution"
    )

    @classmethod
    def from_domain(
        cls,
        resolved: ResolvedSession,
        resolution: OrganizationContextResolution,
    ) -> SessionResponse:
        """Build the response from the resolved session and organization."""
        return cls(
            authenticated=resolved.is_authenticated,
            subject_id=resolved.subject_id,
            is_platform_admin=resolved.is_platform_admin,
            source=str(resolved.source),
            organization=(
                OrganizationContextResponse.from_domain(resolution.context)
                if resolution.context is not None
                else None
            ),
            organization_outcome=str(resolution.outcome),
        )
