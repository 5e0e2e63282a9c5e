"""Pydantic models for protected project routes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.application.services import (
    AccessDenialReason,
    ResourceAccessDecision,
)
from iam.domain.value_objects import Resource


class ProjectResponse(BaseModel):
    """Response model summarizing a project the caller may view."""

    id: str = Field(..., description="Project ID")
    title: str | None = Field(None, description="Project title")
    owner_subject_id: str | None = Field(None, description="Owning subject")
    organization_id: str | None = Field(None, description="Owning organization")
    access_basis: str = Field(..., description="Why the caller may view it")

    @classmethod
    def from_domain(
        cls, resource: Resource, decision: ResourceAccessDecision
    ) -> ProjectResponse:
        """Convert a Resource and the allowing decision to API response."""
        return cls(
            id=resource.ref.id,
            title=resource.title,
            owner_subject_id=resource.owner_subject_id,
            organization_id=resource.organization_id,
            access_basis=str(decision.basis),
        )


class AccessReportResponse(BaseModel):
    """Response model reporting the caller's access to a resource.

    A missing resource is reported exactly like an inaccessible one.
    """

    resource_kind: str = Field(..., description="Resource kind")
    resource_id: str = Field(..., description="Resource ID")
    minimum_role: str = Field(..., description="Role level that was checked")
    allowed: bool = Field(..., description="Whether access is granted")
    basis: str | None = Field(None, description="Entitlement when allowed")
    reason: str | None = Field(None, description="Denial reason when denied")
    role: str | None = Field(None, description="Role behind the decision")

    @classmethod
    def from_domain(
        cls, decision: ResourceAccessDecision, minimum_role: str
    ) -> AccessReportResponse:
        """Convert a ResourceAccessDecision to API response."""
        reason = decision.reason
        if reason is AccessDenialReason.NOT_FOUND:
            reason = AccessDenialReason.INSUFFICIENT_PERMISSIONS
        return cls(
            resource_kind=str(decision.resource.kind),
            resource_id=decision.resource.id,
            minimum_role=minimum_role,
            allowed=decision.allowed,
            basis=str(decision.basis) if decision.basis else None,
            reason=str(reason) if reason else None,
            role=str(decision.role) if decision.role else None,
        )
