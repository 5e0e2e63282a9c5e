"""Pydantic models for organization API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.domain.value_objects import Membership, Organization


class SelectOrganizationRequest(BaseModel):
    """Request model for choosing the sticky acting organization."""

    organization_id: str = Field(
        ..., description="Organization to act under", min_length=1, max_length=64
    )


class OrganizationMembershipResponse(BaseModel):
    """Response model for one of the caller's organizations."""

    organization_id: str = Field(..., description="Organization ID")
    name: str | None = Field(None, description="Organization name")
    slug: str | None = Field(None, description="Organization slug")
    plan: str | None = Field(None, description="Billing plan")
    role: str = Field(..., description="Caller's membership role")
    is_current: bool = Field(False, description="Whether this is the acting organization")

    @classmethod
    def from_domain(
        cls,
        membership: Membership,
        organization: Organization | None,
        current_organization_id: str | None,
    ) -> OrganizationMembershipResponse:
        """Combine a membership with its organization metadata."""
        return cls(
            organization_id=membership.organization_id,
            name=organization.name if organization else None,
            slug=organization.slug if organization else None,
            plan=organization.plan if organization else None,
            role=str(membership.role),
            is_current=membership.organization_id == current_organization_id,
        )
