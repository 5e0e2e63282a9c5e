"""HTTP routes for inspecting the resolved session."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from iam.application.services import OrganizationContextResolution
from iam.dependencies.organization_context import get_organization_context_resolution
from iam.dependencies.session import get_resolved_session
from iam.presentation.session.models import SessionResponse
from shared_kernel.auth import ResolvedSession

router = APIRouter(
    prefix="/session",
    tags=["session"],
)


@router.get("")
async def get_session(
    resolved: Annotated[ResolvedSession, Depends(get_resolved_session)],
    resolution: Annotated[
        OrganizationContextResolution, Depends(get_organization_context_resolution)
    ],
) -> SessionResponse:
    """Describe the identity and organization context of the caller.

    Anonymous callers receive ``authenticated: false`` rather than an error.
    """
    return SessionResponse.from_domain(resolved, resolution)
