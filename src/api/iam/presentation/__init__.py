"""IAM presentation layer - aggregate-based organization.

Organizes presentation concerns by slice (session, organizations, projects)
following vertical slicing and DDD principles. Each slice package contains
its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import organizations, projects, session

# Auth is enforced per-endpoint (each handler declares its own Depends),
# so the session endpoint stays reachable for anonymous callers.
router = APIRouter(
    prefix="/iam",
    tags=["iam"],
)

router.include_router(session.router)
router.include_router(organizations.router)

# Protected hub routes live under the public API prefix, outside /iam.
hub_router = projects.router

__all__ = ["hub_router", "router"]
