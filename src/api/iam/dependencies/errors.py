"""Translation of IAM access-control failures into HTTP errors.

Route guards raise the domain exceptions from ``iam.ports.exceptions``;
these helpers turn them into the ``HTTPException`` FastAPI returns.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from iam.ports.exceptions import (
    AuthenticationAbsentError,
    CapabilityDeniedError,
    InsufficientOrganizationRoleError,
    NotAnOrganizationMemberError,
    OrganizationContextAbsentError,
    ResourceAccessDeniedError,
)

AccessError = (
    AuthenticationAbsentError
    | OrganizationContextAbsentError
    | InsufficientOrganizationRoleError
    | NotAnOrganizationMemberError
    | CapabilityDeniedError
    | ResourceAccessDeniedError
)


def to_http_exception(error: AccessError) -> HTTPException:
    """Map an access-control failure to its HTTP response.

    Resource denials produce the same body whether the resource is missing
    or merely inaccessible.
    """
    if isinstance(error, AuthenticationAbsentError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Authentication required"},
        )
    if isinstance(error, OrganizationContextAbsentError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Organization context required"},
        )
    if isinstance(error, InsufficientOrganizationRoleError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "Insufficient permissions",
                "required": str(error.minimum),
                "current": str(error.role),
            },
        )
    if isinstance(error, NotAnOrganizationMemberError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "Not a member of this organization"},
        )
    if isinstance(error, CapabilityDeniedError):
        decision = error.decision
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": decision.message,
                "reason": str(decision.reason),
                "realm": str(decision.realm),
                "required": sorted(str(c) for c in decision.required),
                "available": sorted(str(c) for c in decision.available),
            },
        )
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"error": "Insufficient permissions"},
    )
