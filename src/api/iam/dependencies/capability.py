"""Capability policy FastAPI dependencies.

``capability_guard`` is installed as an application-wide dependency: every
route is checked against the capability policy table before its handler
runs. Routes without a policy pass through.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from iam.application.observability import DefaultCapabilityPolicyProbe
from iam.application.services import CapabilityDecision, CapabilityPolicyService
from iam.dependencies.errors import to_http_exception
from iam.ports.exceptions import CapabilityDeniedError
from infrastructure.settings import get_access_settings
from shared_kernel.authorization.capabilities import Realm, parse_realm


@lru_cache
def get_capability_policy_service() -> CapabilityPolicyService:
    """Get cached capability policy service with the built-in policy table."""
    return CapabilityPolicyService(probe=DefaultCapabilityPolicyProbe())


def get_request_realm(connection: HTTPConnection) -> Realm:
    """Read the caller's realm from the realm header.

    Absent or unrecognized values fall back to the configured default realm.
    """
    settings = get_access_settings()
    return parse_realm(
        connection.headers.get(settings.realm_header),
        default=settings.default_realm,
    )


def capability_guard(
    connection: HTTPConnection,
    realm: Annotated[Realm, Depends(get_request_realm)],
    service: Annotated[CapabilityPolicyService, Depends(get_capability_policy_service)],
) -> CapabilityDecision:
    """Check the request path against the capability policy table.

    Raises:
        HTTPException 403: If the realm does not satisfy the matching policy.
    """
    decision = service.check(route=connection.url.path, realm=realm)
    if not decision.allowed:
        raise to_http_exception(CapabilityDeniedError(decision))
    return decision
