"""Observability for shared middleware operations."""

from shared_kernel.middleware.observability.organization_context_probe import (
    DefaultOrganizationContextProbe,
    OrganizationContextProbe,
)

__all__ = [
    "DefaultOrganizationContextProbe",
    "OrganizationContextProbe",
]
