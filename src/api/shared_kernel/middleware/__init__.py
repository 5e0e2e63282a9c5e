"""Shared middleware for cross-cutting concerns.

This module contains the value objects shared across bounded contexts by
the request pipeline. The organization context is the primary component,
carrying the acting tenant resolved for a request.
"""

from shared_kernel.middleware.organization_context import OrganizationContext

__all__ = ["OrganizationContext"]
