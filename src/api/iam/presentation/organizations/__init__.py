"""Organization presentation slice."""

from iam.presentation.organizations.routes import router

__all__ = ["router"]
