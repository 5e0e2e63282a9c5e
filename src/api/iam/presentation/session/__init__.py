"""Session inspection presentation slice."""

from iam.presentation.session.routes import router

__all__ = ["router"]
