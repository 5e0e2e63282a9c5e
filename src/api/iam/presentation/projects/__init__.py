"""Protected hub project presentation slice."""

from iam.presentation.projects.routes import router

__all__ = ["router"]
