"""Infrastructure layer for the real-time event hub."""

from realtime.infrastructure.hub_store import SqlAlchemyHubStore

__all__ = ["SqlAlchemyHubStore"]
