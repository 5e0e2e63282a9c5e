"""FastAPI dependencies for the real-time event hub.

The hub and broadcaster are process-wide singletons created in the
application lifespan and stored on ``app.state``.
"""

from __future__ import annotations

from fastapi import HTTPException, status
from starlette.requests import HTTPConnection

from realtime.application import EventHub


def get_event_hub(connection: HTTPConnection) -> EventHub:
    """Get the event hub created at startup.

    Raises:
        HTTPException 503: If the hub has not been started.
    """
    hub = getattr(connection.app.state, "event_hub", None)
    if hub is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "Real-time hub unavailable"},
        )
    return hub
