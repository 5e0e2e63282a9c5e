"""Application layer for the real-time event hub."""

from realtime.application.broadcaster import HubBroadcaster
from realtime.application.connections import (
    ConnectionRegistry,
    ConnectionState,
    HubConnection,
)
from realtime.application.hub import EventHub

__all__ = [
    "ConnectionRegistry",
    "ConnectionState",
    "EventHub",
    "HubBroadcaster",
    "HubConnection",
]
