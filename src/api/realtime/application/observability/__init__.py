"""Domain-Oriented Observability for the realtime application layer."""

from realtime.application.observability.broadcaster_probe import (
    BroadcasterProbe,
    DefaultBroadcasterProbe,
)
from realtime.application.observability.event_hub_probe import (
    DefaultEventHubProbe,
    EventHubProbe,
)

__all__ = [
    "BroadcasterProbe",
    "DefaultBroadcasterProbe",
    "DefaultEventHubProbe",
    "EventHubProbe",
]
