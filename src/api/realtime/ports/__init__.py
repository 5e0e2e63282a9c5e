"""Ports (interfaces) for the realtime bounded context."""

from realtime.ports.store import Clock, IHubStore, SystemClock

__all__ = ["Clock", "IHubStore", "SystemClock"]
