"""Realtime bounded context.

Pushes live platform state (metrics, alerts, achievements, notifications)
to connected clients over WebSockets, addressed by room.
"""
