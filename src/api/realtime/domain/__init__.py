"""Domain layer for the realtime bounded context."""
