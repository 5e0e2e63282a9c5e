"""Backing store and clock ports for the realtime bounded context.

Store implementations raise ``BackingStoreUnavailableError`` when the store
cannot be reached.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from realtime.domain.value_objects import (
    AchievementUnlock,
    Alert,
    MetricsSnapshot,
    Notification,
)


@runtime_checkable
class IHubStore(Protocol):
    """Read access to hub state, plus resolving alerts."""

    async def get_metrics(self) -> MetricsSnapshot:
        """Compute aggregate platform metrics."""
        ...

    async def list_unresolved_alerts(self, limit: int) -> list[Alert]:
        """List unresolved alerts, newest first."""
        ...

    async def list_alerts_created_after(
        self, since: datetime, limit: int, after_id: str | None = None
    ) -> list[Alert]:
        """List alerts ordered after the ``(since, after_id)`` position, oldest first.

        Alerts are ordered by ``(created_at, id)``. Without ``after_id`` only
        alerts created strictly after ``since`` qualify; with it, alerts sharing
        ``since`` whose id sorts after ``after_id`` qualify too.
        """
        ...

    async def resolve_alert(self, alert_id: str, resolved_at: datetime) -> bool:
        """Mark an alert resolved.

        Returns:
            True if this call resolved it; False if it was already resolved
            or does not exist.
        """
        ...

    async def list_recent_achievement_unlocks(self, limit: int) -> list[AchievementUnlock]:
        """List the latest achievement unlocks across all subjects."""
        ...

    async def list_achievement_unlocks_for_subject(
        self, subject_id: str, limit: int
    ) -> list[AchievementUnlock]:
        """List one subject's achievement unlocks, newest first."""
        ...

    async def list_notifications(self, limit: int) -> list[Notification]:
        """Build the activity feed from recent applications and unresolved alerts.

        Takes up to ``limit`` items from each source, newest first overall.
        """
        ...


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock reading the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)
