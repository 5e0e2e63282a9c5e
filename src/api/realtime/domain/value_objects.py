"""Value objects for the realtime bounded context.

Events are immutable snapshots read from the hosted backing store. Each
knows how to render itself as the JSON payload clients expect.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

BROADCAST_ROOM = "broadcast"
ADMIN_ROOM = "admin"


def subject_room(subject_id: str) -> str:
    """Name of the room holding every connection bound to ``subject_id``."""
    return f"subject:{subject_id}"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class HubEvent(StrEnum):
    """Events the hub sends to clients."""

    CONNECTED = "connected"
    AUTH_SUCCESS = "auth_success"
    METRICS = "metrics"
    ALERTS = "alerts"
    NEW_ALERTS = "new_alerts"
    ALERT = "alert"
    ALERT_RESOLVED = "alert_resolved"
    ACHIEVEMENTS = "achievements"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    NOTIFICATIONS = "notifications"
    SYSTEM_NOTIFICATION = "system_notification"
    ERROR = "error"


class HubCommand(StrEnum):
    """Commands clients send to the hub."""

    AUTH = "auth"
    RESOLVE_ALERT = "resolveAlert"
    REFRESH_METRICS = "refreshMetrics"
    REFRESH_NOTIFICATIONS = "refreshNotifications"
    REFRESH_ACHIEVEMENTS = "refreshAchievements"


@dataclass(frozen=True)
class HubMessage:
    """One outbound message in the ``{"event", "data"}`` envelope."""

    event: HubEvent
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"event": str(self.event), "data": self.data}


@dataclass(frozen=True)
class Alert:
    """An operational alert raised on the platform.

    Only ``is_resolved`` and ``resolved_at`` ever change after creation.
    """

    id: str
    message: str
    severity: str
    created_at: datetime
    is_resolved: bool = False
    resolved_at: datetime | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "severity": self.severity,
            "is_resolved": self.is_resolved,
            "resolved_at": _iso(self.resolved_at),
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class AchievementUnlock:
    """A subject earning an achievement."""

    id: str
    subject_id: str
    achievement_id: str
    name: str
    earned_at: datetime
    description: str | None = None
    xp_reward: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.subject_id,
            "achievement_id": self.achievement_id,
            "name": self.name,
            "description": self.description,
            "xp_reward": self.xp_reward,
            "earned_at": _iso(self.earned_at),
        }


@dataclass(frozen=True)
class Notification:
    """An item in the activity feed, derived from applications and alerts."""

    id: str
    type: str
    message: str
    timestamp: datetime | None
    severity: str | None = None
    unread: bool = True

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "timestamp": _iso(self.timestamp),
            "unread": self.unread,
        }
        if self.severity is not None:
            payload["severity"] = self.severity
        return payload


@dataclass(frozen=True)
class MetricsSnapshot:
    """Aggregate platform metrics."""

    total_profiles: int = 0
    total_projects: int = 0
    online_users: int = 0
    verified_users: int = 0
    total_xp: int = 0
    avg_level: float = 1.0

    def to_payload(self) -> dict[str, Any]:
        return {
            "totalProfiles": self.total_profiles,
            "totalProjects": self.total_projects,
            "onlineUsers": self.online_users,
            "verifiedUsers": self.verified_users,
            "totalXP": self.total_xp,
            "avgLevel": self.avg_level,
        }
