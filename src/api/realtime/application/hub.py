"""The real-time event hub.

Owns the connection registry and turns client commands and platform events
into room-addressed messages. The hub is created once per process and
shared by every WebSocket handler and by the broadcaster.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from realtime.application.connections import ConnectionRegistry, HubConnection
from realtime.application.observability import DefaultEventHubProbe, EventHubProbe
from realtime.domain.value_objects import (
    ADMIN_ROOM,
    AchievementUnlock,
    Alert,
    HubCommand,
    HubEvent,
    HubMessage,
    MetricsSnapshot,
    subject_room,
)
from realtime.ports.store import Clock, IHubStore, SystemClock
from shared_kernel.auth import ResolvedSession
from shared_kernel.exceptions import BackingStoreUnavailableError

CommandHandler = Callable[[HubConnection, Any], Awaitable[None]]


class EventHub:
    """Registry-backed hub serving snapshots, commands and pushes."""

    def __init__(
        self,
        store: IHubStore,
        registry: ConnectionRegistry | None = None,
        clock: Clock | None = None,
        probe: EventHubProbe | None = None,
        alert_snapshot_limit: int = 50,
        achievement_snapshot_limit: int = 20,
        notification_limit: int = 5,
        queue_size: int = 256,
        trust_client_auth: bool = False,
    ) -> None:
        """Initialize the hub.

        Args:
            store: Backing store port
            registry: Connection registry (a fresh one by default)
            clock: Time source for event timestamps
            probe: Optional domain probe for observability
            alert_snapshot_limit: Alerts per snapshot
            achievement_snapshot_limit: Achievement unlocks per snapshot
            notification_limit: Items per notification source
            queue_size: Outbound queue bound per connection
            trust_client_auth: Accept ``auth`` claims as sent, without a
                handshake identity (development only)
        """
        self._store = store
        self._probe = probe or DefaultEventHubProbe()
        self._registry = registry or ConnectionRegistry(probe=self._probe)
        self._clock = clock or SystemClock()
        self._alert_snapshot_limit = alert_snapshot_limit
        self._achievement_snapshot_limit = achievement_snapshot_limit
        self._notification_limit = notification_limit
        self._queue_size = queue_size
        self._trust_client_auth = trust_client_auth
        self._mutation_lock = asyncio.Lock()
        self._handlers: dict[str, CommandHandler] = {
            HubCommand.AUTH: self._handle_auth,
            HubCommand.RESOLVE_ALERT: self._handle_resolve_alert,
            HubCommand.REFRESH_METRICS: self._handle_refresh_metrics,
            HubCommand.REFRESH_NOTIFICATIONS: self._handle_refresh_notifications,
            HubCommand.REFRESH_ACHIEVEMENTS: self._handle_refresh_achievements,
        }

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def _timestamp(self) -> str:
        return self._clock.now().isoformat()

    # -- connection lifecycle ------------------------------------------------

    def open_connection(self, session: ResolvedSession) -> HubConnection:
        """Register a new connection for a resolved handshake identity."""
        connection = HubConnection(session=session, queue_size=self._queue_size)
        self._registry.add(connection)
        self._probe.connection_opened(
            connection_id=connection.id, subject_id=session.subject_id
        )
        return connection

    async def connect(self, connection: HubConnection) -> None:
        """Send the handshake acknowledgment and the initial snapshots.

        Snapshots go out regardless of authentication; a snapshot whose
        lookup fails is skipped.
        """
        self._registry.send(
            connection,
            HubMessage(
                HubEvent.CONNECTED,
                {
                    "message": "Connected to AeThex real-time hub",
                    "connectionId": connection.id,
                    "timestamp": self._timestamp(),
                },
            ),
        )
        await self._send_metrics(connection)
        await self._send_alerts(connection)
        await self._send_recent_achievements(connection)
        await self._send_notifications(connection)

    def disconnect(self, connection: HubConnection) -> None:
        """Remove a connection from all rooms and discard its queue."""
        self._registry.remove(connection)
        discarded = connection.close()
        self._probe.connection_closed(connection_id=connection.id, discarded=discarded)

    # -- client commands -----------------------------------------------------

    async def handle(self, connection: HubConnection, event: str, data: Any = None) -> None:
        """Process one client command.

        Unknown commands and store failures are answered with an ``error``
        event to the caller; nothing is raised.
        """
        handler = self._handlers.get(event)
        if handler is None:
            self._reject(connection, event, f"Unknown event: {event}")
            return

        try:
            await handler(connection, data)
        except BackingStoreUnavailableError as e:
            self._probe.store_unavailable(operation=event, error=e)
            self.send_error(connection, "Service temporarily unavailable")

    def send_error(self, connection: HubConnection, message: str) -> None:
        """Reply to one connection with an ``error`` event."""
        self._registry.send(connection, HubMessage(HubEvent.ERROR, {"message": message}))

    def _reject(self, connection: HubConnection, command: str, reason: str) -> None:
        self._probe.command_rejected(
            connection_id=connection.id, command=command, reason=reason
        )
        self.send_error(connection, reason)

    async def _handle_auth(self, connection: HubConnection, data: Any) -> None:
        claims: Mapping[str, Any] = data if isinstance(data, Mapping) else {}
        claimed = claims.get("subjectId", claims.get("userId"))
        claimed_subject = str(claimed) if claimed else None

        if self._trust_client_auth:
            subject_id = claimed_subject or connection.session.subject_id
            is_admin = claims.get("isAdmin", connection.session.is_platform_admin) is True
        else:
            session = connection.session
            if session.subject_id is None:
                self._auth_rejected(connection, "Authentication required")
                return
            if claimed_subject is not None and claimed_subject != session.subject_id:
                self._auth_rejected(connection, "Subject does not match session")
                return
            subject_id = session.subject_id
            is_admin = session.is_platform_admin

        if subject_id is None:
            self._auth_rejected(connection, "Authentication required")
            return

        self._registry.bind(connection, subject_id=subject_id, is_admin=is_admin)
        self._probe.connection_authenticated(
            connection_id=connection.id, subject_id=subject_id, is_admin=is_admin
        )
        self._registry.send(
            connection,
            HubMessage(
                HubEvent.AUTH_SUCCESS,
                {"subjectId": subject_id, "isAdmin": is_admin},
            ),
        )

    def _auth_rejected(self, connection: HubConnection, reason: str) -> None:
        self._probe.auth_rejected(connection_id=connection.id, reason=reason)
        self.send_error(connection, reason)

    async def _handle_resolve_alert(self, connection: HubConnection, data: Any) -> None:
        if not (connection.is_authenticated and connection.is_admin):
            self._reject(connection, HubCommand.RESOLVE_ALERT, "Admin access required")
            return

        alert_id = data.get("alertId") if isinstance(data, Mapping) else data
        if not alert_id or not isinstance(alert_id, (str, int)):
            self._reject(connection, HubCommand.RESOLVE_ALERT, "alertId is required")
            return
        alert_id = str(alert_id)

        async with self._mutation_lock:
            changed = await self._store.resolve_alert(alert_id, resolved_at=self._clock.now())
            alerts = await self._store.list_unresolved_alerts(self._alert_snapshot_limit)
            self._probe.alert_resolved(
                alert_id=alert_id, connection_id=connection.id, changed=changed
            )
            snapshot = HubMessage(HubEvent.ALERTS, [a.to_payload() for a in alerts])
            if changed:
                self._registry.multicast(
                    ADMIN_ROOM, HubMessage(HubEvent.ALERT_RESOLVED, {"alertId": alert_id})
                )
                self._registry.multicast(ADMIN_ROOM, snapshot)
            else:
                self._registry.send(connection, snapshot)

    async def _handle_refresh_metrics(self, connection: HubConnection, data: Any) -> None:
        metrics = await self._store.get_metrics()
        self._registry.send(connection, HubMessage(HubEvent.METRICS, metrics.to_payload()))

    async def _handle_refresh_notifications(
        self, connection: HubConnection, data: Any
    ) -> None:
        notifications = await self._store.list_notifications(self._notification_limit)
        self._registry.send(
            connection,
            HubMessage(HubEvent.NOTIFICATIONS, [n.to_payload() for n in notifications]),
        )

    async def _handle_refresh_achievements(
        self, connection: HubConnection, data: Any
    ) -> None:
        if connection.is_authenticated and connection.subject_id is not None:
            unlocks = await self._store.list_achievement_unlocks_for_subject(
                connection.subject_id, self._achievement_snapshot_limit
            )
        else:
            unlocks = await self._store.list_recent_achievement_unlocks(
                self._achievement_snapshot_limit
            )
        self._registry.send(
            connection,
            HubMessage(HubEvent.ACHIEVEMENTS, [u.to_payload() for u in unlocks]),
        )

    # -- snapshots -----------------------------------------------------------

    async def _send_metrics(self, connection: HubConnection) -> None:
        try:
            metrics = await self._store.get_metrics()
        except BackingStoreUnavailableError as e:
            self._probe.store_unavailable(operation="metrics_snapshot", error=e)
            return
        self._registry.send(connection, HubMessage(HubEvent.METRICS, metrics.to_payload()))

    async def _send_alerts(self, connection: HubConnection) -> None:
        try:
            alerts = await self._store.list_unresolved_alerts(self._alert_snapshot_limit)
        except BackingStoreUnavailableError as e:
            self._probe.store_unavailable(operation="alerts_snapshot", error=e)
            return
        self._registry.send(
            connection, HubMessage(HubEvent.ALERTS, [a.to_payload() for a in alerts])
        )

    async def _send_recent_achievements(self, connection: HubConnection) -> None:
        try:
            unlocks = await self._store.list_recent_achievement_unlocks(
                self._achievement_snapshot_limit
            )
        except BackingStoreUnavailableError as e:
            self._probe.store_unavailable(operation="achievements_snapshot", error=e)
            return
        self._registry.send(
            connection,
            HubMessage(HubEvent.ACHIEVEMENTS, [u.to_payload() for u in unlocks]),
        )

    async def _send_notifications(self, connection: HubConnection) -> None:
        try:
            notifications = await self._store.list_notifications(self._notification_limit)
        except BackingStoreUnavailableError as e:
            self._probe.store_unavailable(operation="notifications_snapshot", error=e)
            return
        self._registry.send(
            connection,
            HubMessage(HubEvent.NOTIFICATIONS, [n.to_payload() for n in notifications]),
        )

    # -- pushes ----------------------------------------------------------------

    def broadcast_metrics(self, metrics: MetricsSnapshot) -> int:
        """Send a metrics snapshot to every connection."""
        return self._registry.broadcast(HubMessage(HubEvent.METRICS, metrics.to_payload()))

    def publish_new_alerts(self, alerts: Sequence[Alert]) -> int:
        """Send newly created alerts to the admin room."""
        return self._registry.multicast(
            ADMIN_ROOM,
            HubMessage(
                HubEvent.NEW_ALERTS,
                {
                    "alerts": [a.to_payload() for a in alerts],
                    "count": len(alerts),
                    "timestamp": self._timestamp(),
                },
            ),
        )

    def notify_alert(self, alert: Alert) -> int:
        """Push a single alert to the admin room immediately."""
        return self._registry.multicast(
            ADMIN_ROOM,
            HubMessage(
                HubEvent.ALERT,
                {"data": alert.to_payload(), "timestamp": self._timestamp()},
            ),
        )

    def notify_achievement(self, unlock: AchievementUnlock) -> int:
        """Push an achievement unlock to its subject's room immediately."""
        return self._registry.multicast(
            subject_room(unlock.subject_id),
            HubMessage(
                HubEvent.ACHIEVEMENT_UNLOCKED,
                {"data": unlock.to_payload(), "timestamp": self._timestamp()},
            ),
        )

    def notify_system(
        self,
        message: str,
        severity: str = "info",
        subject_id: str | None = None,
    ) -> int:
        """Push a system notice to one subject, or to everyone."""
        notice = HubMessage(
            HubEvent.SYSTEM_NOTIFICATION,
            {"message": message, "severity": severity, "timestamp": self._timestamp()},
        )
        if subject_id is not None:
            return self._registry.multicast(subject_room(subject_id), notice)
        return self._registry.broadcast(notice)
