"""Periodic broadcaster for the real-time event hub.

The broadcaster runs as background tasks within the FastAPI application:
one loop pushes a metrics snapshot to every connection, the other polls
for alerts created since the last poll and pushes them to the admin room.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

from realtime.application.hub import EventHub
from realtime.application.observability import BroadcasterProbe, DefaultBroadcasterProbe
from realtime.ports.store import Clock, IHubStore, SystemClock

Sleep = Callable[[float], Awaitable[None]]


class HubBroadcaster:
    """Background worker driving the hub's scheduled pushes.

    New-alert detection uses a ``(created_at, id)`` watermark: each poll asks
    for alerts ordered after it and advances it to the last alert delivered,
    so a batch cut short by the limit resumes inside a shared timestamp.
    The watermark starts at construction time, so alerts that predate the
    process are only ever seen through snapshots.
    """

    def __init__(
        self,
        hub: EventHub,
        store: IHubStore,
        probe: BroadcasterProbe | None = None,
        clock: Clock | None = None,
        sleep: Sleep = asyncio.sleep,
        metrics_interval_seconds: float = 30.0,
        alert_poll_interval_seconds: float = 10.0,
        alert_batch_limit: int = 50,
    ) -> None:
        """Initialize the broadcaster.

        Args:
            hub: Hub that owns the connections
            store: Backing store port
            probe: Optional domain probe for observability
            clock: Time source for the initial watermark
            sleep: Awaitable used between ticks
            metrics_interval_seconds: Period of the metrics loop
            alert_poll_interval_seconds: Period of the new-alert loop
            alert_batch_limit: Maximum alerts delivered per poll
        """
        self._hub = hub
        self._store = store
        self._probe = probe or DefaultBroadcasterProbe()
        self._clock = clock or SystemClock()
        self._sleep = sleep
        self._metrics_interval = metrics_interval_seconds
        self._alert_poll_interval = alert_poll_interval_seconds
        self._alert_batch_limit = alert_batch_limit
        self._watermark = self._clock.now()
        self._watermark_id: str | None = None
        self._running = False
        self._tasks: list[asyncio.Task] = []

    @property
    def watermark(self) -> datetime:
        """Creation time of the newest alert already pushed."""
        return self._watermark

    @property
    def watermark_id(self) -> str | None:
        """Id of the last alert pushed at ``watermark``, if any."""
        return self._watermark_id

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the metrics and new-alert loops."""
        if self._running:
            return
        self._running = True
        self._probe.broadcaster_started(
            metrics_interval_seconds=self._metrics_interval,
            alert_poll_interval_seconds=self._alert_poll_interval,
        )
        self._tasks.append(
            asyncio.create_task(
                self._loop("metrics", self.broadcast_metrics, self._metrics_interval)
            )
        )
        self._tasks.append(
            asyncio.create_task(
                self._loop("new_alerts", self.poll_new_alerts, self._alert_poll_interval)
            )
        )

    async def stop(self) -> None:
        """Gracefully stop the broadcaster.

        Signals both loops to stop and waits for them to complete.
        """
        self._running = False

        for task in self._tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._tasks.clear()
        self._probe.broadcaster_stopped()

    async def broadcast_metrics(self) -> int:
        """Push one metrics snapshot to every connection.

        Returns:
            Number of connections the snapshot was queued for.
        """
        metrics = await self._store.get_metrics()
        delivered = self._hub.broadcast_metrics(metrics)
        self._probe.metrics_broadcast(delivered=delivered)
        return delivered

    async def poll_new_alerts(self) -> int:
        """Push alerts created since the watermark to the admin room.

        Returns:
            Number of new alerts found.
        """
        alerts = await self._store.list_alerts_created_after(
            self._watermark, self._alert_batch_limit, after_id=self._watermark_id
        )
        if not alerts:
            return 0

        self._hub.publish_new_alerts(alerts)
        last = alerts[-1]
        if last.created_at >= self._watermark:
            self._watermark = last.created_at
            self._watermark_id = last.id
        self._probe.new_alerts_broadcast(count=len(alerts), watermark=self._watermark)
        return len(alerts)

    async def _loop(
        self,
        task: str,
        tick: Callable[[], Awaitable[int]],
        interval: float,
    ) -> None:
        while self._running:
            await self._sleep(interval)
            if not self._running:
                break
            try:
                await tick()
            except Exception as e:
                # A failed tick is skipped; the next one runs on schedule
                self._probe.tick_failed(task=task, error=e)
