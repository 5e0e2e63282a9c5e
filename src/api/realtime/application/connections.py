"""Live hub connections and the rooms they belong to.

Delivery is best-effort: every connection owns a bounded FIFO queue drained
by its own writer task. A full queue drops the message for that connection
only; nobody else is slowed down.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from enum import StrEnum

from ulid import ULID

from realtime.application.observability import DefaultEventHubProbe, EventHubProbe
from realtime.domain.value_objects import ADMIN_ROOM, BROADCAST_ROOM, HubMessage, subject_room
from shared_kernel.auth import ResolvedSession


class ConnectionState(StrEnum):
    """Lifecycle of a hub connection."""

    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"


class HubConnection:
    """One live client channel.

    Attributes:
        id: ULID assigned when the connection opens
        session: Identity resolved at handshake time
        subject_id: Subject bound by the ``auth`` command, if any
        is_admin: Whether the bound subject is a platform admin
        state: Current lifecycle state
    """

    def __init__(
        self,
        session: ResolvedSession,
        queue_size: int = 256,
        connection_id: str | None = None,
    ) -> None:
        self.id = connection_id or str(ULID())
        self.session = session
        self.subject_id: str | None = None
        self.is_admin = False
        self.state = ConnectionState.CONNECTING
        self._queue: asyncio.Queue[HubMessage] = asyncio.Queue(maxsize=queue_size)

    @property
    def is_authenticated(self) -> bool:
        return self.state is ConnectionState.AUTHENTICATED

    @property
    def is_open(self) -> bool:
        return self.state is not ConnectionState.DISCONNECTED

    @property
    def pending(self) -> int:
        """Messages queued but not yet written."""
        return self._queue.qsize()

    def bind(self, subject_id: str, is_admin: bool) -> None:
        """Bind the connection to an authenticated subject."""
        self.subject_id = subject_id
        self.is_admin = is_admin
        self.state = ConnectionState.AUTHENTICATED

    def offer(self, message: HubMessage) -> bool:
        """Queue a message without waiting.

        Returns:
            False if the connection is closed or its queue is full.
        """
        if not self.is_open:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    async def next_message(self) -> HubMessage:
        """Wait for the next queued message."""
        return await self._queue.get()

    def close(self) -> int:
        """Mark the connection closed and discard queued messages.

        Returns:
            Number of messages discarded.
        """
        self.state = ConnectionState.DISCONNECTED
        discarded = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            discarded += 1
        return discarded


class ConnectionRegistry:
    """Registry of live connections grouped into rooms.

    Every registered connection is a member of the broadcast room.
    """

    def __init__(self, probe: EventHubProbe | None = None) -> None:
        self._probe = probe or DefaultEventHubProbe()
        self._connections: dict[str, HubConnection] = {}
        self._rooms: defaultdict[str, set[str]] = defaultdict(set)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: object) -> bool:
        return isinstance(connection, HubConnection) and connection.id in self._connections

    def add(self, connection: HubConnection) -> None:
        self._connections[connection.id] = connection
        self._rooms[BROADCAST_ROOM].add(connection.id)

    def remove(self, connection: HubConnection) -> None:
        """Remove a connection from the registry and from every room."""
        self._connections.pop(connection.id, None)
        for room in list(self._rooms):
            members = self._rooms[room]
            members.discard(connection.id)
            if not members:
                del self._rooms[room]

    def join(self, connection: HubConnection, room: str) -> None:
        if connection.id in self._connections:
            self._rooms[room].add(connection.id)

    def leave(self, connection: HubConnection, room: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(connection.id)
        if not members:
            del self._rooms[room]

    def rooms_of(self, connection: HubConnection) -> set[str]:
        return {room for room, members in self._rooms.items() if connection.id in members}

    def members(self, room: str) -> list[HubConnection]:
        return [
            self._connections[connection_id]
            for connection_id in self._rooms.get(room, ())
            if connection_id in self._connections
        ]

    def bind(self, connection: HubConnection, subject_id: str, is_admin: bool) -> None:
        """Bind a connection to a subject and move it into the matching rooms."""
        if connection.subject_id is not None and connection.subject_id != subject_id:
            self.leave(connection, subject_room(connection.subject_id))
        connection.bind(subject_id, is_admin)
        self.join(connection, subject_room(subject_id))
        if is_admin:
            self.join(connection, ADMIN_ROOM)
        else:
            self.leave(connection, ADMIN_ROOM)

    def send(self, connection: HubConnection, message: HubMessage) -> bool:
        """Queue a message for one connection."""
        delivered = connection.offer(message)
        if not delivered and connection.is_open:
            self._probe.message_dropped(connection_id=connection.id, event=message.event)
        return delivered

    def multicast(self, room: str, message: HubMessage) -> int:
        """Queue a message for every connection in a room.

        Returns:
            Number of connections the message was queued for.
        """
        delivered = sum(
            1 for connection in self.members(room) if self.send(connection, message)
        )
        self._probe.event_published(event=message.event, room=room, delivered=delivered)
        return delivered

    def broadcast(self, message: HubMessage) -> int:
        """Queue a message for every connection."""
        return self.multicast(BROADCAST_ROOM, message)
