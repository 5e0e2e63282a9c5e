"""Unit tests for HubConnection and ConnectionRegistry."""

from unittest.mock import MagicMock

import pytest

from realtime.application import ConnectionRegistry, ConnectionState, HubConnection
from realtime.application.observability import EventHubProbe
from realtime.domain.value_objects import (
    ADMIN_ROOM,
    BROADCAST_ROOM,
    HubEvent,
    HubMessage,
    subject_room,
)
from shared_kernel.auth import ResolvedSession

PING = HubMessage(HubEvent.METRICS, {})


@pytest.fixture
def mock_probe():
    return MagicMock(spec=EventHubProbe)


@pytest.fixture
def registry(mock_probe):
    return ConnectionRegistry(probe=mock_probe)


def _connection(queue_size: int = 8) -> HubConnection:
    return HubConnection(session=ResolvedSession.anonymous(), queue_size=queue_size)


class TestHubConnection:
    def test_new_connection_is_connecting(self):
        connection = _connection()

        assert connection.state is ConnectionState.CONNECTING
        assert connection.is_open
        assert not connection.is_authenticated
        assert len(connection.id) == 26

    def test_offer_fails_when_queue_full(self):
        connection = _connection(queue_size=1)

        assert connection.offer(PING)
        assert not connection.offer(PING)
        assert connection.pending == 1

    def test_close_discards_pending(self):
        connection = _connection()
        connection.offer(PING)
        connection.offer(PING)

        assert connection.close() == 2
        assert connection.state is ConnectionState.DISCONNECTED
        assert not connection.offer(PING)

    @pytest.mark.asyncio
    async def test_messages_are_fifo(self):
        connection = _connection()
        first = HubMessage(HubEvent.METRICS, 1)
        second = HubMessage(HubEvent.ALERTS, 2)
        connection.offer(first)
        connection.offer(second)

        assert await connection.next_message() is first
        assert await connection.next_message() is second


class TestRooms:
    def test_add_joins_broadcast(self, registry):
        connection = _connection()
        registry.add(connection)

        assert connection in registry
        assert registry.rooms_of(connection) == {BROADCAST_ROOM}

    def test_bind_admin_joins_subject_and_admin_rooms(self, registry):
        connection = _connection()
        registry.add(connection)

        registry.bind(connection, subject_id="u1", is_admin=True)

        assert registry.rooms_of(connection) == {BROADCAST_ROOM, subject_room("u1"), ADMIN_ROOM}
        assert connection.is_authenticated

    def test_rebind_as_non_admin_leaves_admin_and_old_subject(self, registry):
        connection = _connection()
        registry.add(connection)
        registry.bind(connection, subject_id="u1", is_admin=True)

        registry.bind(connection, subject_id="u2", is_admin=False)

        assert registry.rooms_of(connection) == {BROADCAST_ROOM, subject_room("u2")}

    def test_remove_leaves_every_room(self, registry):
        connection = _connection()
        registry.add(connection)
        registry.bind(connection, subject_id="u1", is_admin=True)

        registry.remove(connection)

        assert connection not in registry
        assert len(registry) == 0
        assert registry.members(ADMIN_ROOM) == []

    def test_join_ignores_unregistered_connections(self, registry):
        connection = _connection()

        registry.join(connection, ADMIN_ROOM)

        assert registry.members(ADMIN_ROOM) == []


class TestDelivery:
    def test_multicast_only_reaches_room_members(self, registry, mock_probe):
        admin, user = _connection(), _connection()
        for connection in (admin, user):
            registry.add(connection)
        registry.bind(admin, "a", is_admin=True)
        registry.bind(user, "u", is_admin=False)

        delivered = registry.multicast(ADMIN_ROOM, PING)

        assert delivered == 1
        assert admin.pending == 1
        assert user.pending == 0
        mock_probe.event_published.assert_called_once_with(
            event=HubEvent.METRICS, room=ADMIN_ROOM, delivered=1
        )

    def test_full_queue_drops_for_that_connection_only(self, registry, mock_probe):
        slow, fast = _connection(queue_size=1), _connection()
        registry.add(slow)
        registry.add(fast)
        slow.offer(PING)

        delivered = registry.broadcast(PING)

        assert delivered == 1
        assert fast.pending == 1
        mock_probe.message_dropped.assert_called_once_with(
            connection_id=slow.id, event=HubEvent.METRICS
        )
