"""WebSocket endpoint for the real-time event hub.

Each connection gets a writer task draining its outbound queue; the
receive loop feeds client frames into the hub.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Annotated

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from infrastructure.auth_dependencies import get_resolved_session
from realtime.application import EventHub, HubConnection
from realtime.dependencies import get_event_hub
from realtime.presentation.models import ClientMessage
from shared_kernel.auth import ResolvedSession

router = APIRouter(tags=["realtime"])


async def _drain(websocket: WebSocket, connection: HubConnection) -> None:
    while connection.is_open:
        message = await connection.next_message()
        await websocket.send_json(message.to_dict())


@router.websocket("/ws")
async def hub_socket(
    websocket: WebSocket,
    resolved: Annotated[ResolvedSession, Depends(get_resolved_session)],
    hub: Annotated[EventHub, Depends(get_event_hub)],
) -> None:
    """Serve one hub connection until the client goes away.

    The handshake identity (cookie session or bearer token) is captured
    here; the client still has to send ``auth`` to join its rooms.
    """
    await websocket.accept()
    connection = hub.open_connection(resolved)
    writer = asyncio.create_task(_drain(websocket, connection))
    try:
        await hub.connect(connection)
        while True:
            raw = await websocket.receive_text()
            try:
                frame = ClientMessage.model_validate_json(raw)
            except ValidationError:
                hub.send_error(connection, "Invalid message")
                continue
            await hub.handle(connection, frame.event, frame.data)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(connection)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            await writer
