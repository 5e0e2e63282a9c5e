"""HTTP routes for on-demand hub pushes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from infrastructure.auth_dependencies import require_platform_admin
from realtime.application import EventHub
from realtime.dependencies import get_event_hub
from realtime.presentation.models import (
    SystemNotificationRequest,
    SystemNotificationResponse,
)
from shared_kernel.auth import ResolvedSession

router = APIRouter(
    prefix="/realtime",
    tags=["realtime"],
)


@router.post(
    "/system-notifications",
    status_code=status.HTTP_202_ACCEPTED,
)
async def push_system_notification(
    request: SystemNotificationRequest,
    admin: Annotated[ResolvedSession, Depends(require_platform_admin)],
    hub: Annotated[EventHub, Depends(get_event_hub)],
) -> SystemNotificationResponse:
    """Push a system notice to one subject or to every connection.

    Delivery is best-effort; the response reports how many connections
    the notice was queued for.
    """
    delivered = hub.notify_system(
        request.message,
        severity=request.severity,
        subject_id=request.subject_id,
    )
    return SystemNotificationResponse(delivered=delivered)
