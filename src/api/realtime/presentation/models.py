"""Pydantic models for the real-time hub surfaces."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ClientMessage(BaseModel):
    """A command frame sent by a hub client.

    Frames are JSON objects of the form ``{"event": ..., "data": ...}``.
    """

    event: str = Field(..., min_length=1, description="Command name")
    data: Any = Field(default=None, description="Command payload")


class SystemNotificationRequest(BaseModel):
    """Request to push a system notice to connected clients."""

    message: str = Field(..., min_length=1, max_length=2000)
    severity: Literal["info", "warning", "error", "success"] = "info"
    subject_id: str | None = Field(
        default=None,
        description="Deliver only to this subject; everyone when omitted",
    )


class SystemNotificationResponse(BaseModel):
    """Outcome of a system notice push."""

    delivered: int = Field(..., description="Connections the notice was queued for")
