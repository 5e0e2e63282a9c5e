"""Presentation layer for the real-time event hub."""

from fastapi import APIRouter

from realtime.presentation import routes, websocket

router = APIRouter()
router.include_router(websocket.router)
router.include_router(routes.router)

__all__ = ["router"]
