"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from starlette.middleware.sessions import SessionMiddleware

from iam.dependencies.capability import capability_guard
from iam.presentation import hub_router as iam_hub_router
from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_sessionmaker,
    get_write_sessionmaker,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_realtime_settings,
    get_session_settings,
    get_settings,
)
from infrastructure.version import __version__
from realtime.application import EventHub, HubBroadcaster
from realtime.infrastructure import SqlAlchemyHubStore
from realtime.presentation import router as realtime_router

configure_logging(debug=get_settings().debug)


@asynccontextmanager
async def aethex_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Event hub and broadcaster creation (broadcaster optional)
    - Database engine disposal on shutdown
    """
    probe = DefaultStartupProbe()
    realtime = get_realtime_settings()

    store = SqlAlchemyHubStore(
        read_session_factory=get_read_sessionmaker(),
        write_session_factory=get_write_sessionmaker(),
    )
    hub = EventHub(
        store=store,
        alert_snapshot_limit=realtime.alert_snapshot_limit,
        achievement_snapshot_limit=realtime.achievement_snapshot_limit,
        notification_limit=realtime.notification_limit,
        queue_size=realtime.outbound_queue_size,
        trust_client_auth=realtime.trust_client_auth,
    )
    broadcaster = HubBroadcaster(
        hub=hub,
        store=store,
        metrics_interval_seconds=realtime.metrics_interval_seconds,
        alert_poll_interval_seconds=realtime.alert_poll_interval_seconds,
        alert_batch_limit=realtime.alert_snapshot_limit,
    )
    app.state.event_hub = hub
    app.state.hub_broadcaster = broadcaster

    if realtime.enabled:
        await broadcaster.start()
    probe.application_started(version=__version__, broadcaster_enabled=realtime.enabled)

    try:
        yield
    finally:
        if broadcaster.is_running:
            await broadcaster.stop()
        await close_database_connections()
        probe.application_stopped()


session_settings = get_session_settings()

app = FastAPI(
    title="AeThex API",
    description="Tenant-aware access control and real-time event hub",
    version=__version__,
    lifespan=aethex_lifespan,
    dependencies=[Depends(capability_guard)],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=session_settings.secret_key.get_secret_value(),
    session_cookie=session_settings.cookie_name,
    max_age=session_settings.max_age_seconds,
    same_site=session_settings.same_site,
    https_only=session_settings.https_only,
)

# Include IAM bounded context routes
app.include_router(iam_router)
app.include_router(iam_hub_router)

# Include Realtime bounded context routes
app.include_router(realtime_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
