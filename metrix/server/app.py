"""
FastAPI application factory for the MetriX dashboard API.

Creates the app with all routes and the lifespan that owns the shared HTTP
client and the background poller.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from metrix import __version__
from metrix.config.loader import (
    load_config, get_demo_points, get_poll_interval, get_request_timeout,
)
from metrix.config.store import read_data_source
from metrix.insights.gemini import build_insight_provider
from metrix.server.models.common import ErrorResponse
from metrix.server.websocket import ConnectionManager
from metrix.sources.poller import DashboardPoller

logger = logging.getLogger("metrix.server")


def build_poller(
    config: dict,
    config_path: Optional[Path],
    client: Optional[httpx.AsyncClient],
    manager: Optional[ConnectionManager] = None,
) -> DashboardPoller:
    """Poller that re-reads the data source from config_path every cycle."""
    return DashboardPoller(
        source_loader=lambda: read_data_source(config_path),
        client=client,
        poll_interval=get_poll_interval(config),
        timeout=get_request_timeout(config),
        demo_points=get_demo_points(config),
        on_update=manager.broadcast_result if manager else None,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage the HTTP client, poller and WebSocket manager lifecycle."""
    config_path = getattr(app.state, "config_path", None)
    config = app.state.config if hasattr(app.state, "config") else load_config(config_path)
    app.state.config = config

    client = httpx.AsyncClient()
    app.state.http_client = client

    if not hasattr(app.state, "ws_manager"):
        app.state.ws_manager = ConnectionManager()
    if not hasattr(app.state, "poller"):
        app.state.poller = build_poller(config, config_path, client, app.state.ws_manager)
    if not hasattr(app.state, "insight_provider"):
        app.state.insight_provider = build_insight_provider(config, client)

    stop_event = asyncio.Event()
    poll_task = None
    if app.state.start_polling:
        poll_task = asyncio.create_task(app.state.poller.run(stop_event))

    yield

    # Shutdown
    stop_event.set()
    if poll_task is not None:
        poll_task.cancel()
        try:
            await poll_task
        except asyncio.CancelledError:
            pass
    await client.aclose()


def create_app(
    config: dict = None,
    config_path: Optional[Path] = None,
    start_polling: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Loaded configuration (loaded from config_path if None)
        config_path: Config file backing the data-source store
        start_polling: Run the background refresh loop during the lifespan
    """
    app = FastAPI(
        title="MetriX Dashboard API",
        description="Traffic, error and latency dashboard for an external metrics source",
        version=__version__,
        lifespan=lifespan,
    )

    if config:
        app.state.config = config
    app.state.config_path = config_path
    app.state.start_polling = start_polling

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", detail=str(exc)).model_dump(),
        )

    @app.websocket("/ws/live")
    async def websocket_live(websocket: WebSocket):
        manager = websocket.app.state.ws_manager
        await manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                if data == "ping":
                    await websocket.send_text('{"type":"pong"}')
        except WebSocketDisconnect:
            await manager.disconnect(websocket)
        except Exception:
            logger.exception("WebSocket connection failed")
            await manager.disconnect(websocket)

    from metrix.server.routes.health import router as health_router
    from metrix.server.routes.dashboard import router as dashboard_router
    from metrix.server.routes.settings import router as settings_router
    from metrix.server.routes.insights import router as insights_router
    from metrix.server.routes.integration import router as integration_router

    app.include_router(health_router)
    app.include_router(dashboard_router)
    app.include_router(settings_router)
    app.include_router(insights_router)
    app.include_router(integration_router)

    return app
