"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from streamcam_signaling.adapters.websocket_channel import WebSocketChannel
from streamcam_signaling.app_logging import configure_logging
from streamcam_signaling.config import parse_allowed_origins
from streamcam_signaling.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        state_container: AppContainer = app.state.container
        logger.info(
            "Shutting down with %s active sessions",
            state_container.session_registry.session_count(),
        )
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.allowed_origin),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Report uptime and the number of active sessions."""
        state_container: AppContainer = request.app.state.container
        return state_container.status_service.health()

    @app.get("/sessions")
    async def sessions(request: Request) -> dict[str, list[str]]:
        """List pins that currently have a camera registered."""
        state_container: AppContainer = request.app.state.container
        return {"pins": state_container.status_service.camera_pins()}

    @app.websocket("/")
    @app.websocket("/ws")
    async def signaling(websocket: WebSocket) -> None:
        """Relay signaling messages for one camera or dashboard."""
        state_container: AppContainer = websocket.app.state.container
        await websocket.accept()
        await state_container.connection_lifecycle.run(WebSocketChannel(websocket))

    return app
