"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from streamcam_signaling.config import Settings
from streamcam_signaling.services.lifecycle import ConnectionLifecycle
from streamcam_signaling.services.registry import SessionRegistry
from streamcam_signaling.services.router import MessageRouter
from streamcam_signaling.services.status import StatusService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_registry: SessionRegistry
    message_router: MessageRouter
    connection_lifecycle: ConnectionLifecycle
    status_service: StatusService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_registry = SessionRegistry()
    message_router = MessageRouter(session_registry)
    connection_lifecycle = ConnectionLifecycle(message_router)
    status_service = StatusService(session_registry)

    async def close_resources() -> None:
        for channel in session_registry.channels():
            try:
                await channel.close()
            except Exception as exc:
                _logger.warning("Failed to close %s: %s", channel.peer_address, exc)

    return AppContainer(
        settings=resolved_settings,
        session_registry=session_registry,
        message_router=message_router,
        connection_lifecycle=connection_lifecycle,
        status_service=status_service,
        close_resources=close_resources,
    )
