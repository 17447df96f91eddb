"""Process status queries for the introspection endpoints."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from streamcam_signaling.services.registry import SessionRegistry


@dataclass
class StatusService:
    """Report uptime and session state."""

    registry: SessionRegistry
    clock: Callable[[], float] = time.monotonic
    started_at: float = field(init=False)

    def __post_init__(self) -> None:
        self.started_at = self.clock()

    def uptime_seconds(self) -> float:
        return self.clock() - self.started_at

    def health(self) -> dict[str, object]:
        """Return the health payload served at /health."""
        return {
            "status": "ok",
            "activeSessions": self.registry.session_count(),
            "uptime": self.uptime_seconds(),
        }

    def camera_pins(self) -> list[str]:
        """Return pins that currently have a camera registered."""
        return self.registry.camera_pins()
