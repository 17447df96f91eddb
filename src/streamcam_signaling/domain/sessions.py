"""Domain models for paired camera/dashboard sessions."""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from streamcam_signaling.adapters.websocket_channel import ConnectionChannel


class Role(StrEnum):
    """Role a connection takes once it registers."""

    CAMERA = "camera"
    DASHBOARD = "dashboard"

    @property
    def peer(self) -> "Role":
        """Return the opposite role in the camera/dashboard pair."""
        return Role.DASHBOARD if self is Role.CAMERA else Role.CAMERA


@dataclass
class Session:
    """Connections paired under a single pin."""

    camera: "ConnectionChannel | None" = None
    dashboard: "ConnectionChannel | None" = None

    def slot(self, role: Role) -> "ConnectionChannel | None":
        """Return the connection occupying the slot for a role."""
        return self.camera if role is Role.CAMERA else self.dashboard

    def occupy(self, role: Role, channel: "ConnectionChannel | None") -> None:
        """Put a connection into the slot for a role, replacing any holder."""
        if role is Role.CAMERA:
            self.camera = channel
        else:
            self.dashboard = channel

    def is_empty(self) -> bool:
        return self.camera is None and self.dashboard is None


@dataclass
class ConnectionContext:
    """Role and pin assigned to one live connection."""

    role: Role | None = None
    pin: str | None = None

    @property
    def is_registered(self) -> bool:
        return self.role is not None and self.pin is not None

    def assign(self, role: Role, pin: str) -> None:
        """Record the connection's role and pin; allowed only once."""
        if self.is_registered:
            raise ValueError("Connection already registered")
        self.role = role
        self.pin = pin
