"""In-memory registry of sessions keyed by pin."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from streamcam_signaling.domain.sessions import Role, Session

if TYPE_CHECKING:
    from streamcam_signaling.adapters.websocket_channel import ConnectionChannel

_logger = logging.getLogger(__name__)


@dataclass
class SessionRegistry:
    """Process-wide store of sessions.

    A session lives from the first registration on its pin until a slot clear
    leaves both of its slots empty. Registration never removes sessions;
    only ``try_collect`` does.
    """

    _sessions: dict[str, Session]

    def __init__(self) -> None:
        self._sessions = {}

    def __contains__(self, pin: object) -> bool:
        return pin in self._sessions

    def get_or_create(self, pin: str) -> Session:
        """Return the session for a pin, creating an empty one if needed."""
        session = self._sessions.get(pin)
        if session is None:
            session = Session()
            self._sessions[pin] = session
        return session

    def get(self, pin: str) -> Session | None:
        """Return the session for a pin, if present."""
        return self._sessions.get(pin)

    def clear_slot(
        self, pin: str, role: Role, owner: "ConnectionChannel | None" = None
    ) -> bool:
        """Empty a session slot and report whether anything was cleared.

        When ``owner`` is given the slot is only cleared while it still holds
        that exact connection.
        """
        session = self._sessions.get(pin)
        if session is None:
            return False
        current = session.slot(role)
        if current is None:
            return False
        if owner is not None and current is not owner:
            return False
        session.occupy(role, None)
        return True

    def try_collect(self, pin: str) -> bool:
        """Drop the session for a pin when both slots are empty."""
        session = self._sessions.get(pin)
        if session is None or not session.is_empty():
            return False
        del self._sessions[pin]
        _logger.info("[%s] Session cleaned up", pin)
        return True

    def session_count(self) -> int:
        return len(self._sessions)

    def camera_pins(self) -> list[str]:
        """Return pins whose camera slot is occupied."""
        return [
            pin
            for pin, session in self._sessions.items()
            if session.camera is not None
        ]

    def channels(self) -> list["ConnectionChannel"]:
        """Return every connection currently referenced by a session."""
        found: list[ConnectionChannel] = []
        for session in self._sessions.values():
            for role in Role:
                channel = session.slot(role)
                if channel is not None and channel not in found:
                    found.append(channel)
        return found
