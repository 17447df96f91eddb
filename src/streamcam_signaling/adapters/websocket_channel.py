"""Connection channel interface and its WebSocket adapter."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol

from fastapi import WebSocket
from fastapi.websockets import WebSocketState


class ConnectionChannel(Protocol):
    """Bidirectional text channel to one accepted peer."""

    @property
    def is_open(self) -> bool:
        """Return true while messages can still be delivered to the peer."""

    @property
    def peer_address(self) -> str:
        """Return a printable address for the remote peer."""

    async def send_text(self, text: str) -> None:
        """Send one text message to the peer."""

    def messages(self) -> AsyncIterator[str]:
        """Yield inbound text messages until the peer disconnects."""

    async def close(self) -> None:
        """Close the channel if it is still open."""


@dataclass(eq=False)
class WebSocketChannel:
    """Connection channel backed by a FastAPI WebSocket."""

    websocket: WebSocket
    _closed: bool = field(default=False, init=False)

    @property
    def is_open(self) -> bool:
        return (
            not self._closed
            and self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    @property
    def peer_address(self) -> str:
        forwarded = self.websocket.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded
        client = self.websocket.client
        return client.host if client else "unknown"

    async def send_text(self, text: str) -> None:
        await self.websocket.send_text(text)

    async def messages(self) -> AsyncIterator[str]:
        """Yield text frames, decoding binary frames as UTF-8."""
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                self._closed = True
                return
            text = message.get("text")
            if text is None:
                text = (message.get("bytes") or b"").decode("utf-8", errors="replace")
            yield text

    async def close(self) -> None:
        was_open = self.is_open
        self._closed = True
        if was_open:
            await self.websocket.close()
