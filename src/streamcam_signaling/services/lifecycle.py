"""Per-connection lifecycle: receive loop, delivery and close handling."""

import logging
from dataclasses import dataclass

from streamcam_signaling.adapters.websocket_channel import ConnectionChannel
from streamcam_signaling.domain.messages import encode_message
from streamcam_signaling.domain.sessions import ConnectionContext
from streamcam_signaling.services.router import Delivery, MessageRouter

_logger = logging.getLogger(__name__)


@dataclass
class ConnectionLifecycle:
    """Drive one connection from accept to close."""

    router: MessageRouter

    async def run(self, channel: ConnectionChannel) -> None:
        """Feed a connection's messages to the router until it closes.

        Errors raised by the channel are reported and then handled like a
        normal close; they never reach other connections.
        """
        context = ConnectionContext()
        _logger.info("[WS] New connection from %s", channel.peer_address)
        try:
            async for raw in channel.messages():
                await self.deliver(self.router.handle_message(context, channel, raw))
        except Exception as exc:
            _logger.error("[WS error] %s: %s", context.pin or "unknown", exc)
        finally:
            deliveries = self.router.handle_close(context, channel)
            try:
                await channel.close()
            except Exception as exc:
                _logger.warning("Failed to close connection: %s", exc)
            await self.deliver(deliveries)

    async def deliver(self, deliveries: list[Delivery]) -> None:
        """Send each delivery once, dropping any that fail."""
        for delivery in deliveries:
            try:
                await delivery.target.send_text(encode_message(delivery.message))
            except Exception as exc:
                _logger.warning(
                    "Dropped %s message for %s: %s",
                    delivery.message.type,
                    delivery.target.peer_address,
                    exc,
                )
