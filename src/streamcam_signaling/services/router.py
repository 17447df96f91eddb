"""Signaling protocol: registration, relay and disconnect decisions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from streamcam_signaling.domain.messages import (
    Answer,
    CameraOffline,
    CameraOnline,
    CameraRegister,
    CameraRegistered,
    DashboardJoin,
    DashboardReady,
    ErrorMessage,
    IceCandidate,
    Offer,
    OutboundMessage,
    ProtocolError,
    decode_message,
)
from streamcam_signaling.domain.sessions import ConnectionContext, Role
from streamcam_signaling.services.registry import SessionRegistry

if TYPE_CHECKING:
    from streamcam_signaling.adapters.websocket_channel import ConnectionChannel

_logger = logging.getLogger(__name__)

PIN_IN_USE = "PIN already in use by another camera"
ALREADY_REGISTERED = "Connection already registered"


@dataclass(frozen=True)
class Delivery:
    """One outbound message and the connection it goes to."""

    target: "ConnectionChannel"
    message: OutboundMessage


@dataclass(frozen=True)
class RelayRoute:
    """Where a relayed message type goes, given the sender's role."""

    resolve_target: Callable[[Role], Role]
    requires_open_target: bool = False


# One camera and one dashboard per pin: offers flow to the dashboard, answers
# to the camera, ICE candidates to whichever side did not send them.
RELAY_ROUTES: dict[str, RelayRoute] = {
    "offer": RelayRoute(lambda _sender: Role.DASHBOARD),
    "answer": RelayRoute(lambda _sender: Role.CAMERA),
    "ice": RelayRoute(lambda sender: sender.peer, requires_open_target=True),
}


@dataclass
class MessageRouter:
    """Apply inbound messages to the registry and decide what to send.

    The router never performs I/O. Each call mutates the registry and
    returns the deliveries the caller should make, so a single call is an
    atomic step as long as callers do not run two calls concurrently.
    """

    registry: SessionRegistry

    def handle_message(
        self, context: ConnectionContext, channel: "ConnectionChannel", raw: str
    ) -> list[Delivery]:
        """Handle one raw inbound message from a connection."""
        try:
            message = decode_message(raw)
        except ProtocolError as exc:
            return [Delivery(channel, ErrorMessage(msg=str(exc)))]

        if isinstance(message, CameraRegister):
            return self._register_camera(context, channel, message.pin)
        if isinstance(message, DashboardJoin):
            return self._join_dashboard(context, channel, message.pin)
        return self._relay(context, message)

    def handle_close(
        self, context: ConnectionContext, channel: "ConnectionChannel"
    ) -> list[Delivery]:
        """Release whatever the closing connection held in the registry."""
        role, pin = context.role, context.pin
        if role is None or pin is None:
            return []

        deliveries: list[Delivery] = []
        if role is Role.CAMERA:
            _logger.info("[%s] Camera disconnected", pin)
            if self.registry.clear_slot(pin, Role.CAMERA, owner=channel):
                session = self.registry.get(pin)
                dashboard = session.dashboard if session else None
                if dashboard is not None and dashboard.is_open:
                    deliveries.append(Delivery(dashboard, CameraOffline(pin=pin)))
        else:
            _logger.info("[%s] Dashboard disconnected", pin)
            self.registry.clear_slot(pin, Role.DASHBOARD, owner=channel)

        self.registry.try_collect(pin)
        return deliveries

    def _register_camera(
        self, context: ConnectionContext, channel: "ConnectionChannel", pin: str
    ) -> list[Delivery]:
        if context.is_registered:
            return [Delivery(channel, ErrorMessage(msg=ALREADY_REGISTERED))]

        session = self.registry.get_or_create(pin)
        if session.camera is not None and session.camera.is_open:
            _logger.warning("[%s] Camera rejected, pin already in use", pin)
            return [Delivery(channel, ErrorMessage(msg=PIN_IN_USE))]

        context.assign(Role.CAMERA, pin)
        session.occupy(Role.CAMERA, channel)
        _logger.info("[%s] Camera registered", pin)

        deliveries = [Delivery(channel, CameraRegistered(pin=pin))]
        if session.dashboard is not None and session.dashboard.is_open:
            deliveries.append(Delivery(session.dashboard, CameraOnline(pin=pin)))
        return deliveries

    def _join_dashboard(
        self, context: ConnectionContext, channel: "ConnectionChannel", pin: str
    ) -> list[Delivery]:
        if context.is_registered:
            return [Delivery(channel, ErrorMessage(msg=ALREADY_REGISTERED))]

        session = self.registry.get_or_create(pin)
        context.assign(Role.DASHBOARD, pin)
        # TODO: decide whether a replaced dashboard should be closed or told.
        session.occupy(Role.DASHBOARD, channel)
        _logger.info("[%s] Dashboard joined", pin)

        camera = session.camera
        if camera is not None and camera.is_open:
            return [
                Delivery(channel, CameraOnline(pin=pin)),
                Delivery(camera, DashboardReady(pin=pin)),
            ]
        return [Delivery(channel, CameraOffline(pin=pin))]

    def _relay(
        self, context: ConnectionContext, message: Offer | Answer | IceCandidate
    ) -> list[Delivery]:
        role, pin = context.role, context.pin
        if role is None or pin is None:
            return []
        session = self.registry.get(pin)
        if session is None:
            return []

        route = RELAY_ROUTES[message.type]
        target_role = route.resolve_target(role)
        target = session.slot(target_role)
        if target is None:
            return []
        if route.requires_open_target and not target.is_open:
            return []

        if isinstance(message, IceCandidate):
            _logger.debug("[%s] Relaying ice -> %s", pin, target_role)
        else:
            _logger.info("[%s] Relaying %s -> %s", pin, message.type, target_role)
        return [Delivery(target, message)]
