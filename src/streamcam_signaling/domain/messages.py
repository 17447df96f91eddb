"""Pydantic models for signaling messages exchanged over a connection."""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field, TypeAdapter, ValidationError


class ProtocolError(ValueError):
    """Raised when an inbound payload is not a usable signaling message."""


def _coerce_pin(value: object) -> object:
    """Accept numeric pins the way clients commonly send them."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


Pin = Annotated[str, BeforeValidator(_coerce_pin)]


class CameraRegister(BaseModel):
    """Camera asks to own the camera slot of a pin."""

    type: Literal["camera:register"] = "camera:register"
    pin: Pin


class DashboardJoin(BaseModel):
    """Dashboard asks to watch a pin."""

    type: Literal["dashboard:join"] = "dashboard:join"
    pin: Pin


class Offer(BaseModel):
    """Session description offered by the camera."""

    type: Literal["offer"] = "offer"
    offer: Any = None


class Answer(BaseModel):
    """Session description answered by the dashboard."""

    type: Literal["answer"] = "answer"
    answer: Any = None


class IceCandidate(BaseModel):
    """ICE candidate sent by either peer."""

    type: Literal["ice"] = "ice"
    candidate: Any = None


InboundMessage = Annotated[
    CameraRegister | DashboardJoin | Offer | Answer | IceCandidate,
    Field(discriminator="type"),
]

INBOUND_TYPES = frozenset(
    {"camera:register", "dashboard:join", "offer", "answer", "ice"}
)

_INBOUND_ADAPTER: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


class CameraRegistered(BaseModel):
    type: Literal["camera:registered"] = "camera:registered"
    pin: str


class CameraOnline(BaseModel):
    type: Literal["camera:online"] = "camera:online"
    pin: str


class CameraOffline(BaseModel):
    type: Literal["camera:offline"] = "camera:offline"
    pin: str


class DashboardReady(BaseModel):
    type: Literal["dashboard:ready"] = "dashboard:ready"
    pin: str


class ErrorMessage(BaseModel):
    """Error reported back to the connection that caused it."""

    type: Literal["error"] = "error"
    msg: str


OutboundMessage = (
    CameraRegistered
    | CameraOnline
    | CameraOffline
    | DashboardReady
    | ErrorMessage
    | Offer
    | Answer
    | IceCandidate
)


def decode_message(raw: str) -> InboundMessage:
    """Parse raw text into a typed inbound message or raise ProtocolError."""
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ProtocolError("Invalid JSON") from exc
    if not isinstance(payload, dict):
        raise ProtocolError("Invalid JSON")
    message_type = payload.get("type")
    if not isinstance(message_type, str) or message_type not in INBOUND_TYPES:
        raise ProtocolError(f"Unknown message type: {message_type}")
    try:
        return _INBOUND_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ProtocolError("Invalid JSON") from exc


def encode_message(message: OutboundMessage) -> str:
    """Serialize an outbound message to its JSON wire form."""
    return message.model_dump_json()
