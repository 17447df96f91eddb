"""Shared test fixtures."""

import json
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

import pytest

from streamcam_signaling.config import Settings
from streamcam_signaling.containers import AppContainer, build_container
from streamcam_signaling.domain.sessions import ConnectionContext
from streamcam_signaling.services.lifecycle import ConnectionLifecycle
from streamcam_signaling.services.registry import SessionRegistry
from streamcam_signaling.services.router import Delivery, MessageRouter


@dataclass(eq=False)
class FakeChannel:
    """Connection channel that records what it is sent."""

    name: str = "peer"
    inbound: list[str] = field(default_factory=list)
    sent: list[dict[str, object]] = field(default_factory=list)
    open: bool = True
    receive_error: Exception | None = None
    send_error: Exception | None = None
    close_calls: int = 0

    @property
    def is_open(self) -> bool:
        return self.open

    @property
    def peer_address(self) -> str:
        return self.name

    async def send_text(self, text: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(json.loads(text))

    async def messages(self) -> AsyncIterator[str]:
        for raw in self.inbound:
            yield raw
        if self.receive_error is not None:
            raise self.receive_error

    async def close(self) -> None:
        self.close_calls += 1
        self.open = False


@dataclass
class Peer:
    """A fake channel with its connection context, driven through a router."""

    router: MessageRouter
    channel: FakeChannel
    context: ConnectionContext = field(default_factory=ConnectionContext)

    def send(self, payload: dict[str, object] | str) -> list[tuple[object, dict]]:
        raw = payload if isinstance(payload, str) else json.dumps(payload)
        return as_wire(self.router.handle_message(self.context, self.channel, raw))

    def close(self) -> list[tuple[object, dict]]:
        self.channel.open = False
        return as_wire(self.router.handle_close(self.context, self.channel))


def as_wire(deliveries: list[Delivery]) -> list[tuple[object, dict[str, object]]]:
    """Flatten deliveries to (target, message dict) pairs."""
    return [(item.target, item.message.model_dump()) for item in deliveries]


@pytest.fixture
def settings() -> Settings:
    return Settings(port=3999, allowed_origin="*", environment="test")


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def router(registry: SessionRegistry) -> MessageRouter:
    return MessageRouter(registry)


@pytest.fixture
def lifecycle(router: MessageRouter) -> ConnectionLifecycle:
    return ConnectionLifecycle(router)


@pytest.fixture
def make_peer(router: MessageRouter) -> Callable[[str], Peer]:
    def factory(name: str = "peer") -> Peer:
        return Peer(router=router, channel=FakeChannel(name=name))

    return factory


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)


@pytest.fixture
def make_channel() -> Callable[..., FakeChannel]:
    def factory(name: str = "peer", *inbound: dict[str, object] | str) -> FakeChannel:
        raw = [item if isinstance(item, str) else json.dumps(item) for item in inbound]
        return FakeChannel(name=name, inbound=raw)

    return factory
