"""ASGI entrypoint for the signaling server."""

from streamcam_signaling.api.app import create_app
from streamcam_signaling.containers import build_container

app = create_app(build_container())
