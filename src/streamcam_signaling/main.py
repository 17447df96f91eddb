"""Command-line entry point that serves the signaling relay."""

import logging

import uvicorn

from streamcam_signaling.api.app import create_app
from streamcam_signaling.app_logging import configure_logging
from streamcam_signaling.config import Settings
from streamcam_signaling.containers import build_container

_logger = logging.getLogger(__name__)


def main() -> None:
    """Start the server on the configured host and port."""
    settings = Settings()
    configure_logging(settings.log_level)
    app = create_app(build_container(settings))
    _logger.info("StreamCam Signaling Server")
    _logger.info("Listening on port %s", settings.port)
    _logger.info("Health: http://localhost:%s/health", settings.port)
    _logger.info("Active sessions: http://localhost:%s/sessions", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
