"""FastAPI application setup"""

import uvicorn

from panesession import config
from panesession.pane import SessionManager
from panesession.telemetry import configure_logging, get_logger
from panesession.web.server import WebServer

logger = get_logger(__name__)


def create_app(manager: SessionManager | None = None) -> WebServer:
    """Create the web host around a session manager (a fresh one when None)."""
    return WebServer(manager if manager is not None else SessionManager())


def main():
    """Entry point"""
    configure_logging()
    server = create_app()
    logger.info(f"[WebServer] Starting at http://{config.WEB_HOST}:{config.WEB_PORT}")
    try:
        uvicorn.run(server.app, host=config.WEB_HOST, port=config.WEB_PORT, log_level=config.LOG_LEVEL.lower())
    except KeyboardInterrupt:
        print("\nServer stopped")
