"""Web host module"""

from panesession.web.app import create_app
from panesession.web.server import WebServer

__all__ = ["create_app", "WebServer"]
