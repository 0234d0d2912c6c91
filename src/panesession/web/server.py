"""Web server"""

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from panesession.pane import SessionManager
from panesession.telemetry import get_logger
from panesession.web.handlers import (
    ActionRequest,
    ActionResponse,
    MessageHandler,
    NavigateRequest,
)

logger = get_logger(__name__)


class WebServer:
    """HTTP + WebSocket host for one SessionManager"""

    def __init__(self, manager: SessionManager):
        self.app = FastAPI(title="PaneSession")
        self.manager = manager
        self.clients: list[WebSocket] = []

        self._handler = MessageHandler(manager=manager, broadcast=self.broadcast)

        self._setup_routes()

    def _setup_routes(self):
        @self.app.get("/api/session")
        async def get_session():
            """Current session view"""
            return self.manager.session.to_dict()

        @self.app.get("/api/history")
        async def get_history():
            """Recent actions (debugging)"""
            return [entry.to_dict() for entry in self.manager.history]

        @self.app.post("/api/actions", response_model=ActionResponse)
        async def post_action(request: ActionRequest):
            """Dispatch one action"""
            return await self._handler.submit(request)

        @self.app.post("/api/navigate", response_model=ActionResponse)
        async def post_navigate(request: NavigateRequest):
            """Load address bar input into a pane"""
            return await self._handler.navigate(request)

        @self.app.websocket("/ws")
        async def websocket_endpoint(websocket: WebSocket):
            await websocket.accept()
            self.clients.append(websocket)
            try:
                await websocket.send_json({"type": "session", "session": self.manager.session.to_dict()})
                while True:
                    data = await websocket.receive_text()
                    await self._handler.handle(websocket, data)
            except WebSocketDisconnect:
                self.clients.remove(websocket)

    async def broadcast(self, data: dict):
        """Send a message to every connected client, dropping dead ones."""
        for client in list(self.clients):
            try:
                await client.send_json(data)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug(f"[WebServer] Dropping client: {e!r}")
                if client in self.clients:
                    self.clients.remove(client)
