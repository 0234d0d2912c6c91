"""Request models and action handling for the web host"""

import json
from dataclasses import dataclass
from typing import Awaitable, Callable

from fastapi import WebSocket
from pydantic import BaseModel, ValidationError

from panesession.core import format_address
from panesession.pane import Action, ActionKind, SessionManager
from panesession.telemetry import get_logger

logger = get_logger(__name__)


class ActionRequest(BaseModel):
    """Action request body"""

    action: str  # ActionKind value: "open", "close", "move", ...
    pane_id: str | None = None
    data: dict = {}


class NavigateRequest(BaseModel):
    """Address bar submission"""

    text: str
    pane_id: str | None = None  # Focused pane when omitted


class ActionResponse(BaseModel):
    """Action response"""

    applied: bool
    pane_id: str | None = None
    message: str = ""
    session: dict


@dataclass
class MessageHandler:
    """Turns requests into queued actions and reports the outcome."""

    manager: SessionManager
    broadcast: Callable[[dict], Awaitable[None]]

    async def submit(self, request: ActionRequest) -> ActionResponse:
        """Queue an action, drain the queue and report the result."""
        try:
            kind = ActionKind(request.action)
        except ValueError:
            logger.warning(f"[Handler] Unknown action: {request.action}")
            return self._response(False, message=f"Unknown action: {request.action}")
        if kind.needs_pane and not request.pane_id:
            return self._response(False, message=f"{kind.value} requires pane_id")

        if not self.manager.enqueue(Action(kind, request.pane_id, dict(request.data))):
            return self._response(False, message="Queue full")
        try:
            await self.manager.process_queued()
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"[Handler] Rejected {kind.value}: {e!r}")
            return self._response(False, message=f"Invalid {kind.value} request: {e}")

        result = self.manager.last_result
        applied = result is not None and result.applied
        if applied:
            await self.broadcast({"type": "session", "session": self.manager.session.to_dict()})
        return self._response(
            applied,
            pane_id=result.pane_id if result else None,
            message="" if applied else "No change",
        )

    async def navigate(self, request: NavigateRequest) -> ActionResponse:
        """Point a pane at the address typed by the user and mark it loading."""
        if not request.text.strip():
            return self._response(False, message="No change")
        pane_id = request.pane_id or self.manager.session.focused_pane_id
        url = format_address(request.text)
        return await self.submit(ActionRequest(
            action=ActionKind.UPDATE.value,
            pane_id=pane_id,
            data={"url": url, "rendered_url": url, "is_loading": True},
        ))

    async def handle(self, websocket: WebSocket, data: str) -> None:
        """Handle one WebSocket message (a JSON ActionRequest)."""
        try:
            request = ActionRequest.model_validate(json.loads(data))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"[Handler] Bad message: {e}")
            await websocket.send_json({
                "type": "action_result",
                "applied": False,
                "pane_id": None,
                "message": "Bad message",
            })
            return

        response = await self.submit(request)
        await websocket.send_json({
            "type": "action_result",
            "applied": response.applied,
            "pane_id": response.pane_id,
            "message": response.message,
        })

    def _response(self, applied: bool, pane_id: str | None = None, message: str = "") -> ActionResponse:
        return ActionResponse(
            applied=applied,
            pane_id=pane_id,
            message=message,
            session=self.manager.session.to_dict(),
        )
