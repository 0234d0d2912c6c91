"""PaneSession - ordered pane collection with focus and closed-pane history"""

from .pane import Action, ActionKind, OpenRequest, Pane, Session, SessionManager

__all__ = [
    "Pane",
    "Session",
    "OpenRequest",
    "Action",
    "ActionKind",
    "SessionManager",
]
