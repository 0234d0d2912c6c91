"""Pane module

Core pieces of the session manager:
- types: data types (Pane, Session, OpenRequest, Action, ...)
- transitions: pure transition functions and the reducer table
- invariants: session invariant checks
- queue: DispatchQueue
- manager: SessionManager
"""

from .types import (
    Pane,
    Session,
    OpenRequest,
    ActionKind,
    Action,
    ActionResult,
    ActionHistoryEntry,
    UPDATABLE_FIELDS,
)
from .transitions import (
    open_pane,
    close_pane,
    focus_pane,
    update_pane,
    toggle_pin,
    toggle_mute,
    set_audible,
    move_pane,
    restore_last_closed,
    reset_session,
    get_pane,
    focused_pane,
    pane_index,
    apply,
)
from .invariants import find_violations
from .queue import DispatchQueue
from .manager import SessionManager

__all__ = [
    # Types
    "Pane",
    "Session",
    "OpenRequest",
    "ActionKind",
    "Action",
    "ActionResult",
    "ActionHistoryEntry",
    "UPDATABLE_FIELDS",
    # Transitions
    "open_pane",
    "close_pane",
    "focus_pane",
    "update_pane",
    "toggle_pin",
    "toggle_mute",
    "set_audible",
    "move_pane",
    "restore_last_closed",
    "reset_session",
    "get_pane",
    "focused_pane",
    "pane_index",
    "apply",
    # Invariants
    "find_violations",
    # Queue
    "DispatchQueue",
    # Manager
    "SessionManager",
]
