"""SessionManager - explicit session handle

Owns the current Session and applies actions to it:
- id factory and clock injection (transitions stay pure)
- action dispatch through the reducer table
- dispatch queue draining (serialized host input)
- bounded action history, metrics and logging
- optional invariant checking
- change callback for hosts
"""

import time
from collections import deque
from collections.abc import Callable
from typing import Any

from ..config import (
    ACTION_HISTORY_MAX_LENGTH,
    CHECK_INVARIANTS,
    MAX_CLOSED,
    MAX_PANES,
    METRICS_ENABLED,
)
from ..core.ids import IdFactory, new_pane_id, short_id
from ..telemetry import format_pane_log, get_logger, metrics
from . import transitions
from .invariants import check_pinned_first, find_violations
from .queue import DispatchQueue
from .types import (
    Action,
    ActionHistoryEntry,
    ActionKind,
    ActionResult,
    OpenRequest,
    Pane,
    Session,
)

logger = get_logger(__name__)

# Callback types
OnChangeCallback = Callable[[Session, Action], Any]
Clock = Callable[[], float]


class SessionManager:
    """Session manager

    Holds one Session and replaces it on every applied action. Precondition
    failures are silent no-ops: the session stays the same object and the
    returned ActionResult has ``applied=False``.

    Attributes:
        session: Current session (read-only view)
        queue: Dispatch queue drained by process_queued()
        history: Recent actions (bounded)
    """

    def __init__(
        self,
        session: Session | None = None,
        *,
        id_factory: IdFactory = new_pane_id,
        clock: Clock = time.time,
        max_panes: int = MAX_PANES,
        max_closed: int = MAX_CLOSED,
        queue: DispatchQueue | None = None,
        check_invariants: bool = CHECK_INVARIANTS,
    ):
        """Initialize

        Args:
            session: Starting session; a fresh single-pane session when None
            id_factory: Source of fresh pane ids
            clock: Timestamp source for last_accessed
            max_panes: Pane ceiling for a fresh session
            max_closed: Closed history depth for a fresh session
            queue: Dispatch queue, created when None
            check_invariants: Verify invariants after every applied action
        """
        self._id_factory = id_factory
        self._clock = clock
        self._check_invariants = check_invariants
        self._queue = queue if queue is not None else DispatchQueue()
        self._history: deque[ActionHistoryEntry] = deque(maxlen=ACTION_HISTORY_MAX_LENGTH)
        self._on_change: OnChangeCallback | None = None
        self._last_result: ActionResult | None = None
        # Pinned-first ordering is only required until a move breaks it
        self._ordered = True

        if session is None:
            session = Session.initial(
                id_factory(), clock(), max_panes=max_panes, max_closed=max_closed
            )
        self._session = session

    # === Properties ===

    @property
    def session(self) -> Session:
        return self._session

    @property
    def queue(self) -> DispatchQueue:
        return self._queue

    @property
    def history(self) -> list[ActionHistoryEntry]:
        return list(self._history)

    @property
    def last_result(self) -> ActionResult | None:
        """Result of the most recent dispatch"""
        return self._last_result

    def set_on_change(self, callback: OnChangeCallback | None) -> None:
        """Set the callback invoked with (session, action) after each applied action."""
        self._on_change = callback

    # === Dispatch ===

    def dispatch(self, action: Action) -> ActionResult:
        """Apply one action.

        Args:
            action: Action to apply

        Returns:
            ActionResult; ``pane_id`` is the created pane for open/restore/reset
            and the target otherwise, None when nothing was applied
        """
        before = self._session
        after, pane_id = transitions.apply(
            before, action, now=self._clock(), id_factory=self._id_factory
        )
        applied = after is not before
        pane_count = len(after.panes)

        self._history.append(ActionHistoryEntry(
            kind=action.kind,
            pane_id=pane_id if applied else action.pane_id,
            applied=applied,
            pane_count=pane_count,
        ))

        if not applied:
            logger.debug(format_pane_log("Session", action.pane_id, f"No-op {action.kind.value}"))
            if METRICS_ENABLED:
                metrics.inc("action.noop", {"kind": action.kind.value})
            self._last_result = ActionResult(applied=False)
            return self._last_result

        self._session = after
        if check_pinned_first(after) is None:
            self._ordered = True
        elif action.kind == ActionKind.MOVE:
            self._ordered = False

        if METRICS_ENABLED:
            metrics.inc("action.ok", {"kind": action.kind.value})

        log = logger.info if action.kind.is_structural else logger.debug
        log(format_pane_log(
            "Session",
            pane_id,
            f"{action.kind.value} | panes={pane_count} | "
            f"focused={short_id(after.focused_pane_id)} | closed={len(after.closed_history)}",
        ))

        if self._check_invariants:
            self._verify(action)

        if self._on_change:
            self._on_change(after, action)

        self._last_result = ActionResult(applied=True, pane_id=pane_id)
        return self._last_result

    def _verify(self, action: Action) -> None:
        violations = find_violations(self._session, require_ordering=self._ordered)
        for violation in violations:
            logger.error(f"[Session] Invariant violated after {action.kind.value}: {violation}")
            if METRICS_ENABLED:
                metrics.inc("invariant.violation", {"kind": action.kind.value})

    # === Queue ===

    def enqueue(self, action: Action) -> bool:
        """Queue an action for process_queued(); False when the queue is full."""
        return self._queue.enqueue(action)

    async def process_queued(self) -> int:
        """Apply queued actions in FIFO order.

        Re-entrant calls return immediately; the running drain picks up
        anything queued meanwhile.

        Returns:
            Number of actions processed
        """
        if self._queue.is_processing:
            return 0

        total = 0
        self._queue.set_processing(True)
        try:
            while not self._queue.is_empty:
                action = self._queue.dequeue()
                if action:
                    self.dispatch(action)
                    total += 1
        finally:
            self._queue.set_processing(False)

        return total

    # === Operations ===

    def open(self, request: OpenRequest | None = None, insert_at: int | None = None) -> str | None:
        """Open a pane; returns its id, or None at capacity."""
        request = request or OpenRequest.blank()
        data: dict[str, Any] = {
            "url": request.url,
            "title": request.title,
            "favicon": request.favicon,
            "is_loading": request.is_loading,
        }
        if insert_at is not None:
            data["insert_at"] = insert_at
        return self.dispatch(Action(ActionKind.OPEN, data=data)).pane_id

    def close(self, pane_id: str) -> bool:
        return self.dispatch(Action(ActionKind.CLOSE, pane_id)).applied

    def focus(self, pane_id: str) -> bool:
        return self.dispatch(Action(ActionKind.FOCUS, pane_id)).applied

    def update(self, pane_id: str, **fields: Any) -> bool:
        """Merge url/rendered_url/title/favicon/is_loading onto a pane."""
        return self.dispatch(Action(ActionKind.UPDATE, pane_id, data=fields)).applied

    def toggle_pin(self, pane_id: str) -> bool:
        return self.dispatch(Action(ActionKind.TOGGLE_PIN, pane_id)).applied

    def toggle_mute(self, pane_id: str) -> bool:
        return self.dispatch(Action(ActionKind.TOGGLE_MUTE, pane_id)).applied

    def set_audible(self, pane_id: str, audible: bool) -> bool:
        return self.dispatch(Action(ActionKind.SET_AUDIBLE, pane_id, data={"audible": audible})).applied

    def move(self, pane_id: str, new_index: int) -> bool:
        return self.dispatch(Action(ActionKind.MOVE, pane_id, data={"new_index": new_index})).applied

    def restore_last_closed(self) -> str | None:
        """Reopen the most recently closed pane; returns its new id or None."""
        return self.dispatch(Action(ActionKind.RESTORE)).pane_id

    def reset(self) -> str | None:
        """Start over with a single blank pane; returns its id."""
        return self.dispatch(Action(ActionKind.RESET)).pane_id

    # === Queries ===

    def get_pane(self, pane_id: str) -> Pane | None:
        return transitions.get_pane(self._session, pane_id)

    @property
    def focused_pane(self) -> Pane:
        return transitions.focused_pane(self._session)

    def get_history_log(self) -> str:
        """Action history as text (debugging)."""
        if not self._history:
            return "  (no history)"
        return "\n".join(f"  {entry}" for entry in self._history)

    def to_dict(self) -> dict:
        return self._session.to_dict()
