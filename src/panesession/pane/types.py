"""Pane module data types

Contains:
- Pane: a single tab-like unit (immutable)
- Session: ordered panes + focus pointer + closed history (immutable)
- OpenRequest: arguments for opening a pane
- ActionKind / Action: host dispatch DTO
- ActionResult / ActionHistoryEntry: manager bookkeeping
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from ..config import DEFAULT_TITLE, MAX_CLOSED, MAX_PANES

# Fields a host may change through update()
UPDATABLE_FIELDS = frozenset({"url", "rendered_url", "title", "favicon", "is_loading"})


@dataclass(frozen=True)
class Pane:
    """A single pane (browser-style tab).

    Attributes:
        id: Opaque unique identifier
        url: Address the pane points at (may be mid-edit)
        rendered_url: Target currently loaded/displayed, may lag ``url``
        title: Display title
        favicon: Optional icon URL
        is_loading: Content is loading
        is_pinned: Pinned panes sort before unpinned ones
        is_audible: Content is producing audio
        is_muted: Audio muted by the user
        last_accessed: Timestamp of last focus/update
        index: Position in the session ordering
    """
    id: str
    url: str = ""
    rendered_url: str = ""
    title: str = DEFAULT_TITLE
    favicon: str | None = None
    is_loading: bool = False
    is_pinned: bool = False
    is_audible: bool = False
    is_muted: bool = False
    last_accessed: float = 0.0
    index: int = 0

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dict."""
        return {
            "id": self.id,
            "url": self.url,
            "rendered_url": self.rendered_url,
            "title": self.title,
            "favicon": self.favicon,
            "is_loading": self.is_loading,
            "is_pinned": self.is_pinned,
            "is_audible": self.is_audible,
            "is_muted": self.is_muted,
            "last_accessed": self.last_accessed,
            "index": self.index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Pane":
        return cls(
            id=data["id"],
            url=data.get("url", ""),
            rendered_url=data.get("rendered_url", ""),
            title=data.get("title", DEFAULT_TITLE),
            favicon=data.get("favicon"),
            is_loading=data.get("is_loading", False),
            is_pinned=data.get("is_pinned", False),
            is_audible=data.get("is_audible", False),
            is_muted=data.get("is_muted", False),
            last_accessed=data.get("last_accessed", 0.0),
            index=data.get("index", 0),
        )


@dataclass(frozen=True)
class OpenRequest:
    """Arguments for opening a pane.

    ``blank()`` is the "new tab" shape, ``for_url()`` opens a target and
    starts it in the loading state.
    """
    url: str = ""
    title: str = DEFAULT_TITLE
    favicon: str | None = None
    is_loading: bool = False

    @classmethod
    def blank(cls) -> "OpenRequest":
        return cls()

    @classmethod
    def for_url(cls, url: str, title: str, favicon: str | None = None) -> "OpenRequest":
        return cls(url=url, title=title, favicon=favicon, is_loading=True)

    def build(self, pane_id: str, now: float, index: int) -> Pane:
        """Build the pane this request describes."""
        return Pane(
            id=pane_id,
            url=self.url,
            rendered_url=self.url,
            title=self.title,
            favicon=self.favicon,
            is_loading=self.is_loading,
            last_accessed=now,
            index=index,
        )


@dataclass(frozen=True)
class Session:
    """Full manager state.

    Replaced as a whole on every transition; a no-op transition returns the
    same object.

    Attributes:
        panes: Ordered panes, unique by id
        focused_pane_id: Id of the pane with input focus
        closed_history: Removed pane snapshots, most recently closed first
        max_panes: Pane ceiling
        max_closed: Closed history depth
    """
    panes: tuple[Pane, ...]
    focused_pane_id: str
    closed_history: tuple[Pane, ...] = ()
    max_panes: int = MAX_PANES
    max_closed: int = MAX_CLOSED

    @classmethod
    def initial(
        cls,
        pane_id: str,
        now: float,
        max_panes: int = MAX_PANES,
        max_closed: int = MAX_CLOSED,
    ) -> "Session":
        """Create a session holding a single blank, focused pane."""
        if max_panes < 1:
            raise ValueError(f"max_panes must be >= 1, got {max_panes}")
        if max_closed < 0:
            raise ValueError(f"max_closed must be >= 0, got {max_closed}")
        pane = OpenRequest.blank().build(pane_id, now, 0)
        return cls(
            panes=(pane,),
            focused_pane_id=pane_id,
            max_panes=max_panes,
            max_closed=max_closed,
        )

    def __len__(self) -> int:
        return len(self.panes)

    @property
    def pane_ids(self) -> list[str]:
        return [p.id for p in self.panes]

    @property
    def is_full(self) -> bool:
        return len(self.panes) >= self.max_panes

    def evolve(self, **changes: Any) -> "Session":
        """Copy with changes (thin wrapper over dataclasses.replace)."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dict (read-only view for hosts)."""
        return {
            "panes": [p.to_dict() for p in self.panes],
            "focused_pane_id": self.focused_pane_id,
            "closed_history": [p.to_dict() for p in self.closed_history],
            "max_panes": self.max_panes,
            "max_closed": self.max_closed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            panes=tuple(Pane.from_dict(p) for p in data["panes"]),
            focused_pane_id=data["focused_pane_id"],
            closed_history=tuple(Pane.from_dict(p) for p in data.get("closed_history", [])),
            max_panes=data.get("max_panes", MAX_PANES),
            max_closed=data.get("max_closed", MAX_CLOSED),
        )


class ActionKind(Enum):
    """Host-dispatchable operations"""
    OPEN = "open"
    CLOSE = "close"
    FOCUS = "focus"
    UPDATE = "update"
    TOGGLE_PIN = "toggle_pin"
    TOGGLE_MUTE = "toggle_mute"
    SET_AUDIBLE = "set_audible"
    MOVE = "move"
    RESTORE = "restore"
    RESET = "reset"

    @property
    def is_structural(self) -> bool:
        """Changes ordering or membership of panes"""
        return self in {
            ActionKind.OPEN,
            ActionKind.CLOSE,
            ActionKind.TOGGLE_PIN,
            ActionKind.MOVE,
            ActionKind.RESTORE,
            ActionKind.RESET,
        }

    @property
    def needs_pane(self) -> bool:
        """Targets an existing pane by id"""
        return self not in {ActionKind.OPEN, ActionKind.RESTORE, ActionKind.RESET}


@dataclass
class Action:
    """One host dispatch.

    Attributes:
        kind: Operation
        pane_id: Target pane (for pane-targeted operations)
        data: Operation arguments:
            open: url/title/favicon/is_loading, insert_at
            update: any of UPDATABLE_FIELDS
            set_audible: audible
            move: new_index
        timestamp: Dispatch time
    """
    kind: ActionKind
    pane_id: str | None = None
    data: dict = field(default_factory=dict)
    timestamp: float = 0.0

    def __post_init__(self):
        if self.timestamp == 0.0:
            self.timestamp = datetime.now().timestamp()

    def format_log(self) -> str:
        ts = datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S.%f")[:-3]
        pane_short = self.pane_id[:8] if self.pane_id else "-"
        return f"[Action] {ts} | {self.kind.value:12} | {pane_short:8}"


@dataclass
class ActionResult:
    """Outcome of a dispatch.

    Attributes:
        applied: The session changed
        pane_id: Created pane for open/restore, target pane otherwise
    """
    applied: bool
    pane_id: str | None = None


@dataclass
class ActionHistoryEntry:
    """Action history entry, kept for debugging."""
    kind: ActionKind
    pane_id: str | None
    applied: bool
    pane_count: int
    timestamp: float = field(default_factory=lambda: datetime.now().timestamp())

    def __str__(self) -> str:
        ts = datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S")
        mark = "✓" if self.applied else "✗"
        pane_short = self.pane_id[:8] if self.pane_id else "-"
        return f"{ts} | {mark} {self.kind.value} {pane_short} → {self.pane_count} panes"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "pane_id": self.pane_id,
            "applied": self.applied,
            "pane_count": self.pane_count,
            "timestamp": self.timestamp,
        }
