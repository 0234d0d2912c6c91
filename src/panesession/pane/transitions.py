"""Session transitions

Every operation is a pure function (Session, args) -> Session. Precondition
failures (capacity, unknown id, index out of range, closing the last pane)
return the input Session unchanged (same object), never raise.

Reducer table:
| kind        | preconditions                       | structural | pane_id result |
|-------------|-------------------------------------|------------|----------------|
| open        | len < max_panes                     | yes        | new pane       |
| close       | len >= 2, pane exists               | yes        | closed pane    |
| focus       | pane exists                         | no         | target         |
| update      | pane exists                         | no         | target         |
| toggle_pin  | pane exists                         | yes        | target         |
| toggle_mute | pane exists                         | no         | target         |
| set_audible | pane exists                         | no         | target         |
| move        | pane exists, 0 <= new_index < len   | yes        | target         |
| restore     | history non-empty, len < max_panes  | yes        | restored pane  |
| reset       | -                                   | yes        | new pane       |
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any

from ..config import DEFAULT_TITLE
from ..core.ids import IdFactory
from .types import UPDATABLE_FIELDS, Action, ActionKind, OpenRequest, Pane, Session

# (session, action, now, id_factory) -> (new session, pane id)
Reducer = Callable[[Session, Action, float, IdFactory], tuple[Session, str | None]]


# === Helpers ===

def renormalize(panes: Iterable[Pane]) -> tuple[Pane, ...]:
    """Rewrite each pane's index to match its position."""
    return tuple(
        pane if pane.index == i else replace(pane, index=i)
        for i, pane in enumerate(panes)
    )


def partition_pinned(panes: Iterable[Pane]) -> list[Pane]:
    """Stable partition: pinned panes first, each group keeps its order."""
    panes = list(panes)
    return [p for p in panes if p.is_pinned] + [p for p in panes if not p.is_pinned]


def pane_index(session: Session, pane_id: str | None) -> int:
    """Position of a pane, or -1."""
    for i, pane in enumerate(session.panes):
        if pane.id == pane_id:
            return i
    return -1


def get_pane(session: Session, pane_id: str | None) -> Pane | None:
    idx = pane_index(session, pane_id)
    return session.panes[idx] if idx >= 0 else None


def focused_pane(session: Session) -> Pane:
    pane = get_pane(session, session.focused_pane_id)
    if pane is None:
        raise LookupError(f"focused pane {session.focused_pane_id!r} is not in the session")
    return pane


def _replace_at(session: Session, idx: int, pane: Pane, **changes: Any) -> Session:
    panes = session.panes[:idx] + (pane,) + session.panes[idx + 1:]
    return session.evolve(panes=panes, **changes)


def _focus_after_close(panes: tuple[Pane, ...], removed_index: int) -> str:
    """Pick the pane that takes focus after the focused pane is closed.

    The pane now sitting just left of the removed slot wins unless it is
    pinned; otherwise the last pane.
    """
    left = removed_index - 1
    if 0 <= left < len(panes) and not panes[left].is_pinned:
        return panes[left].id
    return panes[-1].id


# === Operations ===

def open_pane(
    session: Session,
    request: OpenRequest,
    *,
    pane_id: str,
    now: float,
    insert_at: int | None = None,
) -> Session:
    """Open a pane and focus it.

    Args:
        session: Current session
        request: Pane contents
        pane_id: Fresh id for the new pane
        now: Access timestamp
        insert_at: Insertion position; negative values count from the end as
            with list.insert, then clamped to [pinned count, len]; None appends

    Returns:
        New session, or ``session`` when at capacity
    """
    if session.is_full:
        return session
    if pane_index(session, pane_id) >= 0:
        raise ValueError(f"pane id {pane_id!r} already in session")

    panes = list(session.panes)
    pane = request.build(pane_id, now, len(panes))
    if insert_at is None:
        panes.append(pane)
    else:
        if insert_at < 0:
            insert_at = max(len(panes) + insert_at, 0)
        # New panes are unpinned: never insert ahead of the pinned group
        pinned = sum(1 for p in panes if p.is_pinned)
        panes.insert(min(max(insert_at, pinned), len(panes)), pane)

    return session.evolve(panes=renormalize(panes), focused_pane_id=pane_id)


def close_pane(session: Session, pane_id: str) -> Session:
    """Close a pane, remembering it in the closed history.

    The last remaining pane cannot be closed.
    """
    if len(session.panes) < 2:
        return session
    idx = pane_index(session, pane_id)
    if idx < 0:
        return session

    removed = session.panes[idx]
    panes = renormalize(session.panes[:idx] + session.panes[idx + 1:])
    history = ((removed,) + session.closed_history)[: session.max_closed]

    focused = session.focused_pane_id
    if focused == pane_id:
        focused = _focus_after_close(panes, idx)

    return session.evolve(panes=panes, closed_history=history, focused_pane_id=focused)


def focus_pane(session: Session, pane_id: str, *, now: float) -> Session:
    idx = pane_index(session, pane_id)
    if idx < 0:
        return session
    pane = replace(session.panes[idx], last_accessed=now)
    return _replace_at(session, idx, pane, focused_pane_id=pane_id)


def update_pane(
    session: Session,
    pane_id: str,
    changes: Mapping[str, Any],
    *,
    now: float,
) -> Session:
    """Merge content fields onto a pane.

    Args:
        session: Current session
        pane_id: Target pane
        changes: Subset of url, rendered_url, title, favicon, is_loading
        now: Access timestamp (always refreshed)

    Raises:
        ValueError: ``changes`` names a field outside UPDATABLE_FIELDS
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"fields not updatable: {sorted(unknown)}")

    idx = pane_index(session, pane_id)
    if idx < 0:
        return session
    pane = replace(session.panes[idx], **changes, last_accessed=now)
    return _replace_at(session, idx, pane)


def toggle_pin(session: Session, pane_id: str) -> Session:
    """Flip pinned state and re-establish pinned-first ordering."""
    idx = pane_index(session, pane_id)
    if idx < 0:
        return session
    pane = session.panes[idx]
    panes = list(session.panes)
    panes[idx] = replace(pane, is_pinned=not pane.is_pinned)
    return session.evolve(panes=renormalize(partition_pinned(panes)))


def toggle_mute(session: Session, pane_id: str) -> Session:
    idx = pane_index(session, pane_id)
    if idx < 0:
        return session
    pane = session.panes[idx]
    return _replace_at(session, idx, replace(pane, is_muted=not pane.is_muted))


def set_audible(session: Session, pane_id: str, audible: bool) -> Session:
    """Record observed audio activity (independent of mute)."""
    idx = pane_index(session, pane_id)
    if idx < 0:
        return session
    pane = session.panes[idx]
    if pane.is_audible == audible:
        return session
    return _replace_at(session, idx, replace(pane, is_audible=audible))


def move_pane(session: Session, pane_id: str, new_index: int) -> Session:
    """Move a pane to ``new_index`` (splice, not swap).

    Pinned-first ordering is not enforced: an explicit reorder is kept as-is.
    """
    idx = pane_index(session, pane_id)
    if idx < 0 or not 0 <= new_index < len(session.panes):
        return session
    if idx == new_index:
        return session
    panes = list(session.panes)
    pane = panes.pop(idx)
    panes.insert(new_index, pane)
    return session.evolve(panes=renormalize(panes))


def restore_last_closed(session: Session, *, pane_id: str, now: float) -> Session:
    """Reopen the most recently closed pane under a new id and focus it.

    The pane is appended; a pane that was pinned when closed comes back pinned
    and lands at the end of the pinned group.
    """
    if not session.closed_history or session.is_full:
        return session

    snapshot, *remaining = session.closed_history
    restored = replace(snapshot, id=pane_id, last_accessed=now, index=len(session.panes))
    panes = list(session.panes) + [restored]
    if restored.is_pinned:
        panes = partition_pinned(panes)

    return session.evolve(
        panes=renormalize(panes),
        closed_history=tuple(remaining),
        focused_pane_id=pane_id,
    )


def reset_session(session: Session, *, pane_id: str, now: float) -> Session:
    """Drop all panes and history; start over with one blank pane."""
    return Session.initial(pane_id, now, max_panes=session.max_panes, max_closed=session.max_closed)


# === Reducer table ===

def _open_request(data: Mapping[str, Any]) -> OpenRequest:
    url = data.get("url", "")
    return OpenRequest(
        url=url,
        title=data.get("title", DEFAULT_TITLE),
        favicon=data.get("favicon"),
        is_loading=data.get("is_loading", bool(url)),
    )


def _bool_arg(data: Mapping[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a bool, got {type(value).__name__}")
    return value


def _index_arg(data: Mapping[str, Any], key: str, required: bool = True) -> int | None:
    """Integer argument from action data; bools and strings are rejected."""
    value = data[key] if required else data.get(key)
    if value is None and not required:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an int, got {type(value).__name__}")
    return value


def _reduce_open(session, action, now, id_factory):
    insert_at = _index_arg(action.data, "insert_at", required=False)
    pane_id = id_factory()
    result = open_pane(
        session,
        _open_request(action.data),
        pane_id=pane_id,
        now=now,
        insert_at=insert_at,
    )
    return result, pane_id


def _reduce_close(session, action, now, id_factory):
    return close_pane(session, action.pane_id), action.pane_id


def _reduce_focus(session, action, now, id_factory):
    return focus_pane(session, action.pane_id, now=now), action.pane_id


def _reduce_update(session, action, now, id_factory):
    return update_pane(session, action.pane_id, action.data, now=now), action.pane_id


def _reduce_toggle_pin(session, action, now, id_factory):
    return toggle_pin(session, action.pane_id), action.pane_id


def _reduce_toggle_mute(session, action, now, id_factory):
    return toggle_mute(session, action.pane_id), action.pane_id


def _reduce_set_audible(session, action, now, id_factory):
    return set_audible(session, action.pane_id, _bool_arg(action.data, "audible")), action.pane_id


def _reduce_move(session, action, now, id_factory):
    return move_pane(session, action.pane_id, _index_arg(action.data, "new_index")), action.pane_id


def _reduce_restore(session, action, now, id_factory):
    if not session.closed_history or session.is_full:
        return session, None
    pane_id = id_factory()
    return restore_last_closed(session, pane_id=pane_id, now=now), pane_id


def _reduce_reset(session, action, now, id_factory):
    pane_id = id_factory()
    return reset_session(session, pane_id=pane_id, now=now), pane_id


REDUCERS: dict[ActionKind, Reducer] = {
    ActionKind.OPEN: _reduce_open,
    ActionKind.CLOSE: _reduce_close,
    ActionKind.FOCUS: _reduce_focus,
    ActionKind.UPDATE: _reduce_update,
    ActionKind.TOGGLE_PIN: _reduce_toggle_pin,
    ActionKind.TOGGLE_MUTE: _reduce_toggle_mute,
    ActionKind.SET_AUDIBLE: _reduce_set_audible,
    ActionKind.MOVE: _reduce_move,
    ActionKind.RESTORE: _reduce_restore,
    ActionKind.RESET: _reduce_reset,
}


def apply(
    session: Session,
    action: Action,
    *,
    now: float,
    id_factory: IdFactory,
) -> tuple[Session, str | None]:
    """Apply an action through the reducer table.

    Args:
        session: Current session
        action: Action to apply
        now: Timestamp for access/creation
        id_factory: Source of fresh pane ids

    Returns:
        (new session, pane id). The session is ``session`` itself when the
        action was a no-op.

    Raises:
        ValueError: No reducer for the action kind, or bad update fields
        KeyError: A required argument is missing from ``action.data``
    """
    reducer = REDUCERS.get(action.kind)
    if reducer is None:
        raise ValueError(f"no reducer for {action.kind!r}")
    return reducer(session, action, now, id_factory)
