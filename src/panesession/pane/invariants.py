"""Session invariant checks

Each check takes a Session and returns a violation message, or None.
Signature: (session: Session) -> str | None

Available checks:
- check_not_empty: at least one pane
- check_unique_ids: pane ids are unique
- check_indices: index fields are 0..n-1 in order
- check_pinned_first: no pinned pane follows an unpinned one
- check_capacity: pane count within max_panes
- check_focus: focused id names a current pane
- check_history_bound: closed history within max_closed
"""

from collections.abc import Callable

from .types import Session

Check = Callable[[Session], str | None]


def check_not_empty(session: Session) -> str | None:
    if not session.panes:
        return "session has no panes"
    return None


def check_unique_ids(session: Session) -> str | None:
    ids = session.pane_ids
    if len(set(ids)) != len(ids):
        return f"duplicate pane ids: {ids}"
    return None


def check_indices(session: Session) -> str | None:
    indices = [p.index for p in session.panes]
    if indices != list(range(len(session.panes))):
        return f"indices not contiguous: {indices}"
    return None


def check_pinned_first(session: Session) -> str | None:
    seen_unpinned = False
    for pane in session.panes:
        if not pane.is_pinned:
            seen_unpinned = True
        elif seen_unpinned:
            return f"pinned pane {pane.id!r} at {pane.index} follows an unpinned pane"
    return None


def check_capacity(session: Session) -> str | None:
    if len(session.panes) > session.max_panes:
        return f"{len(session.panes)} panes exceeds max {session.max_panes}"
    return None


def check_focus(session: Session) -> str | None:
    if session.focused_pane_id not in session.pane_ids:
        return f"focused pane {session.focused_pane_id!r} not in session"
    return None


def check_history_bound(session: Session) -> str | None:
    if len(session.closed_history) > session.max_closed:
        return (
            f"closed history {len(session.closed_history)} exceeds max "
            f"{session.max_closed}"
        )
    return None


ALWAYS_CHECKS: list[Check] = [
    check_not_empty,
    check_unique_ids,
    check_indices,
    check_capacity,
    check_focus,
    check_history_bound,
]


def find_violations(session: Session, require_ordering: bool = True) -> list[str]:
    """Run all invariant checks.

    Args:
        session: Session to check
        require_ordering: Also require pinned-first ordering (False after an
            explicit move, which may legitimately break it)

    Returns:
        Violation messages, empty when the session is consistent
    """
    checks = list(ALWAYS_CHECKS)
    if require_ordering:
        checks.append(check_pinned_first)
    return [msg for msg in (check(session) for check in checks) if msg]
