"""Pane identifier helpers.

Pane ids are opaque strings. Fresh ids come from ``uuid4``; any
collision-resistant source satisfies the uniqueness requirement, so the
manager accepts an injected factory (tests use a counter).
"""

import itertools
import uuid
from collections.abc import Callable

IdFactory = Callable[[], str]


def new_pane_id() -> str:
    """Create a fresh random pane id."""
    return str(uuid.uuid4())


def counter_ids(prefix: str = "pane") -> IdFactory:
    """Create a deterministic id factory.

    Args:
        prefix: Prefix for generated ids

    Returns:
        Factory yielding "prefix-1", "prefix-2", ...
    """
    counter = itertools.count(1)

    def factory() -> str:
        return f"{prefix}-{next(counter)}"

    return factory


def short_id(pane_id: str | None, length: int = 8) -> str:
    """Get a short display version of a pane ID for logging.

    Args:
        pane_id: The pane ID to shorten
        length: Maximum length (default 8)

    Returns:
        Shortened ID, or "-" when there is none
    """
    if not pane_id:
        return "-"
    return pane_id[:length]
