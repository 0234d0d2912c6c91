"""Pytest configuration"""

import pytest

from panesession.core.ids import counter_ids
from panesession.pane import Pane, Session, SessionManager
from panesession.telemetry import metrics


class FakeClock:
    """Manually advanced clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> float:
        self.now += seconds
        return self.now


def make_session(*names: str, focused: str | None = None, **limits) -> Session:
    """Build a session from pane names like "A" or "A:pinned"."""
    panes = []
    for i, entry in enumerate(names):
        name, _, flag = entry.partition(":")
        panes.append(Pane(id=name, url=f"https://{name.lower()}.test", title=name,
                          is_pinned=flag == "pinned", index=i))
    return Session(panes=tuple(panes), focused_pane_id=focused or panes[0].id, **limits)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics around every test"""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    """Manager with deterministic ids and invariant checks on"""
    return SessionManager(id_factory=counter_ids(), clock=clock, check_invariants=True)


@pytest.fixture
def session_of():
    """Session builder, see make_session()"""
    return make_session
