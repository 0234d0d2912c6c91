"""SessionManager tests"""

import logging

import pytest

from panesession.core.ids import counter_ids
from panesession.pane import (
    Action,
    ActionKind,
    DispatchQueue,
    OpenRequest,
    SessionManager,
)
from panesession.telemetry import metrics


class TestLifecycle:
    """Construction and basic operations"""

    def test_starts_with_one_blank_focused_pane(self, manager):
        session = manager.session

        assert session.pane_ids == ["pane-1"]
        assert session.focused_pane_id == "pane-1"
        assert manager.focused_pane.title == "New Tab"
        assert session.max_panes == 50
        assert session.max_closed == 25

    def test_custom_limits(self, clock):
        manager = SessionManager(id_factory=counter_ids(), clock=clock, max_panes=3, max_closed=1)
        assert manager.session.max_panes == 3
        assert manager.session.max_closed == 1

    def test_open_returns_new_id(self, manager, clock):
        clock.advance(5)

        pane_id = manager.open(OpenRequest.for_url("https://a.test", "A"))

        assert pane_id == "pane-2"
        assert manager.session.focused_pane_id == "pane-2"
        pane = manager.get_pane("pane-2")
        assert pane.is_loading is True
        assert pane.last_accessed == 1005.0

    def test_open_at_capacity_returns_none(self, clock):
        manager = SessionManager(id_factory=counter_ids(), clock=clock, max_panes=2)
        manager.open()

        before = manager.session
        assert manager.open() is None
        assert manager.session is before
        assert metrics.get_counter("action.noop", {"kind": "open"}) == 1

    def test_close_last_pane_refused(self, manager):
        assert manager.close("pane-1") is False
        assert manager.session.pane_ids == ["pane-1"]
        assert manager.session.closed_history == ()

    def test_close_and_restore(self, manager):
        second = manager.open(OpenRequest.for_url("https://b.test", "B"))
        assert manager.close(second) is True
        assert len(manager.session.closed_history) == 1

        restored = manager.restore_last_closed()

        assert restored == "pane-3"
        assert restored != second
        pane = manager.get_pane(restored)
        assert pane.url == "https://b.test"
        assert pane.title == "B"
        assert manager.session.closed_history == ()
        assert manager.session.focused_pane_id == restored

    def test_restore_with_empty_history_returns_none(self, manager):
        assert manager.restore_last_closed() is None

    def test_focus_update_pin_mute_audible_move(self, manager, clock):
        a = manager.session.pane_ids[0]
        b = manager.open()
        c = manager.open()

        clock.advance(10)
        assert manager.focus(a) is True
        assert manager.get_pane(a).last_accessed == 1010.0

        assert manager.update(b, title="Docs", is_loading=False) is True
        assert manager.get_pane(b).title == "Docs"

        assert manager.toggle_pin(c) is True
        assert manager.session.pane_ids == [c, a, b]

        assert manager.toggle_mute(b) is True
        assert manager.set_audible(b, True) is True
        assert manager.get_pane(b).is_muted is True
        assert manager.get_pane(b).is_audible is True

        assert manager.move(b, 1) is True
        assert manager.session.pane_ids == [c, b, a]

    def test_update_with_bad_field_raises(self, manager):
        with pytest.raises(ValueError):
            manager.update("pane-1", is_pinned=True)

    def test_reset(self, manager):
        manager.open()
        manager.close("pane-2")

        pane_id = manager.reset()

        assert manager.session.pane_ids == [pane_id]
        assert manager.session.closed_history == ()

    def test_noop_returns_false_and_keeps_session(self, manager):
        before = manager.session

        assert manager.focus("missing") is False
        assert manager.update("missing", title="x") is False
        assert manager.toggle_pin("missing") is False
        assert manager.move("pane-1", 5) is False

        assert manager.session is before


class TestDispatch:
    """dispatch() bookkeeping"""

    def test_result_and_metrics(self, manager):
        result = manager.dispatch(Action(ActionKind.OPEN))

        assert result.applied is True
        assert result.pane_id == "pane-2"
        assert manager.last_result is result
        assert metrics.get_counter("action.ok", {"kind": "open"}) == 1
        assert metrics.counters("action.") == {"action.ok{kind=open}": 1}

    def test_noop_result(self, manager):
        result = manager.dispatch(Action(ActionKind.CLOSE, "pane-1"))

        assert result.applied is False
        assert result.pane_id is None
        assert metrics.get_counter("action.noop", {"kind": "close"}) == 1

    def test_history_records_actions(self, manager):
        manager.open()
        manager.close("missing")

        history = manager.history
        assert [(e.kind, e.applied) for e in history] == [
            (ActionKind.OPEN, True),
            (ActionKind.CLOSE, False),
        ]
        assert history[0].pane_count == 2
        assert "open" in manager.get_history_log()

    def test_empty_history_log(self, manager):
        assert manager.get_history_log() == "  (no history)"

    def test_change_callback_only_on_applied(self, manager):
        changes = []
        manager.set_on_change(lambda session, action: changes.append((action.kind, len(session))))

        manager.open()
        manager.focus("missing")
        manager.toggle_mute("pane-1")

        assert changes == [(ActionKind.OPEN, 2), (ActionKind.TOGGLE_MUTE, 2)]

    def test_no_violations_in_normal_use(self, manager):
        b = manager.open()
        manager.toggle_pin(b)
        manager.move(b, 1)
        manager.open()
        manager.close(b)

        assert metrics.counters("invariant.violation") == {}

    def test_violation_logged(self, session_of, clock, caplog):
        # Pinned pane after an unpinned one, not produced by a move
        manager = SessionManager(
            session_of("A", "B:pinned"),
            id_factory=counter_ids(),
            clock=clock,
            check_invariants=True,
        )

        with caplog.at_level(logging.ERROR):
            manager.toggle_mute("A")

        assert "Invariant violated after toggle_mute" in caplog.text
        assert metrics.get_counter("invariant.violation", {"kind": "toggle_mute"}) == 1

    def test_move_relaxes_ordering_check(self, session_of, clock, caplog):
        manager = SessionManager(
            session_of("A:pinned", "B"),
            id_factory=counter_ids(),
            clock=clock,
            check_invariants=True,
        )

        with caplog.at_level(logging.ERROR):
            manager.move("B", 0)
            manager.toggle_mute("A")

        assert "Invariant violated" not in caplog.text


class TestQueueProcessing:
    """enqueue() + process_queued()"""

    async def test_fifo_order(self, manager):
        manager.enqueue(Action(ActionKind.OPEN))
        manager.enqueue(Action(ActionKind.OPEN))
        manager.enqueue(Action(ActionKind.MOVE, "pane-3", data={"new_index": 0}))

        count = await manager.process_queued()

        assert count == 3
        assert manager.session.pane_ids == ["pane-3", "pane-1", "pane-2"]
        assert manager.queue.is_empty

    async def test_reentrant_drain_skipped(self, manager):
        manager.enqueue(Action(ActionKind.OPEN))
        manager.queue.set_processing(True)

        assert await manager.process_queued() == 0
        assert len(manager.queue) == 1

    async def test_processing_flag_cleared_on_error(self, manager):
        manager.enqueue(Action(ActionKind.MOVE, "pane-1"))

        with pytest.raises(KeyError):
            await manager.process_queued()

        assert manager.queue.is_processing is False

    async def test_full_queue_keeps_earlier_actions(self, clock):
        queue = DispatchQueue(name="small", max_size=2)
        manager = SessionManager(id_factory=counter_ids(), clock=clock, queue=queue)
        manager.open()
        manager.open()

        assert manager.enqueue(Action(ActionKind.CLOSE, "pane-2")) is True
        assert manager.enqueue(Action(ActionKind.FOCUS, "pane-1")) is True
        assert manager.enqueue(Action(ActionKind.FOCUS, "pane-3")) is False

        assert await manager.process_queued() == 2
        assert manager.session.pane_ids == ["pane-1", "pane-3"]
        assert manager.session.focused_pane_id == "pane-1"

    async def test_shared_queue(self, clock):
        queue = DispatchQueue(name="shared")
        manager = SessionManager(id_factory=counter_ids(), clock=clock, queue=queue)

        queue.enqueue(Action(ActionKind.OPEN))
        await manager.process_queued()

        assert manager.queue is queue
        assert len(manager.session) == 2
