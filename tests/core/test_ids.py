"""Tests for core.ids - pane id helpers"""

import uuid

from panesession.core.ids import counter_ids, new_pane_id, short_id


class TestNewPaneId:
    """Test new_pane_id function"""

    def test_is_uuid(self):
        """Generated id should parse as a UUID"""
        assert uuid.UUID(new_pane_id())

    def test_unique(self):
        """Ids should not repeat"""
        assert len({new_pane_id() for _ in range(100)}) == 100


class TestCounterIds:
    """Test counter_ids factory"""

    def test_sequence(self):
        """Factory yields prefixed increasing ids"""
        factory = counter_ids("tab")
        assert [factory() for _ in range(3)] == ["tab-1", "tab-2", "tab-3"]

    def test_factories_independent(self):
        """Each factory has its own counter"""
        first, second = counter_ids(), counter_ids()
        first()
        assert second() == "pane-1"


class TestShortId:
    """Test short_id function"""

    def test_truncates(self):
        assert short_id("3EB79F67-40C3-4583-A9E4-AD8224807F34") == "3EB79F67"

    def test_custom_length(self):
        assert short_id("abcdef", length=3) == "abc"

    def test_missing(self):
        assert short_id(None) == "-"
        assert short_id("") == "-"
