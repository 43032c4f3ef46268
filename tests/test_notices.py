"""Tests for notices queued across page reruns."""

import pytest

from stone_ledger.notices import Notice, pop_notice, push_notice


class TestNotices:
    """Tests for push_notice/pop_notice."""

    def test_notice_survives_until_popped(self):
        state = {}
        push_notice(state, "Asha deleted")
        assert pop_notice(state) == Notice("success", "Asha deleted")

    def test_notice_is_shown_once(self):
        state = {}
        push_notice(state, "Cleared 3 entries")
        pop_notice(state)
        assert pop_notice(state) is None

    def test_empty_state(self):
        assert pop_notice({}) is None

    def test_latest_notice_wins(self):
        state = {}
        push_notice(state, "first")
        push_notice(state, "second", level="info")
        assert pop_notice(state) == Notice("info", "second")

    def test_does_not_touch_other_keys(self):
        state = {"confirm-1": True}
        push_notice(state, "Ravi's weight updated")
        pop_notice(state)
        assert state == {"confirm-1": True}

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            push_notice({}, "x", level="balloons")
