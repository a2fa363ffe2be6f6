# FILE: tests/test_session.py
"""Tests for session memory, the session store and history helpers."""

import pytest

from vocapp.session import (
    PendingIntent,
    SessionMemory,
    SessionStore,
    compact_history,
    has_recent_execution_evidence,
    last_user_message,
)


class TestSessionMemory:
    """What a session remembers between turns."""

    def test_has_target_ignores_root(self):
        assert SessionMemory().has_target is False
        assert SessionMemory(last_target=".").has_target is False
        assert SessionMemory(last_target="FutbolDB").has_target is True

    def test_set_target_resets_pending(self):
        memory = SessionMemory()
        memory.offer_suggestions(["A", "B"], PendingIntent.AWAITING_SUMMARY_TARGET)
        memory.set_target("FutbolDB", action="declare")
        assert memory.last_target == "FutbolDB"
        assert memory.last_suggestions == []
        assert memory.pending_intent == PendingIntent.NONE
        assert memory.last_action == "declare"
        assert memory.context_digest() == "Last target: FutbolDB"

    def test_suggestions_capped_at_three(self):
        memory = SessionMemory()
        memory.offer_suggestions(["a", "b", "c", "d"], PendingIntent.AWAITING_TARGET)
        assert memory.last_suggestions == ["a", "b", "c"]
        assert memory.pending_intent == PendingIntent.AWAITING_TARGET

    def test_listing_clears_suggestions_and_caps(self):
        memory = SessionMemory()
        memory.offer_suggestions(["a", "b"], PendingIntent.AWAITING_TARGET)
        memory.remember_listing(".", [f"dir{i}" for i in range(100)])
        assert len(memory.last_listing) == 80
        assert memory.last_suggestions == []
        assert memory.pending_intent == PendingIntent.NONE
        assert memory.last_action == "listing"
        assert "Last listing (80 items)" in memory.context_digest()


class TestSessionStore:
    """Bounded LRU of sessions."""

    def test_get_creates_and_reuses(self):
        store = SessionStore()
        first = store.get("abc")
        assert store.get("abc") is first
        assert len(store) == 1

    def test_missing_id_is_ephemeral(self):
        store = SessionStore()
        a = store.get(None)
        b = store.get("")
        assert a is not b
        assert len(store) == 0

    def test_gc_noop_under_limit(self):
        store = SessionStore(max_sessions=5, keep=2)
        for i in range(5):
            store.get(f"s{i}")
        assert store.gc() == 0
        assert len(store) == 5

    def test_gc_keeps_most_recent(self):
        store = SessionStore(max_sessions=200, keep=120)
        for i in range(201):
            store.get(f"s{i}")
        assert store.gc() == 81
        assert len(store) == 120
        assert store.peek("s0") is None
        assert store.peek("s200") is not None

    def test_touch_moves_to_recent_end(self):
        store = SessionStore(max_sessions=200, keep=120)
        for i in range(201):
            store.get(f"s{i}")
        store.get("s0")
        store.gc()
        assert store.peek("s0") is not None
        assert store.peek("s1") is None

    def test_clear(self):
        store = SessionStore()
        store.get("x")
        store.clear()
        assert len(store) == 0
        assert store.snapshot() == {}


class TestHistoryHelpers:
    """Client history handling."""

    def test_last_user_message(self):
        history = [
            {"role": "user", "content": "  first  "},
            {"role": "assistant", "content": "ok"},
            {"role": "user", "content": "  second  "},
            "garbage",
        ]
        assert last_user_message(history) == "second"

    def test_last_user_message_missing(self):
        assert last_user_message([]) == ""
        assert last_user_message([{"role": "assistant", "content": "hi"}]) == ""
        assert last_user_message(None) == ""

    def test_execution_evidence(self):
        history = [
            {"role": "user", "content": "list"},
            {"role": "assistant", "content": "Command: ls\nSTDOUT:\nFutbolDB"},
        ]
        assert has_recent_execution_evidence(history) is True

    def test_evidence_must_be_recent_and_from_assistant(self):
        old = [{"role": "assistant", "content": "STDOUT: x"}]
        filler = [{"role": "user", "content": f"msg {i}"} for i in range(6)]
        assert has_recent_execution_evidence(old + filler) is False
        assert has_recent_execution_evidence([{"role": "user", "content": "STDOUT: x"}]) is False

    def test_compact_collapses_command_output(self):
        history = [{"role": "assistant", "content": "Command: ls -la\nSTDOUT:\nFutbolDB\nUnity"}]
        assert compact_history(history) == [
            {"role": "assistant", "content": "Command: ls -la [technical output omitted]"}
        ]

    def test_compact_window_roles_and_truncation(self):
        history = [{"role": "user", "content": f"m{i}"} for i in range(20)]
        history.append({"role": "tool", "content": "dropped"})
        history.append({"role": "user", "content": "x" * 2000})
        compacted = compact_history(history)
        assert len(compacted) == 13
        assert all(m["role"] == "user" for m in compacted)
        assert compacted[-1]["content"].endswith("\n...[truncated]")
        assert len(compacted[-1]["content"]) == 1400 + len("\n...[truncated]")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
