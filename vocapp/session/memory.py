# FILE: vocapp/session/memory.py
"""
Per-conversation memory.

SessionMemory holds what the orchestrator remembers between turns
(last target, last listing, last offered suggestions, pending sub-intent,
notes fed back to the model). SessionStore owns every live session.

Invariants:
- last_listing holds at most 80 names, last_suggestions at most 3.
- last_listing and last_suggestions are separate ordinal sources; a new
  listing clears the suggestions, so the newest source always wins.
- A missing session id yields a throwaway SessionMemory that is never stored.
- When more than max_sessions are live, gc() keeps the most recently touched.

v1.1 (2026-09): Per-session asyncio.Lock; turns for one session run one at a time.
v1.0 (2026-07): Initial store.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from vocapp import config

logger = logging.getLogger(__name__)

MAX_LISTING = 80
MAX_SUGGESTIONS = 3
NOTE_PREVIEW = 12


class PendingIntent(str, Enum):
    """Sub-intent carried across turns while waiting for the user."""
    NONE = "none"
    AWAITING_TARGET = "awaiting-target"
    AWAITING_SUMMARY_TARGET = "awaiting-summary-target"


@dataclass
class SessionMemory:
    last_target: Optional[str] = None
    last_listing: List[str] = field(default_factory=list)
    last_suggestions: List[str] = field(default_factory=list)
    pending_intent: PendingIntent = PendingIntent.NONE
    notes: List[str] = field(default_factory=list)
    last_command: Optional[str] = None
    last_action: Optional[str] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def has_target(self) -> bool:
        """True when a concrete (non-root) target is remembered."""
        return bool(self.last_target) and self.last_target != "."

    def set_target(self, target: str, action: Optional[str] = None) -> None:
        self.last_target = target
        self.last_suggestions = []
        self.pending_intent = PendingIntent.NONE
        self.notes = [f"Last target: {target}"]
        if action:
            self.last_action = action

    def remember_listing(self, target: str, names: List[str]) -> None:
        self.last_target = target
        self.last_suggestions = []
        self.last_listing = list(names[:MAX_LISTING])
        self.pending_intent = PendingIntent.NONE
        self.last_action = "listing"
        preview = ", ".join(self.last_listing[:NOTE_PREVIEW])
        self.notes = [
            f"Last target: {target}",
            f"Last listing ({len(self.last_listing)} items): {preview}",
        ]

    def offer_suggestions(self, names: List[str], pending: PendingIntent) -> None:
        self.last_suggestions = list(names[:MAX_SUGGESTIONS])
        self.pending_intent = pending

    def context_digest(self) -> str:
        return "\n".join(self.notes)


class SessionStore:
    """Owned, locked, bounded map of session id -> SessionMemory."""

    def __init__(self, max_sessions: int = config.MAX_SESSIONS, keep: int = config.SESSIONS_KEPT):
        self.max_sessions = max_sessions
        self.keep = keep
        self._sessions: "OrderedDict[str, SessionMemory]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str]) -> SessionMemory:
        """Get-or-create. Touching a session moves it to the recent end."""
        if not session_id:
            return SessionMemory()
        with self._lock:
            memory = self._sessions.get(session_id)
            if memory is None:
                memory = SessionMemory()
                self._sessions[session_id] = memory
            else:
                self._sessions.move_to_end(session_id)
            return memory

    def peek(self, session_id: str) -> Optional[SessionMemory]:
        with self._lock:
            return self._sessions.get(session_id)

    def gc(self) -> int:
        """Evict least recently touched sessions once over the limit. Returns the count removed."""
        with self._lock:
            if len(self._sessions) <= self.max_sessions:
                return 0
            removed = 0
            while len(self._sessions) > self.keep:
                self._sessions.popitem(last=False)
                removed += 1
        logger.info(f"[session] evicted {removed} sessions, {self.keep} kept")
        return removed

    def snapshot(self) -> Dict[str, SessionMemory]:
        with self._lock:
            return dict(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Process-wide store used by the HTTP layer."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store
