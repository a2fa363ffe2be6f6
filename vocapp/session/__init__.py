# FILE: vocapp/session/__init__.py
"""Session memory and conversation-history helpers."""

from vocapp.session.memory import (
    PendingIntent,
    SessionMemory,
    SessionStore,
    get_session_store,
)
from vocapp.session.history import (
    last_user_message,
    has_recent_execution_evidence,
    compact_history,
)

__all__ = [
    "PendingIntent",
    "SessionMemory",
    "SessionStore",
    "get_session_store",
    "last_user_message",
    "has_recent_execution_evidence",
    "compact_history",
]
