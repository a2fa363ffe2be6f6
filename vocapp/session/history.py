# FILE: vocapp/session/history.py
"""
Helpers over the client-supplied conversation history.

History items are plain dicts: {"role": "user"|"assistant"|"system", "content": str}.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

HISTORY_WINDOW = 14
EVIDENCE_WINDOW = 6
MAX_MESSAGE_CHARS = 1400
VALID_ROLES = ("user", "assistant", "system")
EVIDENCE_MARKERS = ("STDOUT:", "Command:", "Comando:")
TECHNICAL_MARKERS = ("STDOUT:", "Technical details")


def _content(msg: Any) -> Optional[str]:
    if not isinstance(msg, dict):
        return None
    content = msg.get("content")
    return content if isinstance(content, str) else None


def last_user_message(history: List[Dict[str, Any]]) -> str:
    for msg in reversed(history or []):
        content = _content(msg)
        if content is not None and msg.get("role") == "user":
            return content.strip()
    return ""


def has_recent_execution_evidence(history: List[Dict[str, Any]]) -> bool:
    """True when a recent assistant message carries command output."""
    for msg in (history or [])[-EVIDENCE_WINDOW:]:
        content = _content(msg)
        if content is None or msg.get("role") != "assistant":
            continue
        if any(marker in content for marker in EVIDENCE_MARKERS):
            return True
    return False


def compact_history(history: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Trim history before it goes to the model: last 14 messages, valid roles
    only, command output collapsed to its "Command:" line, long messages cut.
    """
    out: List[Dict[str, str]] = []
    for msg in (history or [])[-HISTORY_WINDOW:]:
        if not isinstance(msg, dict) or msg.get("role") not in VALID_ROLES:
            continue
        role = msg["role"]
        content = str(msg.get("content") or "")

        if role == "assistant" and any(m in content for m in TECHNICAL_MARKERS):
            command_line = next(
                (line for line in content.split("\n") if line.startswith("Command:")),
                "Command executed.",
            )
            content = f"{command_line} [technical output omitted]"

        if len(content) > MAX_MESSAGE_CHARS:
            content = content[:MAX_MESSAGE_CHARS] + "\n...[truncated]"

        out.append({"role": role, "content": content})
    return out
