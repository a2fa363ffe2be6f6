# FILE: vocapp/fs/grounding.py
"""
Deterministic text built from filesystem evidence.

These summaries never consult the model, so they can only mention entries
that were actually observed.
"""
from __future__ import annotations

import re
from typing import List, Optional

from vocapp.translation.schemas import ListingKind
from vocapp.fs.inspector import INSPECTION_MARKER, LISTING_NOT_FOUND_PREFIX

_LISTING_LABELS = {
    ListingKind.DIRS: "Folders",
    ListingKind.FILES: "Files",
    ListingKind.ENTRIES: "Entries",
}

_LISTING_HEADER = re.compile(r"^(Folders|Files|Entries)\s+in\s+(.+):\n(.+)$", re.DOTALL)
VOICE_PREVIEW_ITEMS = 5
VOICE_MAX_CHARS = 260
VOICE_CUT_CHARS = 250
PREVIEW_NAMES = 8


def quote_for_shell(value: str) -> str:
    """Single-quote ``value`` for a POSIX-style command line."""
    return "'" + str(value).replace("'", "'\"'\"'") + "'"


def build_grounding_command(target: Optional[str]) -> str:
    """
    Inspection command proposed when auto-execution is off.

    A single plain program invocation, so the proposal passes the same
    shell-operator and tokenizer checks as any other command.
    """
    if target and target != ".":
        return f"ls -la {quote_for_shell(target)}"
    return "ls -la"


def build_listing_summary(
    kind: ListingKind,
    include_hidden: bool,
    target: Optional[str],
    stdout: str,
    stderr: str = "",
) -> str:
    shown = target or "."
    if stderr and stderr.strip():
        return f"Could not list {shown}. Error: {stderr.strip()}"

    lines = [s.strip() for s in (stdout or "").split("\n") if s.strip()]
    if lines and lines[0].startswith(LISTING_NOT_FOUND_PREFIX):
        return lines[0]

    label = _LISTING_LABELS.get(kind, "Entries")
    hidden_label = "including hidden" if include_hidden else "hidden excluded"
    if not lines:
        return f"{label} in {shown} ({hidden_label}): nothing found."

    bullets = "\n".join(f"- {name}" for name in lines)
    return f"{label} in {shown} ({hidden_label}):\n{bullets}"


def _top_level_lines(target: str, stdout: str) -> Optional[List[str]]:
    lines = [s.strip() for s in (stdout or "").split("\n")]
    marker = f"{INSPECTION_MARKER} {target}"
    if marker not in lines:
        return None
    start = lines.index(marker) + 1
    top: List[str] = []
    for line in lines[start:]:
        if line.startswith("---DETAIL"):
            break
        if line:
            top.append(line)
    return top


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def build_deterministic_inspection_summary(target: str, stdout: str) -> str:
    """
    Count first-level entries of an inspection result.
    Returns "" when ``stdout`` is not an inspection of ``target``.
    """
    top = _top_level_lines(target, stdout)
    if top is None:
        return ""
    if not top:
        return f"The folder {target} is empty."

    dirs = [t.rstrip("/") for t in top if t.endswith("/")]
    files = [t for t in top if not t.endswith("/")]
    names = [t.rstrip("/") for t in top]
    preview = ", ".join(names[:PREVIEW_NAMES])
    if len(names) > PREVIEW_NAMES:
        preview += ", ..."
    return (
        f"The folder {target} contains {_plural(len(dirs), 'folder')} and "
        f"{_plural(len(files), 'file')} at the top level: {preview}."
    )


def build_voice_summary(summary: Optional[str], long_requested: bool) -> str:
    """Short spoken rendition of a summary unless a long one was requested."""
    raw = (summary or "").strip()
    if not raw:
        return ""
    if long_requested:
        return raw

    m = _LISTING_HEADER.match(raw)
    if m:
        kind, target, body = m.group(1), m.group(2), m.group(3)
        items = [re.sub(r"^-+\s*", "", line).strip() for line in body.split("\n")]
        items = [i for i in items if i]
        preview = ", ".join(items[:VOICE_PREVIEW_ITEMS])
        tail = ", and more." if len(items) > VOICE_PREVIEW_ITEMS else "."
        return f"{kind} in {target}: {_plural(len(items), 'item')}. {preview}{tail}"

    clean = re.sub(r"\s+", " ", raw).strip()
    if len(clean) <= VOICE_MAX_CHARS:
        return clean
    return re.sub(r"[,:;.\s]+$", "", clean[:VOICE_CUT_CHARS]) + "."
