# FILE: vocapp/fs/inspector.py
"""
Sandboxed filesystem primitives used to ground answers in real directory
contents. Nothing here reads user text; callers pass an already-resolved
target relative to the effective root.

Not-found and outside-root targets are NOT failures: they come back as
ok=True results whose stdout explains that the target does not exist, so
the orchestrator can treat them as a normal conversational branch.
"""
from __future__ import annotations

import logging
import os
from typing import List, Optional

from vocapp.execution.schemas import ExecutionResult
from vocapp.translation.normalize import fold
from vocapp.translation.schemas import ListingKind

logger = logging.getLogger(__name__)

INSPECTION_MARKER = "INSPECTION:"
DETAIL_DIVIDER = "---DETAIL (max {max_items})---"
NOT_FOUND_PREFIX = "Not found:"
LISTING_NOT_FOUND_PREFIX = "Directory not found:"
WALK_MAX_DEPTH = 2


def is_hidden_name(name: str) -> bool:
    return str(name or "").startswith(".")


def _sort_key(name: str):
    return (fold(name), name)


def safe_resolve_target(target: Optional[str], root: str) -> Optional[str]:
    """Absolute path for ``target`` under ``root``, or None if it would escape."""
    candidate = (target or "").strip() or "."
    abs_path = os.path.normpath(os.path.join(root, os.path.expanduser(candidate)))
    rel = os.path.relpath(abs_path, root)
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return None
    return abs_path


def _scandir(path: str) -> List[os.DirEntry]:
    with os.scandir(path) as it:
        return list(it)


def list_root_entries(root: str) -> List[str]:
    """Names of regular files and directories directly under root."""
    try:
        entries = _scandir(root)
    except OSError:
        return []
    return [e.name for e in entries if e.is_dir() or e.is_file()]


def list_root_directories(root: str) -> List[str]:
    try:
        entries = _scandir(root)
    except OSError:
        return []
    return [e.name for e in entries if e.is_dir()]


# =============================================================================
# LISTING
# =============================================================================

def _keep_for_kind(entry: os.DirEntry, kind: ListingKind) -> bool:
    if kind == ListingKind.DIRS:
        return entry.is_dir()
    if kind == ListingKind.FILES:
        return entry.is_file()
    return True


def run_internal_listing(
    target: Optional[str],
    kind: ListingKind,
    include_hidden: bool,
    root: str,
) -> ExecutionResult:
    """One-level listing of ``target`` filtered by kind and hidden prefix."""
    shown = (target or "").strip() or "."
    command = f"internal:list {kind.value} {shown}"
    abs_path = safe_resolve_target(shown, root)
    if abs_path is None or not os.path.isdir(abs_path):
        return ExecutionResult(
            command=command, cwd=root, stdout=f"{LISTING_NOT_FOUND_PREFIX} {shown}\n", ok=True
        )

    try:
        entries = _scandir(abs_path)
    except OSError as e:
        logger.warning(f"[inspector] listing failed for {shown}: {e}")
        return ExecutionResult.refused(command, root, str(e), stderr=str(e))

    names = sorted(
        (
            e.name
            for e in entries
            if (include_hidden or not is_hidden_name(e.name)) and _keep_for_kind(e, kind)
        ),
        key=_sort_key,
    )
    stdout = "\n".join(names) + ("\n" if names else "")
    return ExecutionResult(command=command, cwd=root, stdout=stdout, ok=True)


# =============================================================================
# INSPECTION
# =============================================================================

def walk_entries(base: str, root: str, include_hidden: bool, max_depth: int = WALK_MAX_DEPTH) -> List[str]:
    """Root-relative paths below ``base``, depth-first, at most ``max_depth`` levels deep."""
    out: List[str] = []

    def _walk(current: str, depth: int) -> None:
        if depth > max_depth:
            return
        try:
            entries = sorted(_scandir(current), key=lambda e: _sort_key(e.name))
        except OSError:
            return
        for entry in entries:
            if not include_hidden and is_hidden_name(entry.name):
                continue
            out.append(os.path.relpath(entry.path, root).replace(os.sep, "/"))
            if entry.is_dir(follow_symlinks=False):
                _walk(entry.path, depth + 1)

    _walk(base, 1)
    return out


def run_internal_inspection(
    target: Optional[str],
    root: str,
    include_hidden: bool = True,
    max_items: int = 200,
) -> ExecutionResult:
    """
    Top-level listing of ``target`` (directories suffixed with "/") followed by
    a capped depth-2 walk. Output layout:

        INSPECTION: <target>
        <top-level names>
        ---DETAIL (max N)---
        <root-relative paths>
    """
    shown = (target or "").strip() or "."
    command = f"internal:inspect {shown}"
    abs_path = safe_resolve_target(shown, root)
    if abs_path is None or not os.path.exists(abs_path):
        stdout = f"{NOT_FOUND_PREFIX} {shown}\n---PWD---\n{root}\n"
        return ExecutionResult(command=command, cwd=root, stdout=stdout, ok=True)

    if not os.path.isdir(abs_path):
        stdout = f"{INSPECTION_MARKER} {shown}\n{os.path.basename(abs_path)}\n"
        return ExecutionResult(command=command, cwd=root, stdout=stdout, ok=True)

    try:
        entries = _scandir(abs_path)
    except OSError as e:
        logger.warning(f"[inspector] inspection failed for {shown}: {e}")
        return ExecutionResult.refused(command, root, str(e), stderr=str(e))

    top = sorted(
        (
            e.name + ("/" if e.is_dir() else "")
            for e in entries
            if include_hidden or not is_hidden_name(e.name)
        ),
        key=_sort_key,
    )
    details = walk_entries(abs_path, root, include_hidden)[:max_items]
    lines = [f"{INSPECTION_MARKER} {shown}", *top, DETAIL_DIVIDER.format(max_items=max_items), *details]
    return ExecutionResult(command=command, cwd=root, stdout="\n".join(lines) + "\n", ok=True)


def target_exists(target: Optional[str], root: str) -> bool:
    abs_path = safe_resolve_target(target, root)
    return abs_path is not None and os.path.exists(abs_path)
