# FILE: vocapp/security/access.py
"""
Access scope: where commands may run.

Modes:
- workdir   : cwd is the configured root; containment is structural, no path check
- allowlist : cwd is the root; every path-like token ("/..." or "~...") must sit
              under one of allowed_paths after "~" expansion
- free      : cwd is the home directory; no path check. Highest risk, logged.

The scope lives in memory. It starts from the environment and can be
replaced at runtime via /api/access.
"""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from vocapp import config

logger = logging.getLogger(__name__)


class AccessConfigError(ValueError):
    """Invalid access mode or allowed path list."""


class AccessMode(str, Enum):
    WORKDIR = "workdir"
    ALLOWLIST = "allowlist"
    FREE = "free"


def expand_home(value: str) -> str:
    """Expand a leading "~" to the home directory."""
    if value == "~" or value.startswith("~/") or value.startswith("~" + os.sep):
        return os.path.expanduser(value)
    return value


def _under(path: str, prefix: str) -> bool:
    path = os.path.normpath(path)
    prefix = os.path.normpath(prefix)
    return path == prefix or path.startswith(prefix.rstrip(os.sep) + os.sep)


@dataclass(frozen=True)
class AccessScope:
    mode: AccessMode = AccessMode.WORKDIR
    allowed_paths: List[str] = field(default_factory=list)
    workdir: str = config.EXEC_WORKDIR

    def effective_root(self) -> str:
        """Working directory for execution and base for target resolution."""
        if self.mode == AccessMode.FREE:
            return os.path.expanduser("~")
        return self.workdir

    def check_paths(self, tokens: Sequence[str]) -> Optional[str]:
        """
        Error message naming the first token outside the allowed paths, or None.
        Only enforced in allowlist mode.
        """
        if self.mode != AccessMode.ALLOWLIST:
            return None
        prefixes = [expand_home(p) for p in self.allowed_paths]
        for token in tokens:
            if not (token.startswith("/") or token.startswith("~")):
                continue
            expanded = expand_home(token)
            if not any(_under(expanded, prefix) for prefix in prefixes):
                return f"Path not allowed: {expanded}"
        return None

    def to_payload(self) -> dict:
        return {"mode": self.mode.value, "allowedPaths": list(self.allowed_paths)}


def _parse_mode(value: str) -> AccessMode:
    try:
        return AccessMode((value or "").strip().lower())
    except ValueError:
        raise AccessConfigError(f"Unknown access mode: {value!r}")


def build_scope(mode: str, allowed_paths: Optional[Sequence[str]] = None, workdir: Optional[str] = None) -> AccessScope:
    parsed = _parse_mode(mode)
    paths = [os.path.normpath(expand_home(p.strip())) for p in (allowed_paths or []) if p and p.strip()]
    for p in paths:
        if not os.path.isabs(p):
            raise AccessConfigError(f"Allowed paths must be absolute: {p}")
    if parsed == AccessMode.ALLOWLIST and not paths:
        raise AccessConfigError("allowlist mode needs at least one allowed path")
    return AccessScope(mode=parsed, allowed_paths=paths, workdir=workdir or config.EXEC_WORKDIR)


class AccessConfigStore:
    """Thread-safe holder of the current AccessScope."""

    def __init__(self, scope: Optional[AccessScope] = None):
        self._lock = threading.Lock()
        self._scope = scope or AccessScope()
        if self._scope.mode == AccessMode.FREE:
            self._warn_free()

    @staticmethod
    def _warn_free() -> None:
        logger.warning("[access] FREE access mode enabled: commands run from the home directory with no path checks")

    def get(self) -> AccessScope:
        with self._lock:
            return self._scope

    def update(self, mode: str, allowed_paths: Optional[Sequence[str]] = None) -> AccessScope:
        with self._lock:
            scope = build_scope(mode, allowed_paths, workdir=self._scope.workdir)
            self._scope = scope
        logger.info(f"[access] mode={scope.mode.value} allowed_paths={len(scope.allowed_paths)}")
        if scope.mode == AccessMode.FREE:
            self._warn_free()
        return scope


_store: Optional[AccessConfigStore] = None


def get_access_store() -> AccessConfigStore:
    """Process-wide access store, initialized from the environment."""
    global _store
    if _store is None:
        try:
            scope = build_scope(config.ACCESS_MODE, config.ALLOWED_PATHS)
        except AccessConfigError as e:
            logger.warning(f"[access] invalid access config in environment ({e}), using workdir mode")
            scope = AccessScope()
        _store = AccessConfigStore(scope)
    return _store
