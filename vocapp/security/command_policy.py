# FILE: vocapp/security/command_policy.py
"""
Command safety classification.

Checks, in the order the executor applies them:
1. has_shell_operators  - pipes, redirection, "&&", ";" are refused outright
2. tokenize             - quote-aware split; None on unterminated quotes
3. is_blocked           - destructive patterns, matched on the raw string
4. ReadOnlyPolicy       - decides whether a command may auto-execute

The read-only decision sits behind ReadOnlyPolicy so the orchestrator never
knows which table is in force:
- DenyListReadOnlyPolicy (default): read-only unless a mutating verb matches.
  Fail-open; an unknown mutating tool is treated as read-only.
- AllowListReadOnlyPolicy: read-only only for known inspection programs.

v1.1 (2026-09): ReadOnlyPolicy interface, allow-list variant.
v1.0 (2026-07): Initial tables.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Sequence, Tuple

from vocapp import config

logger = logging.getLogger(__name__)

# =============================================================================
# TABLES
# =============================================================================

BLOCKED_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"(^|\s)rm\s+-rf\s+/", re.I),
    re.compile(r"(^|\s)mkfs(\.|\s)", re.I),
    re.compile(r"(^|\s)dd\s+if=", re.I),
    re.compile(r"(^|\s)shutdown(\s|$)", re.I),
    re.compile(r"(^|\s)reboot(\s|$)", re.I),
    re.compile(r"(^|\s)init\s+0", re.I),
    re.compile(r"(^|\s)poweroff(\s|$)", re.I),
    re.compile(r":\(\)\s*\{\s*:\|:&\s*\};:"),
)

MUTATING_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"\brm\b",
        r"\bmv\b",
        r"\bcp\b",
        r"\bmkdir\b",
        r"\brmdir\b",
        r"\btouch\b",
        r"\btruncate\b",
        r"\bchmod\b",
        r"\bchown\b",
        r"\bchgrp\b",
        r"\bln\b",
        r"\bsed\s+-i\b",
        r"\bperl\s+-i\b",
        r"\bgit\s+(add|commit|push|pull|reset|checkout|merge|rebase|clean)\b",
        r"\bnpm\s+(install|uninstall|update)\b",
        r"\bpip\s+install\b",
        r"\bapt\b",
        r"\bdnf\b",
        r"\bpacman\b",
        r"\bbrew\b",
        r"\bsystemctl\b",
        r"\bservice\b",
        r"\bkill\b",
        r"\bpkill\b",
        r"\bkillall\b",
    )
)

# Programs that only read. Used by the allow-list policy.
READONLY_PROGRAMS: Tuple[str, ...] = (
    "ls", "dir", "pwd", "cat", "head", "tail", "wc", "du", "df", "stat",
    "file", "tree", "find", "grep", "date", "whoami", "uname", "ps", "echo",
    "which", "env",
)
READONLY_GIT_SUBCOMMANDS: Tuple[str, ...] = ("status", "log", "diff", "show", "branch")

SHELL_OPERATORS: Tuple[str, ...] = ("|", ">", ">>", "&&", ";")

_ENV_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")


# =============================================================================
# CHECKS
# =============================================================================

def has_shell_operators(command: str) -> bool:
    return any(op in (command or "") for op in SHELL_OPERATORS)


def tokenize(command: Optional[str]) -> Optional[List[str]]:
    """
    Split on unquoted whitespace. Single- and double-quoted runs stay one
    token with the quote characters removed.
    Returns None for an unterminated quote or when there are no tokens.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_single = False
    in_double = False
    has_token = False

    for ch in command or "":
        if ch == "'" and not in_double:
            in_single = not in_single
            has_token = True
            continue
        if ch == '"' and not in_single:
            in_double = not in_double
            has_token = True
            continue
        if ch.isspace() and not in_single and not in_double:
            if has_token:
                tokens.append("".join(current))
                current = []
                has_token = False
            continue
        current.append(ch)
        has_token = True

    if in_single or in_double:
        return None
    if has_token:
        tokens.append("".join(current))
    return tokens or None


def is_blocked(command: Optional[str]) -> bool:
    """True when the raw string matches a destructive pattern."""
    text = command or ""
    return any(p.search(text) for p in BLOCKED_PATTERNS)


# =============================================================================
# READ-ONLY POLICIES
# =============================================================================

class ReadOnlyPolicy:
    """Decides whether a vetted command may run without approval."""

    name = "base"

    def is_read_only(self, command: str) -> bool:
        raise NotImplementedError


class DenyListReadOnlyPolicy(ReadOnlyPolicy):
    """Read-only unless a known mutating verb appears."""

    name = "denylist"

    def __init__(self, patterns: Sequence[Pattern[str]] = MUTATING_PATTERNS):
        self.patterns = tuple(patterns)

    def is_read_only(self, command: str) -> bool:
        lowered = (command or "").lower()
        return not any(p.search(lowered) for p in self.patterns)


class AllowListReadOnlyPolicy(ReadOnlyPolicy):
    """Read-only only for known inspection programs."""

    name = "allowlist"

    def __init__(
        self,
        programs: Sequence[str] = READONLY_PROGRAMS,
        git_subcommands: Sequence[str] = READONLY_GIT_SUBCOMMANDS,
    ):
        self.programs = frozenset(programs)
        self.git_subcommands = frozenset(git_subcommands)
        self._denylist = DenyListReadOnlyPolicy()

    def is_read_only(self, command: str) -> bool:
        tokens = tokenize(command)
        if not tokens:
            return False
        program = tokens[0].rsplit("/", 1)[-1].lower()
        if program == "git":
            return len(tokens) > 1 and tokens[1].lower() in self.git_subcommands
        if program == "find" and any(t in ("-delete", "-exec", "-execdir") for t in tokens):
            return False
        # env followed by a program runs that program.
        if program == "env" and not all(_ENV_ASSIGNMENT.match(t) for t in tokens[1:]):
            return False
        if program not in self.programs:
            return False
        return self._denylist.is_read_only(command)


_POLICIES = {
    DenyListReadOnlyPolicy.name: DenyListReadOnlyPolicy,
    AllowListReadOnlyPolicy.name: AllowListReadOnlyPolicy,
}


def get_readonly_policy(name: Optional[str] = None) -> ReadOnlyPolicy:
    """Policy named by ``name`` (default: VOCAPP_READONLY_POLICY)."""
    key = (name or config.READONLY_POLICY or "denylist").lower()
    cls = _POLICIES.get(key)
    if cls is None:
        logger.warning(f"[policy] unknown read-only policy {key!r}, using denylist")
        cls = DenyListReadOnlyPolicy
    return cls()


def is_read_only(command: str, policy: Optional[ReadOnlyPolicy] = None) -> bool:
    return (policy or get_readonly_policy()).is_read_only(command)
