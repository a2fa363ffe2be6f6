# FILE: vocapp/security/__init__.py
"""Security module: command safety classification and access scope.

Usage:
    from vocapp.security import has_shell_operators, tokenize, is_blocked
    from vocapp.security import get_readonly_policy, get_access_store
"""

from vocapp.security.command_policy import (
    has_shell_operators,
    tokenize,
    is_blocked,
    is_read_only,
    ReadOnlyPolicy,
    DenyListReadOnlyPolicy,
    AllowListReadOnlyPolicy,
    get_readonly_policy,
    SHELL_OPERATORS,
)
from vocapp.security.access import (
    AccessConfigError,
    AccessMode,
    AccessScope,
    AccessConfigStore,
    build_scope,
    expand_home,
    get_access_store,
)

__all__ = [
    "has_shell_operators",
    "tokenize",
    "is_blocked",
    "is_read_only",
    "ReadOnlyPolicy",
    "DenyListReadOnlyPolicy",
    "AllowListReadOnlyPolicy",
    "get_readonly_policy",
    "SHELL_OPERATORS",
    "AccessConfigError",
    "AccessMode",
    "AccessScope",
    "AccessConfigStore",
    "build_scope",
    "expand_home",
    "get_access_store",
]
