# FILE: vocapp/fs/__init__.py
"""Filesystem inspector and deterministic grounding text."""

from vocapp.fs.inspector import (
    safe_resolve_target,
    list_root_entries,
    list_root_directories,
    run_internal_listing,
    run_internal_inspection,
    target_exists,
)
from vocapp.fs.grounding import (
    build_listing_summary,
    build_deterministic_inspection_summary,
    build_voice_summary,
    build_grounding_command,
    quote_for_shell,
)

__all__ = [
    "safe_resolve_target",
    "list_root_entries",
    "list_root_directories",
    "run_internal_listing",
    "run_internal_inspection",
    "target_exists",
    "build_listing_summary",
    "build_deterministic_inspection_summary",
    "build_voice_summary",
    "build_grounding_command",
    "quote_for_shell",
]
