# FILE: vocapp/resolver/__init__.py
"""Target resolver: candidate extraction, fuzzy matching, ordinal references."""

from vocapp.resolver.candidates import extract_candidate, extract_spelled_candidate
from vocapp.resolver.matching import (
    resolve_in_workdir,
    choose_closest_candidate,
    resolve_from_context,
    suggest_targets,
    candidate_pool,
)
from vocapp.resolver.ordinals import ordinal_index, suggestion_index, is_ordinal_utterance

__all__ = [
    "extract_candidate",
    "extract_spelled_candidate",
    "resolve_in_workdir",
    "choose_closest_candidate",
    "resolve_from_context",
    "suggest_targets",
    "candidate_pool",
    "ordinal_index",
    "suggestion_index",
    "is_ordinal_utterance",
]
