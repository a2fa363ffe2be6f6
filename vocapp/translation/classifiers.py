# FILE: vocapp/translation/classifiers.py
"""
Tier 0: pure rule-based intent classification.
No LLM calls, no I/O. Every classifier takes raw user text and folds it.

Classifiers (independent; several may fire on one utterance):
- is_filesystem_intent      keyword set OR path-like token
- detect_listing_intent     dirs / files / entries (suppressed by summary)
- detect_summary_intent     summary / explain / "what is"
- detect_long_summary       detail-intensity modifier
- wants_hidden_entries      "hidden" modifier
- detect_declaration_intent "(it's) called X" + folder vocabulary
- detect_correction_intent  "I mean", "no era ... sino", bare "it's X"
- references_previous_target  "that folder", "there", "previous"
- is_ordinal_utterance      bare "the second one" / "3"
- references_listing        "from the list", "you mentioned"
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern, Sequence

from . import tables
from .normalize import fold
from .schemas import ListingKind, TurnIntents


def _compile(patterns: Iterable[str]) -> Sequence[Pattern[str]]:
    return tuple(re.compile(p) for p in patterns)


_PATH_TOKENS = _compile(tables.PATH_TOKEN_PATTERNS)
_SUMMARY = _compile(tables.SUMMARY_PATTERNS)
_CORRECTION = _compile(tables.CORRECTION_PATTERNS)
_ANAPHORA = _compile(tables.ANAPHORA_PATTERNS)
_BARE_ORDINAL = re.compile(tables.BARE_ORDINAL_PATTERN)


def _has_any(text: str, phrases: Iterable[str]) -> bool:
    return any(p in text for p in phrases)


def _matches_any(text: str, patterns: Sequence[Pattern[str]]) -> bool:
    return any(p.search(text) for p in patterns)


# =============================================================================
# CLASSIFIERS
# =============================================================================

def is_filesystem_intent(text: Optional[str]) -> bool:
    if not text:
        return False
    if _has_any(fold(text), tables.FILESYSTEM_KEYWORDS):
        return True
    # Path hints are checked on the raw text so case is preserved.
    return _matches_any(text, _PATH_TOKENS)


def detect_summary_intent(text: Optional[str]) -> bool:
    n = fold(text)
    return _has_any(n, tables.SUMMARY_PHRASES) or _matches_any(n, _SUMMARY)


def detect_listing_intent(text: Optional[str]) -> Optional[ListingKind]:
    """Summary requests take precedence: a summary is never a listing."""
    if detect_summary_intent(text):
        return None
    n = fold(text)
    asks_folders = _has_any(n, tables.FOLDER_WORDS)
    asks_files = _has_any(n, tables.FILE_WORDS)

    if asks_folders and not asks_files:
        return ListingKind.DIRS
    if asks_files and not asks_folders:
        return ListingKind.FILES
    if asks_files and asks_folders:
        return ListingKind.ENTRIES
    if _has_any(n, tables.GENERIC_LISTING_PHRASES):
        return ListingKind.ENTRIES
    return None


def detect_long_summary(text: Optional[str]) -> bool:
    return _has_any(fold(text), tables.LONG_SUMMARY_PHRASES)


def wants_hidden_entries(text: Optional[str]) -> bool:
    return _has_any(fold(text), tables.HIDDEN_PHRASES)


def detect_declaration_intent(text: Optional[str]) -> bool:
    n = fold(text)
    return _has_any(n, tables.DECLARATION_NAMING_PHRASES) and _has_any(
        n, tables.DECLARATION_PLACE_WORDS
    )


def detect_correction_intent(text: Optional[str]) -> bool:
    n = fold(text).strip()
    return _has_any(n, tables.CORRECTION_PHRASES) or _matches_any(n, _CORRECTION)


def references_previous_target(text: Optional[str]) -> bool:
    n = fold(text)
    return _has_any(n, tables.ANAPHORA_PHRASES) or _matches_any(n, _ANAPHORA)


def is_ordinal_utterance(text: Optional[str]) -> bool:
    return bool(_BARE_ORDINAL.match(fold(text).strip()))


def references_listing(text: Optional[str]) -> bool:
    """'from the list', 'the ones you mentioned', 'las que dijiste'."""
    return _has_any(fold(text), tables.LIST_REFERENCE_PHRASES)


def classify_turn(text: Optional[str]) -> TurnIntents:
    """Run every classifier once and return the snapshot."""
    raw = text or ""
    summary = detect_summary_intent(raw)
    return TurnIntents(
        text=raw,
        filesystem=is_filesystem_intent(raw),
        listing=detect_listing_intent(raw),
        summary=summary,
        long_summary=summary and detect_long_summary(raw),
        hidden=wants_hidden_entries(raw),
        declaration=detect_declaration_intent(raw),
        correction=detect_correction_intent(raw),
        anaphora=references_previous_target(raw),
        bare_ordinal=is_ordinal_utterance(raw),
        list_reference=references_listing(raw),
    )


__all__ = [
    "is_filesystem_intent",
    "detect_summary_intent",
    "detect_listing_intent",
    "detect_long_summary",
    "wants_hidden_entries",
    "detect_declaration_intent",
    "detect_correction_intent",
    "references_previous_target",
    "is_ordinal_utterance",
    "references_listing",
    "classify_turn",
]
