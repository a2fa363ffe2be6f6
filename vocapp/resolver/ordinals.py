# FILE: vocapp/resolver/ordinals.py
"""
Ordinal references ("the second one", "option 3", "la ultima").

ordinal_index resolves against the last listing and only fires when the
utterance mentions the list or is a bare ordinal. suggestion_index resolves
against the last offered suggestions and only fires on option/selection
phrasing. Both return a 0-based index or None.
"""
from __future__ import annotations

import re
from typing import Optional

from vocapp.translation.classifiers import is_ordinal_utterance
from vocapp.translation.normalize import fold
from vocapp.translation.tables import (
    LAST_WORDS,
    LIST_REFERENCE_PHRASES,
    ORDINAL_WORDS,
    SUGGESTION_PHRASES,
)

_LIST_NUMBER = re.compile(r"\b(\d{1,2})\b")
_OPTION_NUMBER = re.compile(r"\b([1-9])\b")


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


def _word_index(text: str, length: int) -> Optional[int]:
    if any(_has_word(text, w) for w in LAST_WORDS):
        return length - 1
    for word, index in ORDINAL_WORDS.items():
        if _has_word(text, word):
            return min(index, length - 1)
    return None


def _number_index(text: str, pattern: "re.Pattern[str]", length: int) -> Optional[int]:
    m = pattern.search(text)
    if not m:
        return None
    pos = int(m.group(1)) - 1
    if 0 <= pos < length:
        return pos
    return None


def ordinal_index(text: Optional[str], length: int) -> Optional[int]:
    """Index into the last listing, or None."""
    if not length:
        return None
    n = fold(text)
    mentions_list = any(p in n for p in LIST_REFERENCE_PHRASES) or is_ordinal_utterance(n)
    if not mentions_list:
        return None
    index = _word_index(n, length)
    if index is not None:
        return index
    return _number_index(n, _LIST_NUMBER, length)


def suggestion_index(text: Optional[str], length: int) -> Optional[int]:
    """Index into the last offered suggestions, or None."""
    if not length:
        return None
    n = fold(text)
    if not any(p in n for p in SUGGESTION_PHRASES):
        return None
    index = _word_index(n, length)
    if index is not None:
        return index
    return _number_index(n, _OPTION_NUMBER, length)


__all__ = ["ordinal_index", "suggestion_index", "is_ordinal_utterance"]
