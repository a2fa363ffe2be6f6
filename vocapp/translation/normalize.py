# FILE: vocapp/translation/normalize.py
"""
Text normalization for intent matching and fuzzy target resolution.

Fold levels (each one builds on the previous):
- fold:          lowercase + strip diacritics (NFD, drop combining marks)
- normalize_text: fold + keep only [a-z0-9]
- voice_alias:   normalize_text + drop spoken filler words + fix known
                 mis-transcriptions of the product name
- phonetic_key:  voice_alias + collapse acoustically confusable letters

Every level is pure and idempotent: results are iterated to a fixpoint so
that a rewrite can never expose a new match for the same level.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Callable, List, Tuple

from rapidfuzz.distance import Levenshtein

# Spoken filler tokens that speech-to-text emits while a user spells a name.
VOICE_FILLER_WORDS: Tuple[str, ...] = (
    "guion",
    "espacio",
    "deletrear",
    "dash",
    "space",
    "spell",
)

# Known mis-transcriptions of the product name. Longest first.
VOICE_ALIAS_TABLE: List[Tuple[str, str]] = [
    ("bocaapp", "vocapp"),
    ("vokapp", "vocapp"),
    ("bocapp", "vocapp"),
    ("bobapp", "vocapp"),
    ("boapp", "vocapp"),
    ("bocap", "vocapp"),
]

# Ordered phonetic collapses; doubled letters are squashed afterwards.
PHONETIC_RULES: List[Tuple[str, str]] = [
    ("gu", "g"),
    ("ll", "y"),
    ("v", "b"),
    ("q", "k"),
    ("c", "k"),
    ("z", "s"),
    ("h", ""),
]

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_DOUBLED = re.compile(r"(.)\1+")
_MAX_PASSES = 8


def _fixpoint(step: Callable[[str], str], value: str) -> str:
    current = value
    for _ in range(_MAX_PASSES):
        nxt = step(current)
        if nxt == current:
            return nxt
        current = nxt
    return current


def _fold_once(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold(value) -> str:
    """Lowercase and strip diacritics."""
    return _fixpoint(_fold_once, str(value or ""))


def normalize_text(value) -> str:
    """fold() restricted to ASCII letters and digits."""
    return _NON_ALNUM.sub("", fold(value))


def _voice_alias_once(value: str) -> str:
    v = normalize_text(value)
    for filler in VOICE_FILLER_WORDS:
        v = v.replace(filler, "")
    for wrong, right in VOICE_ALIAS_TABLE:
        v = v.replace(wrong, right)
    return v


def voice_alias(value) -> str:
    """normalize_text() plus filler removal and product-name corrections."""
    return _fixpoint(_voice_alias_once, str(value or ""))


def _phonetic_once(value: str) -> str:
    v = _voice_alias_once(value)
    for src, dst in PHONETIC_RULES:
        v = v.replace(src, dst)
    return _DOUBLED.sub(r"\1", v)


def phonetic_key(value) -> str:
    """
    Collapse letters a speech recognizer commonly swaps (v/b, c/q/k, z/s,
    silent h, doubled letters) so "Bocapp Deb" and "vocapp dev" compare equal.
    """
    return _fixpoint(_phonetic_once, str(value or ""))


def levenshtein(a: str, b: str) -> int:
    """Edit distance (insert/delete/substitute, all cost 1)."""
    return Levenshtein.distance(a or "", b or "")


def distance_ratio(a: str, b: str) -> float:
    """Edit distance scaled by the longer string (0.0 identical, 1.0 disjoint)."""
    return Levenshtein.normalized_distance(a or "", b or "")


def containment_ratio(a: str, b: str) -> float:
    """Length gap scaled by the longer string; only meaningful when one contains the other."""
    longest = max(len(a), len(b))
    if not longest:
        return 0.0
    return abs(len(a) - len(b)) / longest


__all__ = [
    "fold",
    "normalize_text",
    "voice_alias",
    "phonetic_key",
    "levenshtein",
    "distance_ratio",
    "containment_ratio",
    "VOICE_FILLER_WORDS",
    "VOICE_ALIAS_TABLE",
    "PHONETIC_RULES",
]
