# FILE: vocapp/resolver/candidates.py
"""
Candidate extraction: pull the raw name the user is talking about out of an
utterance, before any filesystem lookup.

Order (first hit wins):
  1. spelled-out letters ending in "app" ("v o c app", "uve o ce app")
  2. quoted substring
  3. "called X" / "se llama X"
  4. "folder X" / "carpeta X" / "project X"
  5. "summary of X" / "what's in X" / "contents of X"
  6. bare path-like token ("src/app", "notes/")
"""
from __future__ import annotations

import re
import unicodedata
from typing import Optional

from vocapp.translation.normalize import fold
from vocapp.translation.tables import CANDIDATE_STOPWORDS, TOKEN_STOPWORDS

MIN_CANDIDATE_CHARS = 3
MAX_CANDIDATE_WORDS = 5

_SPELLED_PRODUCT = re.compile(r"\b(?:v|uve)\s+o\s+(?:c|ce)\s+app\b")
_SPACED_LETTERS = re.compile(r"\b([a-z])\s+([a-z])\s+([a-z])(?:\s+([a-z]))?\s+app\b")
_ROUGH_APP = re.compile(r"\b([a-z]{2,8})(\s*)app\b")

_QUOTED = re.compile(r"(?<![A-Za-z])([\"'`])(.{1,140}?)\1(?![A-Za-z])")

_NAME = r"[A-Za-z0-9._\-~/ ]"
_PATTERNS = (
    re.compile(rf"(?:se llama|llamada|called|named)\s+({_NAME}{{2,80}}?)(?:[?.,;!]|$)", re.I),
    re.compile(
        rf"(?:carpeta|directorio|proyecto|folder|directory|project)\s+({_NAME}{{2,120}}?)(?:[?.,;!]|$)",
        re.I,
    ),
    re.compile(
        r"(?:resumen de|que hay en|que contiene|contenido de|sobre|summary of|what's in|whats in|"
        r"what is in|contents of|about|carpeta|directorio|proyecto|folder|directory|project)"
        r"\s+([A-Za-z0-9._\-~/]+/?)",
        re.I,
    ),
    re.compile(r"\b([A-Za-z0-9._\-~]+/[A-Za-z0-9._\-~/]*)"),
)

_REJECTED = set(CANDIDATE_STOPWORDS)
_LEAD_STOPWORDS = set(CANDIDATE_STOPWORDS) | set(TOKEN_STOPWORDS)


def _strip_marks(text: str) -> str:
    """Drop diacritics but keep case, so extracted names keep their spelling."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def extract_spelled_candidate(text: Optional[str]) -> Optional[str]:
    n = fold(text)
    if _SPELLED_PRODUCT.search(n):
        return "vocapp"

    m = _SPACED_LETTERS.search(n)
    if m:
        return "".join(g for g in m.groups() if g) + "app"

    for m in _ROUGH_APP.finditer(n):
        prefix, gap = m.group(1), m.group(2)
        # "the app" / "la app" is an article, not a name.
        if gap and prefix in _LEAD_STOPWORDS:
            continue
        return prefix + "app"
    return None


def _clean(candidate: str) -> Optional[str]:
    value = re.sub(r"\s+", " ", candidate.strip()).rstrip("/")
    if len(value) < MIN_CANDIDATE_CHARS:
        return None
    if len(value.split(" ")) > MAX_CANDIDATE_WORDS:
        return None
    if value.lower() in _REJECTED:
        return None
    return value


def extract_candidate(text: Optional[str]) -> Optional[str]:
    """Raw target name mentioned in ``text``, or None."""
    if not text:
        return None

    spelled = extract_spelled_candidate(text)
    if spelled:
        return spelled

    raw = _strip_marks(text)
    quoted = _QUOTED.search(raw)
    if quoted and quoted.group(2).strip():
        return quoted.group(2).strip()

    for pattern in _PATTERNS:
        m = pattern.search(raw)
        if not m or not m.group(1):
            continue
        cleaned = _clean(m.group(1))
        if cleaned:
            return cleaned
    return None
