# FILE: vocapp/resolver/matching.py
"""
Fuzzy target resolution against real directory entries.

Scoring (lower is better, 0.0 = exact):
- containment first: if one string contains the other, score is the length
  gap ratio. Substring evidence beats edit distance for clipped or padded
  transcriptions.
- otherwise the Levenshtein ratio.

resolve_in_workdir accepts <= 0.42 over every root entry.
choose_closest_candidate is stricter (<= 0.36), works on a pool of
remembered listing names plus live directories, and also compares the
phonetic folds so "b" transcribed for "v" still lands.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from vocapp.fs.inspector import list_root_directories, list_root_entries, safe_resolve_target, target_exists
from vocapp.resolver.candidates import extract_candidate
from vocapp.session.memory import SessionMemory
from vocapp.translation.classifiers import references_previous_target
from vocapp.translation.normalize import (
    containment_ratio,
    distance_ratio,
    fold,
    normalize_text,
    phonetic_key,
    voice_alias,
)
from vocapp.translation.tables import CANDIDATE_STOPWORDS, TOKEN_STOPWORDS

logger = logging.getLogger(__name__)

WORKDIR_THRESHOLD = 0.42
CLOSEST_THRESHOLD = 0.36
MIN_WORKDIR_PROBE = 4
MIN_TOKEN_PROBE = 3
MIN_QUERY_WORD = 4
SUGGESTION_LIMIT = 3

_STOPWORDS = set(TOKEN_STOPWORDS) | set(CANDIDATE_STOPWORDS)
_WORD_SPLIT = re.compile(r"[^a-z0-9._\-]+")
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


def _score(probe: str, name: str) -> float:
    if probe in name or name in probe:
        return containment_ratio(probe, name)
    return distance_ratio(probe, name)


def _exists_verbatim(candidate: str, root: str) -> bool:
    abs_path = safe_resolve_target(candidate, root)
    return abs_path is not None and os.path.exists(abs_path)


# =============================================================================
# WORKDIR RESOLUTION
# =============================================================================

def resolve_in_workdir(candidate: Optional[str], full_text: Optional[str], root: str) -> Optional[str]:
    """
    Real root entry for ``candidate``, or None.

    When the root is unreadable or no probe is long enough, the raw candidate
    is returned unverified.
    """
    entries = list_root_entries(root)
    if not entries:
        return candidate or None

    if candidate:
        if _exists_verbatim(candidate, root):
            return candidate
        base = candidate.rstrip("/")
        if base and _exists_verbatim(base, root):
            return base

    probes = [p for p in (normalize_text(candidate), normalize_text(full_text)) if len(p) >= MIN_WORKDIR_PROBE]
    if not probes:
        return candidate or None

    best: Optional[Tuple[float, str]] = None
    for entry in entries:
        n_entry = normalize_text(entry)
        if not n_entry:
            continue
        for probe in probes:
            score = _score(probe, n_entry)
            if best is None or score < best[0]:
                best = (score, entry)

    if best and best[0] <= WORKDIR_THRESHOLD:
        return best[1]
    return None


# =============================================================================
# CLOSEST CANDIDATE
# =============================================================================

def _query_words(text: str) -> List[str]:
    return [
        w for w in _WORD_SPLIT.split(fold(text))
        if len(w) >= MIN_QUERY_WORD and w not in _STOPWORDS
    ]


def _probes(text: str) -> List[str]:
    tokens = [
        t for t in _TOKEN_SPLIT.split(fold(text))
        if len(t) >= MIN_TOKEN_PROBE and t not in _STOPWORDS
    ]
    probes = [voice_alias(text)] + [voice_alias(t) for t in tokens]
    return [p for p in _dedupe(probes) if len(p) >= MIN_TOKEN_PROBE]


def _closest_score(probe: str, name: str) -> float:
    if probe in name or name in probe:
        return containment_ratio(probe, name)

    probe_ph = phonetic_key(probe)
    name_ph = phonetic_key(name)
    if probe_ph and name_ph:
        if probe_ph in name_ph or name_ph in probe_ph:
            return containment_ratio(probe_ph, name_ph)
        return min(distance_ratio(probe, name), distance_ratio(probe_ph, name_ph))
    return distance_ratio(probe, name)


def choose_closest_candidate(text: Optional[str], candidates: Sequence[str]) -> Optional[str]:
    """Best candidate for ``text`` (threshold 0.36), or None."""
    if not text or not candidates:
        return None

    words = _query_words(text)
    for candidate in candidates:
        lowered = str(candidate or "").lower()
        if any(w in lowered for w in words):
            return candidate

    probes = _probes(text)
    if not probes:
        return None

    best: Optional[Tuple[float, str]] = None
    for candidate in candidates:
        name = voice_alias(candidate)
        if not name:
            continue
        for probe in probes:
            score = _closest_score(probe, name)
            if best is None or score < best[0]:
                best = (score, candidate)

    if best and best[0] <= CLOSEST_THRESHOLD:
        return best[1]
    return None


# =============================================================================
# CONTEXT RESOLUTION
# =============================================================================

def candidate_pool(memory: SessionMemory, root: str) -> List[str]:
    """Remembered listing names plus live root directories, deduplicated."""
    return _dedupe(list(memory.last_listing) + list_root_directories(root))


def resolve_from_context(
    text: Optional[str],
    extracted: Optional[str],
    memory: SessionMemory,
    root: str,
) -> Optional[str]:
    """
    Resolve the turn's target.

    1. anaphora ("that folder") with a remembered non-root target wins outright
    2. a verified resolve_in_workdir hit
    3. closest candidate for the extracted name, then for the whole utterance
    4. the unverified resolve_in_workdir result
    """
    if references_previous_target(text) and memory.has_target:
        return memory.last_target

    direct = resolve_in_workdir(extracted, text, root)
    if direct and target_exists(direct, root):
        return direct

    pool = candidate_pool(memory, root)
    if extracted:
        closest = choose_closest_candidate(extracted, pool)
        if closest:
            return closest

    closest = choose_closest_candidate(text, pool)
    if closest:
        return closest

    if direct:
        logger.debug(f"[resolver] unverified target {direct!r}")
    return direct


def suggest_targets(text: Optional[str], memory: SessionMemory, root: str, limit: int = SUGGESTION_LIMIT) -> List[str]:
    """Up to ``limit`` names from the pool, nearest first."""
    probe = voice_alias(extract_candidate(text) or text)
    if not probe:
        return []
    probe_ph = phonetic_key(probe)

    scored = []
    for name in candidate_pool(memory, root):
        n = normalize_text(name)
        if not n:
            continue
        score = min(
            distance_ratio(probe, voice_alias(n)),
            distance_ratio(probe_ph, phonetic_key(n)),
        )
        scored.append((score, name))

    scored.sort(key=lambda item: item[0])
    return [name for _, name in scored[:limit]]
