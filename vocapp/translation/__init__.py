# FILE: vocapp/translation/__init__.py
"""Translation layer: text folding and rule-based intent classification.

Everything here is pure. No filesystem access, no model calls.
"""

from vocapp.translation.normalize import (
    fold,
    normalize_text,
    voice_alias,
    phonetic_key,
    levenshtein,
    distance_ratio,
    containment_ratio,
)
from vocapp.translation.schemas import ListingKind, TurnIntents
from vocapp.translation.classifiers import (
    is_filesystem_intent,
    detect_summary_intent,
    detect_listing_intent,
    detect_long_summary,
    wants_hidden_entries,
    detect_declaration_intent,
    detect_correction_intent,
    references_previous_target,
    is_ordinal_utterance,
    references_listing,
    classify_turn,
)
from vocapp.translation.tables import TABLES_VERSION

__all__ = [
    "fold",
    "normalize_text",
    "voice_alias",
    "phonetic_key",
    "levenshtein",
    "distance_ratio",
    "containment_ratio",
    "ListingKind",
    "TurnIntents",
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
    "TABLES_VERSION",
]
