# FILE: vocapp/translation/schemas.py
"""
Pydantic models for the translation (intent) layer.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class ListingKind(str, Enum):
    """Which entries a listing request wants."""
    DIRS = "dirs"
    FILES = "files"
    ENTRIES = "entries"


class TurnIntents(BaseModel):
    """Snapshot of every classifier for one utterance. Several may fire."""
    text: str
    filesystem: bool = False
    listing: Optional[ListingKind] = None
    summary: bool = False
    long_summary: bool = False
    hidden: bool = False
    declaration: bool = False
    correction: bool = False
    anaphora: bool = False
    bare_ordinal: bool = False
    list_reference: bool = False

    @property
    def targets_filesystem(self) -> bool:
        """True when any intent needs a resolved target."""
        return (
            self.filesystem
            or self.summary
            or self.declaration
            or self.correction
            or self.listing is not None
        )

    def labels(self) -> List[str]:
        out = []
        for name in ("filesystem", "summary", "declaration", "correction", "anaphora"):
            if getattr(self, name):
                out.append(name)
        if self.listing is not None:
            out.append(f"listing:{self.listing.value}")
        return out
