# FILE: vocapp/translation/tables.py
"""
Keyword/pattern tables for the rule-based intent classifiers.

All entries are matched against fold()-ed text (lowercase, no diacritics).
Plain strings are substring matches; entries in *_PATTERNS are regexes.
Spanish and English vocabulary live side by side.

v1.2 (2026-09): Added English vocabulary for every table.
v1.1 (2026-08): Split suggestion selection from ordinal selection.
v1.0 (2026-07): Initial tables.
"""
from __future__ import annotations

from typing import Dict, Tuple

TABLES_VERSION = "1.2"

# =============================================================================
# FILESYSTEM RELEVANCE
# =============================================================================

FILESYSTEM_KEYWORDS: Tuple[str, ...] = (
    # es
    "archivo", "archivos", "carpeta", "directorio", "ruta", "mover",
    "renombrar", "organizar", "listar", "contenido", "que hay en",
    "que contiene", "resumen de", "borra", "elimina", "copia", "crear",
    "proyecto",
    # en
    "file", "folder", "directory", "path", "move ", "rename", "organize",
    "list ", "contents", "what's in", "whats in", "delete", "copy",
    "create", "project",
)

# Path-like tokens: "./x", "~/x", "src/app", "notes.txt" style hints.
PATH_TOKEN_PATTERNS: Tuple[str, ...] = (
    r"(?:^|(?<=\s))(?:\.{0,2}/|~/)[A-Za-z0-9._\-]",
    r"(?:^|(?<=\s))\.[A-Za-z0-9_\-]{2,}",
    r"\b[A-Za-z0-9_\-]+\.[A-Za-z][A-Za-z0-9]{1,4}\b",
    r"\b[A-Za-z0-9._-]+/\B",
    r"\b[A-Za-z0-9._-]+/[A-Za-z0-9._-]",
)

# =============================================================================
# LISTING
# =============================================================================

FOLDER_WORDS: Tuple[str, ...] = (
    "carpeta", "directorios", "directorio", "folder", "directories", "directory",
)
FILE_WORDS: Tuple[str, ...] = ("archivo", "fichero", "file")
GENERIC_LISTING_PHRASES: Tuple[str, ...] = (
    "que hay", "que contiene", "listar", "lista ", "listame",
    "what's in", "whats in", "what is in", "list ", "show me",
)

# =============================================================================
# SUMMARY
# =============================================================================

SUMMARY_PHRASES: Tuple[str, ...] = (
    "resumen", "resumeme", "resumir", "de que va", "explicame", "explica",
    "summary", "summarize", "summarise", "explain", "what is it about",
)
SUMMARY_PATTERNS: Tuple[str, ...] = (
    r"\bque es\b",
    r"\bresume\b",
    r"\bwhat is\b(?! in\b)",
)

LONG_SUMMARY_PHRASES: Tuple[str, ...] = (
    "resumen largo", "muy detallado", "detallado", "completo", "en detalle",
    "a fondo", "profundo",
    "long summary", "detailed", "in detail", "in depth", "thorough", "full summary",
)

HIDDEN_PHRASES: Tuple[str, ...] = ("ocult", "hidden", "dotfiles")

# =============================================================================
# DECLARATION / CORRECTION
# =============================================================================

DECLARATION_NAMING_PHRASES: Tuple[str, ...] = (
    "se llama", "llamada", "llamo", "called", "named",
)
DECLARATION_PLACE_WORDS: Tuple[str, ...] = (
    "carpeta", "directorio", "ruta", "folder", "directory", "path",
)

CORRECTION_PHRASES: Tuple[str, ...] = (
    "me refiero", "quiero decir", "no, es", "me equivoque, es",
    "me equivoque es", "corrijo", "no esa, la otra", "no esa la otra",
    "en realidad es", "esa es",
    "i mean", "i meant", "correcting", "correction", "not that one",
    "actually it's", "actually its",
)
CORRECTION_PATTERNS: Tuple[str, ...] = (
    r"\bno era\b.+\bsino\b",
    r"\bno\b.+\bquiero decir\b",
    r"^es ",
    r"^it'?s ",
    r"\bno\b.+\bi mean\b",
)

# =============================================================================
# ANAPHORA
# =============================================================================

ANAPHORA_PHRASES: Tuple[str, ...] = (
    "esa carpeta", "ese directorio", "ese proyecto", "este proyecto",
    "esta carpeta", "este directorio", "esa ruta", "esta ruta", "anterior",
    "that folder", "that directory", "that project", "this folder",
    "this directory", "this project", "that path", "this path", "previous",
    "same folder",
)
ANAPHORA_PATTERNS: Tuple[str, ...] = (
    r"\bahi\b",
    r"\balli\b",
    r"\bthere\b",
)

# =============================================================================
# ORDINALS
# =============================================================================

ORDINAL_WORDS: Dict[str, int] = {
    "primera": 0, "primero": 0, "first": 0,
    "segunda": 1, "segundo": 1, "second": 1,
    "tercera": 2, "tercero": 2, "third": 2,
}
LAST_WORDS: Tuple[str, ...] = ("ultima", "ultimo", "last")

LIST_REFERENCE_PHRASES: Tuple[str, ...] = (
    "lista", "las que dijiste", "las que has dicho", "las carpetas que dijiste",
    "the list", "you mentioned", "you listed", "you said", "from the listing",
)

# Bare "the second one" / "la segunda" / "3" utterances.
BARE_ORDINAL_PATTERN = (
    r"^(?:la|el|the)?\s*"
    r"(?:primera|primero|segunda|segundo|tercera|tercero|ultima|ultimo|"
    r"first|second|third|last|\d+)"
    r"(?:\s+(?:one|option|opcion))?\s*[.!]?$"
)

SUGGESTION_PHRASES: Tuple[str, ...] = (
    "opcion", "de las opciones", "de esas", "de esas opciones",
    "la primera", "la segunda", "la tercera", "la ultima",
    "option", "of those", "of these", "the first", "the second",
    "the third", "the last",
)

# =============================================================================
# RESOLVER STOPWORDS
# =============================================================================

CANDIDATE_STOPWORDS: Tuple[str, ...] = (
    "archivo", "carpeta", "directorio", "proyecto", "esta", "estas", "est",
    "es", "que", "de", "la", "el",
    "file", "folder", "directory", "project", "this", "that", "the", "is",
    "it", "one", "there",
)

TOKEN_STOPWORDS: Tuple[str, ...] = (
    "la", "el", "de", "del", "que", "quiero", "resumen", "carpeta",
    "directorio", "ruta", "me", "refiero", "es", "una", "un", "por", "favor",
    "app",
    "the", "folder", "directory", "path", "mean", "want", "please", "summary",
    "that", "this", "one", "called", "named", "open",
)
