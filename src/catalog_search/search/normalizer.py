"""Text normalization for catalog search.

All comparisons in the engine happen on normalized text: lowercased,
trimmed, canonically decomposed and stripped of combining marks, so
"Pantalón" and "pantalon" compare equal.
"""

from __future__ import annotations

from functools import lru_cache
import unicodedata

from catalog_search.search.synonyms import DEFAULT_COLOR_SYNONYMS, DEFAULT_SIZE_ALIASES, SynonymTable


def normalize_text(text: str | None) -> str:
    """Lowercase, trim and strip diacritics.

    Examples:
        >>> normalize_text("  Pantalón ")
        'pantalon'
        >>> normalize_text(None)
        ''
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower().strip())
    # Marks stripped next to the edges can expose fresh surrounding whitespace
    return "".join(char for char in decomposed if not unicodedata.combining(char)).strip()


@lru_cache(maxsize=1)
def default_color_table() -> SynonymTable:
    return SynonymTable(DEFAULT_COLOR_SYNONYMS, normalize_text)


@lru_cache(maxsize=1)
def default_size_table() -> SynonymTable:
    return SynonymTable(DEFAULT_SIZE_ALIASES, normalize_text)


def normalize_color(raw: str | None, table: SynonymTable | None = None) -> str:
    """Fold a color onto its canonical key ("Rosado" -> "rosa").

    Unknown colors pass through normalized.
    """
    return (table or default_color_table()).resolve(raw)


def normalize_size(raw: str | None, table: SynonymTable | None = None) -> str:
    """Fold a size onto its canonical key ("Mediano" -> "m")."""
    return (table or default_size_table()).resolve(raw)


def split_tokens(text: str) -> list[str]:
    """Split normalized text on whitespace, dropping empty tokens."""
    return text.split()
