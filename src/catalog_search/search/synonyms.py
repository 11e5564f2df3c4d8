"""Synonym and alias tables for catalog attributes.

Colors and sizes are stored by shop staff as free text ("Azul marino",
"Mediano", "36"). These tables fold the variants onto one canonical key so
filters match regardless of which spelling was used.

Each table maps a canonical key to its alias phrases. Lookup order matters:
the first group (in table order) whose key or alias matches wins. Numeric
sizes deliberately overlap (e.g. "32" is both a key and an alias of "36"),
so the earlier group claims the shared alias.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence


DEFAULT_COLOR_SYNONYMS: dict[str, tuple[str, ...]] = {
    "azul": ("azul marino", "azul oscuro", "azul claro", "azul cielo", "turquesa"),
    "rojo": ("rojo oscuro", "bordo", "vino", "carmesí"),
    "verde": ("verde oscuro", "verde claro", "verde militar", "verde oliva"),
    "blanco": ("crema", "hueso", "ivory"),
    "negro": ("negro profundo", "carbón"),
    "gris": ("gris claro", "gris oscuro", "plateado", "antracita"),
    "amarillo": ("dorado", "oro", "amarillo oscuro"),
    "rosa": ("rosado", "magenta", "fucsia", "coral"),
    "naranja": ("naranja oscuro", "salmón"),
    "marrón": ("café", "chocolate", "castaño", "tan", "beige"),
    "morado": ("púrpura", "violeta", "lavanda"),
}

DEFAULT_SIZE_ALIASES: dict[str, tuple[str, ...]] = {
    # Letter sizes
    "xs": ("xsmall", "extra small", "xs", "muy pequeño"),
    "s": ("small", "s", "pequeño"),
    "m": ("medium", "m", "mediano"),
    "l": ("large", "l", "grande"),
    "xl": ("xlarge", "extra large", "xl", "muy grande"),
    "xxl": ("xxlarge", "2xl", "xxl"),
    # Numeric sizes: own number, the regional equivalent, letter size
    "32": ("32", "28", "xs"),
    "34": ("34", "30", "s"),
    "36": ("36", "32", "m"),
    "38": ("38", "34", "l"),
    "40": ("40", "36", "xl"),
    "42": ("42", "38", "xxl"),
}


class SynonymTable:
    """Flat canonical-key -> aliases table with a precomputed reverse lookup.

    Keys and aliases are normalized with ``normalizer`` once at construction
    time, so each ``resolve`` call is a single dict lookup. Values that are
    not in the table resolve to themselves.
    """

    def __init__(self, groups: Mapping[str, Sequence[str]], normalizer) -> None:
        self._normalize = normalizer
        self._groups: dict[str, frozenset[str]] = {}
        self._lookup: dict[str, str] = {}

        for raw_key, aliases in groups.items():
            key = normalizer(raw_key)
            normalized_aliases = [normalizer(alias) for alias in aliases]
            self._groups[key] = frozenset(normalized_aliases)
            # setdefault keeps the first claim, matching table-order precedence
            self._lookup.setdefault(key, key)
            for alias in normalized_aliases:
                self._lookup.setdefault(alias, key)

    def resolve(self, raw: str | None) -> str:
        """Return the canonical key for ``raw`` or its normalized form."""
        normalized = self._normalize(raw)
        return self._lookup.get(normalized, normalized)

    def aliases(self, key: str) -> frozenset[str]:
        return self._groups.get(self._normalize(key), frozenset())

    def __contains__(self, value: object) -> bool:
        return isinstance(value, str) and self._normalize(value) in self._lookup

    def __len__(self) -> int:
        return len(self._groups)
