"""Decoding of the JSON-encoded ``colors`` and ``sizes`` product fields.

The catalog store keeps both fields as JSON text, but callers sometimes
hand over already-decoded lists. Every tolerance for odd shapes lives
here: the rest of the engine only ever sees ``Parsed`` or ``Empty``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import orjson


@dataclass(frozen=True, slots=True)
class Parsed:
    """Successfully decoded field values (raw, not yet normalized)."""

    items: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Empty:
    """No usable values; ``malformed`` is True when data was present but bad."""

    reason: str
    malformed: bool = False


DecodeOutcome = Parsed | Empty


def _load_list(value: Any) -> list[Any] | Empty:
    if value is None or value == "":
        return Empty("absent")
    if isinstance(value, (str, bytes, bytearray)):
        try:
            value = orjson.loads(value)
        except orjson.JSONDecodeError as exc:
            return Empty(f"invalid JSON: {exc}", malformed=True)
    if isinstance(value, (list, tuple)):
        return list(value)
    return Empty(f"expected a list, got {type(value).__name__}", malformed=True)


def decode_colors(value: Any) -> DecodeOutcome:
    """Decode a color list: ``'["Rojo", "Azul"]'`` or ``["Rojo", "Azul"]``."""
    loaded = _load_list(value)
    if isinstance(loaded, Empty):
        return loaded
    if not all(isinstance(item, str) for item in loaded):
        return Empty("color entries must be strings", malformed=True)
    return Parsed(tuple(item for item in loaded if item))


def decode_sizes(value: Any) -> DecodeOutcome:
    """Decode a size list.

    Entries are ``{"size": "M", "quantity": 3}`` objects or bare strings.
    Objects without a usable ``size`` are dropped rather than failing the
    whole field.
    """
    loaded = _load_list(value)
    if isinstance(loaded, Empty):
        return loaded

    sizes: list[str] = []
    for item in loaded:
        if isinstance(item, str):
            size = item
        elif isinstance(item, Mapping):
            size = item.get("size")
        else:
            return Empty(f"unexpected size entry of type {type(item).__name__}", malformed=True)
        if isinstance(size, (int, float)) and not isinstance(size, bool):
            size = str(size)
        if isinstance(size, str) and size:
            sizes.append(size)
    return Parsed(tuple(sizes))
