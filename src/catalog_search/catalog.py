"""Loading product records from a JSON catalog export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import orjson


logger = logging.getLogger(__name__)


class CatalogLoadError(RuntimeError):
    """Raised when a catalog file cannot be read or has the wrong shape."""


def load_products(path: Path) -> list[dict[str, Any]]:
    """Read product records from ``path``.

    Accepts either a top-level JSON array or an object with a ``products``
    array (the shape of the catalog service's export). Records are returned
    as plain mappings; validation happens when they are indexed.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise CatalogLoadError(f"Cannot read catalog {path}: {exc}") from exc

    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise CatalogLoadError(f"Catalog {path} is not valid JSON: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("products")
    if not isinstance(payload, list):
        raise CatalogLoadError(f"Catalog {path} must be a JSON array or contain a 'products' array")

    records = [item for item in payload if isinstance(item, dict)]
    if len(records) != len(payload):
        logger.warning("Ignored %d non-object entries in %s", len(payload) - len(records), path)
    return records
