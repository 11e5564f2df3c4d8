"""Conversion of catalog products into indexed entries.

Everything here is a pure function of the product (plus static tables and
thresholds), so an entry can always be rebuilt wholesale when the product
changes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging

from catalog_search.domain.model import IndexedEntry, Product
from catalog_search.search.decoding import DecodeOutcome, Empty, decode_colors, decode_sizes
from catalog_search.search.normalizer import (
    default_color_table,
    default_size_table,
    normalize_text,
    split_tokens,
)
from catalog_search.search.synonyms import SynonymTable


logger = logging.getLogger(__name__)

TAG_FEATURED = "featured"
TAG_OUT_OF_STOCK = "out-of-stock"
TAG_LOW_STOCK = "low-stock"


@dataclass(frozen=True)
class EntryBuilder:
    """Builds IndexedEntry values with a fixed set of tables and thresholds."""

    color_table: SynonymTable = field(default_factory=default_color_table)
    size_table: SynonymTable = field(default_factory=default_size_table)
    low_stock_threshold: int = 5
    min_token_length: int = 3
    on_decode_error: Callable[[str], None] | None = None

    def build(self, product: Product) -> IndexedEntry:
        normalized_name = normalize_text(product.name)
        normalized_description = normalize_text(product.description)

        colors = self._decoded_or_empty(product, "colors", decode_colors(product.colors))
        sizes = self._decoded_or_empty(product, "sizes", decode_sizes(product.sizes))

        return IndexedEntry(
            product=product,
            normalized_name=normalized_name,
            normalized_description=normalized_description,
            normalized_colors=tuple(self.color_table.resolve(color) for color in colors),
            normalized_sizes=tuple(self.size_table.resolve(size) for size in sizes),
            normalized_category=normalize_text(product.category_id),
            tags=extract_tags(product, low_stock_threshold=self.low_stock_threshold),
            popularity=1 if product.featured else 0,
            tokens=extract_tokens(
                normalized_name,
                normalized_description,
                min_length=self.min_token_length,
            ),
        )

    def _decoded_or_empty(self, product: Product, field_name: str, outcome: DecodeOutcome) -> tuple[str, ...]:
        if isinstance(outcome, Empty):
            if outcome.malformed:
                logger.warning(
                    "Ignoring malformed %s on product %s: %s",
                    field_name,
                    product.id,
                    outcome.reason,
                    extra={"product_id": product.id, "field": field_name},
                )
                if self.on_decode_error is not None:
                    self.on_decode_error(field_name)
            return ()
        return outcome.items


def extract_tags(product: Product, *, low_stock_threshold: int = 5) -> tuple[str, ...]:
    """Derive the featured / out-of-stock / low-stock labels."""
    tags: list[str] = []
    if product.featured:
        tags.append(TAG_FEATURED)
    if product.stock == 0:
        tags.append(TAG_OUT_OF_STOCK)
    elif 0 < product.stock <= low_stock_threshold:
        tags.append(TAG_LOW_STOCK)
    return tuple(tags)


def extract_tokens(*texts: str, min_length: int = 3) -> tuple[str, ...]:
    """Unique whitespace tokens of at least ``min_length`` characters, in first-seen order."""
    seen: dict[str, None] = {}
    for text in texts:
        for token in split_tokens(text):
            if len(token) >= min_length:
                seen.setdefault(token, None)
    return tuple(seen)
