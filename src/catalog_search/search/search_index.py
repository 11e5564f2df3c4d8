"""In-memory product search index - deep module with a small interface.

Hides normalization, synonym folding, fuzzy matching and scoring behind
``search()`` and ``get_autocomplete()``, plus four mutation methods that
keep the index in step with the catalog.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import threading
from typing import Any

from pydantic import ValidationError

from catalog_search.config import Settings, get_settings
from catalog_search.domain.model import (
    IndexedEntry,
    IndexStats,
    InvalidProductError,
    Product,
    RankedProduct,
    SearchFilters,
)
from catalog_search.observability.context import operation_span
from catalog_search.observability.metrics import (
    AUTOCOMPLETE_REQUESTS,
    DECODE_ERRORS,
    INDEXED_PRODUCTS,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    track_latency,
)
from catalog_search.search.indexer import EntryBuilder
from catalog_search.search.normalizer import default_color_table, default_size_table, normalize_text
from catalog_search.search.scoring import PreparedQuery, ScoringWeights, score_entry
from catalog_search.search.synonyms import SynonymTable


logger = logging.getLogger(__name__)

ProductLike = Product | Mapping[str, Any]


class ProductSearchIndex:
    """Searchable, mutable view over a product catalog.

    One IndexedEntry per live product id plus an insertion-ordered token
    set for autocomplete. Every public method takes the instance lock, so
    a search never sees a half-applied mutation.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        color_table: SynonymTable | None = None,
        size_table: SynonymTable | None = None,
        weights: ScoringWeights | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._color_table = color_table or default_color_table()
        self._size_table = size_table or default_size_table()
        self._weights = weights or ScoringWeights(featured_boost=self.settings.featured_boost)
        self._builder = EntryBuilder(
            color_table=self._color_table,
            size_table=self._size_table,
            low_stock_threshold=self.settings.low_stock_threshold,
            min_token_length=self.settings.min_token_length,
            on_decode_error=self._count_decode_error,
        )
        self._entries: dict[str, IndexedEntry] = {}
        # token -> number of live entries contributing it (insertion ordered)
        self._tokens: dict[str, int] = {}
        self._lock = threading.RLock()

    @property
    def catalog(self) -> str:
        return self.settings.catalog_name

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def initialize(self, products: Iterable[ProductLike]) -> int:
        """Clear the index and rebuild it from ``products``.

        Records that fail validation are logged and skipped so one bad row
        never blocks the rest of the catalog.

        Returns:
            Number of products indexed.
        """
        with self._lock, operation_span(self.catalog):
            self._entries.clear()
            self._tokens.clear()
            skipped = 0
            for record in products:
                validated = self._validated(record)
                if validated is None:
                    skipped += 1
                    continue
                self._index(validated)
            self._publish_size()
            logger.info(
                "Search index initialized with %d products (%d tokens, %d skipped)",
                len(self._entries),
                len(self._tokens),
                skipped,
            )
            return len(self._entries)

    def index_product(self, product: ProductLike) -> bool:
        """Insert or overwrite the entry for ``product``.

        Returns:
            False when the record has no usable id and was skipped.
        """
        validated = self._validated(product)
        if validated is None:
            return False
        with self._lock:
            self._index(validated)
            self._publish_size()
        logger.debug("Indexed product %s", validated.id, extra={"product_id": validated.id})
        return True

    def update_product(self, product: ProductLike) -> bool:
        """Replace the entry for ``product`` wholesale.

        The product moves to the end of the index order, as if deleted and
        indexed again.

        Returns:
            False when the record has no usable id and was skipped.
        """
        validated = self._validated(product)
        if validated is None:
            return False
        with self._lock:
            self._index(validated, move_to_end=True)
            self._publish_size()
        logger.debug("Updated product %s", validated.id, extra={"product_id": validated.id})
        return True

    def remove_product(self, product_id: str) -> None:
        """Drop the entry for ``product_id``; unknown ids are ignored."""
        with self._lock:
            removed = self._remove(product_id)
            self._publish_size()
        if removed:
            logger.debug("Removed product %s", product_id, extra={"product_id": product_id})

    def _validated(self, record: ProductLike) -> Product | None:
        try:
            return Product.coerce(record)
        except InvalidProductError as exc:
            logger.error(
                "Skipping invalid product %s: %s",
                exc.product_id or "<unknown>",
                exc,
                extra={"product_id": exc.product_id},
            )
            return None

    def _index(self, product: Product, *, move_to_end: bool = False) -> None:
        entry = self._builder.build(product)
        if move_to_end:
            previous = self._entries.pop(product.id, None)
        else:
            previous = self._entries.get(product.id)
        self._entries[product.id] = entry
        for token in entry.tokens:
            self._tokens[token] = self._tokens.get(token, 0) + 1
        if previous is not None:
            self._release_tokens(previous.tokens)

    def _remove(self, product_id: str) -> bool:
        entry = self._entries.pop(product_id, None)
        if entry is None:
            return False
        self._release_tokens(entry.tokens)
        return True

    def _release_tokens(self, tokens: Iterable[str]) -> None:
        if not self.settings.is_live_token_retention():
            return
        for token in tokens:
            remaining = self._tokens.get(token, 0) - 1
            if remaining > 0:
                self._tokens[token] = remaining
            else:
                self._tokens.pop(token, None)

    def _publish_size(self) -> None:
        INDEXED_PRODUCTS.labels(catalog=self.catalog).set(len(self._entries))

    def _count_decode_error(self, field_name: str) -> None:
        DECODE_ERRORS.labels(catalog=self.catalog, field=field_name).inc()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        filters: SearchFilters | Mapping[str, Any] | None = None,
    ) -> list[Product]:
        """Return products matching ``query``, best first.

        Args:
            query: Free-text query. Blank queries return no results.
            filters: Optional categoryId / color / size / maxResults.

        Returns:
            At most ``maxResults`` products (default 50) in descending score
            order; equal scores keep index order.
        """
        return [ranked.product for ranked in self.rank(query, filters)]

    def rank(
        self,
        query: str,
        filters: SearchFilters | Mapping[str, Any] | None = None,
    ) -> list[RankedProduct]:
        """Like ``search`` but keeps each hit's score and fired factors."""
        if not query or not query.strip():
            SEARCH_REQUESTS.labels(catalog=self.catalog, outcome="empty_query").inc()
            return []

        resolved = self._resolve_filters(filters)
        max_results = resolved.max_results or self.settings.default_max_results
        prepared = PreparedQuery.build(
            query,
            resolved,
            color_table=self._color_table,
            size_table=self._size_table,
        )

        with self._lock, track_latency(SEARCH_LATENCY, catalog=self.catalog):
            hits: list[RankedProduct] = []
            for entry in self._entries.values():
                if not entry.is_searchable:
                    continue
                score, factors = score_entry(
                    entry,
                    prepared,
                    weights=self._weights,
                    threshold=self.settings.fuzzy_threshold,
                )
                if score > 0:
                    hits.append(RankedProduct(product=entry.product, score=score, factors=factors))

        # list.sort is stable: equal scores keep encounter order
        hits.sort(key=lambda hit: hit.score, reverse=True)
        outcome = "hit" if hits else "miss"
        SEARCH_REQUESTS.labels(catalog=self.catalog, outcome=outcome).inc()
        logger.debug(
            "Search %r matched %d products",
            prepared.normalized,
            len(hits),
            extra={"query": prepared.normalized, "matches": len(hits)},
        )
        return hits[:max_results]

    def _resolve_filters(self, filters: SearchFilters | Mapping[str, Any] | None) -> SearchFilters:
        try:
            return SearchFilters.coerce(filters)
        except ValidationError as exc:
            logger.warning(
                "Ignoring unusable search filters (%d validation errors)",
                exc.error_count(),
                extra={"filters": repr(filters)},
            )
            return SearchFilters()

    def get_autocomplete(self, prefix: str, limit: int | None = None) -> list[str]:
        """Return up to ``limit`` indexed tokens starting with ``prefix``."""
        if limit is None:
            limit = self.settings.autocomplete_default_limit
        if limit <= 0:
            return []

        normalized_prefix = normalize_text(prefix)
        suggestions: list[str] = []
        with self._lock:
            for token in self._tokens:
                if token.startswith(normalized_prefix):
                    suggestions.append(token)
                    if len(suggestions) >= limit:
                        break
        AUTOCOMPLETE_REQUESTS.labels(catalog=self.catalog).inc()
        return suggestions

    def get_stats(self) -> IndexStats:
        with self._lock:
            return IndexStats(indexed_products=len(self._entries), total_tokens=len(self._tokens))

    def get_entry(self, product_id: str) -> IndexedEntry | None:
        with self._lock:
            return self._entries.get(product_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, product_id: object) -> bool:
        with self._lock:
            return product_id in self._entries


_default_index: dict[str, ProductSearchIndex | None] = {"index": None}
_default_lock = threading.Lock()


def get_search_index() -> ProductSearchIndex:
    """Process-wide index for hosts that want a shared instance."""
    with _default_lock:
        index = _default_index["index"]
        if index is None:
            index = ProductSearchIndex(get_settings())
            _default_index["index"] = index
        return index


def reset_search_index() -> None:
    """Forget the process-wide index; the next ``get_search_index`` builds a fresh one."""
    with _default_lock:
        _default_index["index"] = None
