"""Domain layer - catalog records and derived search values.

No dependencies on infrastructure: products come in from the catalog
service, ranked products go back out.
"""

from catalog_search.domain.model import (
    IndexedEntry,
    IndexStats,
    InvalidProductError,
    Product,
    RankedProduct,
    SearchFilters,
)


__all__ = [
    "IndexStats",
    "IndexedEntry",
    "InvalidProductError",
    "Product",
    "RankedProduct",
    "SearchFilters",
]
