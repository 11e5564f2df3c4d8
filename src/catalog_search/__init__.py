"""In-memory product search and autocomplete for a mutable catalog."""

from catalog_search.config import Settings, get_settings
from catalog_search.domain.model import InvalidProductError, Product, RankedProduct, SearchFilters
from catalog_search.search.normalizer import normalize_color, normalize_size, normalize_text
from catalog_search.search.search_index import ProductSearchIndex, get_search_index, reset_search_index


__all__ = [
    "InvalidProductError",
    "Product",
    "ProductSearchIndex",
    "RankedProduct",
    "SearchFilters",
    "Settings",
    "get_search_index",
    "get_settings",
    "normalize_color",
    "normalize_size",
    "normalize_text",
    "reset_search_index",
]
