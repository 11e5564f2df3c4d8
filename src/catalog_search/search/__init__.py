"""
Product search and autocomplete engine.

This package provides a pure-Python, in-memory search stack:
- synonyms: color and size alias tables
- normalizer: diacritic-free text normalization and synonym folding
- fuzzy: edit-distance similarity
- decoding: tolerant decoding of JSON-encoded product fields
- indexer: product -> IndexedEntry conversion
- scoring: multi-factor relevance scoring
- search_index: the mutable index tying it together
"""

from catalog_search.search.search_index import ProductSearchIndex, get_search_index, reset_search_index


__all__ = ["ProductSearchIndex", "get_search_index", "reset_search_index"]
