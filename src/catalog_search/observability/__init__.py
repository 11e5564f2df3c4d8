"""Observability: structured logging, metrics and context correlation."""

from catalog_search.observability.context import (
    get_search_context,
    operation_span,
    search_context,
    set_search_context,
)
from catalog_search.observability.logging import JsonFormatter, configure_logging
from catalog_search.observability.metrics import (
    AUTOCOMPLETE_REQUESTS,
    DECODE_ERRORS,
    INDEXED_PRODUCTS,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)


__all__ = [
    "AUTOCOMPLETE_REQUESTS",
    "DECODE_ERRORS",
    "INDEXED_PRODUCTS",
    "SEARCH_LATENCY",
    "SEARCH_REQUESTS",
    "JsonFormatter",
    "configure_logging",
    "get_metrics",
    "get_metrics_content_type",
    "get_search_context",
    "init_metrics",
    "operation_span",
    "search_context",
    "set_search_context",
    "track_latency",
]
