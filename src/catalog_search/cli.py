"""CLI for querying a catalog export through the search index."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import json
import logging
from pathlib import Path
import sys

from catalog_search.catalog import CatalogLoadError, load_products
from catalog_search.config import Settings, get_settings
from catalog_search.observability.logging import configure_logging
from catalog_search.search.search_index import ProductSearchIndex


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search a product catalog export")
    parser.add_argument(
        "--catalog",
        type=Path,
        required=True,
        help="Path to a JSON catalog export (array or {'products': [...]})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Rank products for a query")
    search.add_argument("query", help="Free-text query")
    search.add_argument("--category-id", dest="category_id", default=None, help="Boost this category")
    search.add_argument("--color", default=None, help="Boost products in this color")
    search.add_argument("--size", default=None, help="Boost products in this size")
    search.add_argument("--limit", type=int, default=None, help="Maximum results to print")
    search.add_argument("--scores", action="store_true", help="Include score and matched factors")

    autocomplete = subparsers.add_parser("autocomplete", help="Suggest tokens for a prefix")
    autocomplete.add_argument("prefix", help="Prefix typed so far")
    autocomplete.add_argument("--limit", type=int, default=None, help="Maximum suggestions")

    subparsers.add_parser("stats", help="Print index statistics")
    return parser


def _write(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, sort_keys=True, ensure_ascii=False) + "\n")


def _run_search(index: ProductSearchIndex, args: argparse.Namespace) -> None:
    filters = {
        "categoryId": args.category_id,
        "color": args.color,
        "size": args.size,
        "maxResults": args.limit,
    }
    for hit in index.rank(args.query, filters):
        payload = hit.product.model_dump(mode="json", by_alias=True)
        if args.scores:
            payload["_score"] = round(hit.score, 4)
            payload["_factors"] = hit.factors
        _write(payload)


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    if not logging.getLogger().handlers:
        configure_logging(settings.log_level, settings.log_json)

    args = build_argument_parser().parse_args(argv)

    try:
        products = load_products(args.catalog)
    except CatalogLoadError as exc:
        logger.error("%s", exc)
        return 1

    index = ProductSearchIndex(settings)
    index.initialize(products)

    if args.command == "search":
        _run_search(index, args)
    elif args.command == "autocomplete":
        limit = settings.clamp_autocomplete_limit(args.limit)
        _write({"suggestions": index.get_autocomplete(args.prefix, limit)})
    else:
        _write(index.get_stats().model_dump())
    return 0


if __name__ == "__main__":
    sys.exit(main())
