"""Relevance scoring for product search.

Scores are additive: each factor that fires adds its weight, then featured
products get a multiplicative boost. A product with a final score of zero
is not a match.

Factors, in evaluation order:
- exact_name: normalized query equals normalized name
- name_contains: normalized query is a substring of the name
- token_in_name / token_similar_name / token_in_description: per query token
- color / size / category: filter matches
- featured: multiplier, applied last
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog_search.domain.model import IndexedEntry, SearchFilters
from catalog_search.search.fuzzy import DEFAULT_SIMILARITY_THRESHOLD, is_similar
from catalog_search.search.normalizer import normalize_text, split_tokens
from catalog_search.search.synonyms import SynonymTable


@dataclass(frozen=True)
class ScoringWeights:
    exact_name: float = 1000.0
    name_contains: float = 500.0
    token_in_name: float = 100.0
    token_similar_name: float = 50.0
    token_in_description: float = 30.0
    color: float = 150.0
    size: float = 100.0
    category: float = 200.0
    featured_boost: float = 1.2


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class PreparedQuery:
    """A query normalized once, ready to be scored against every entry."""

    normalized: str
    tokens: tuple[str, ...]
    color: str | None = None
    size: str | None = None
    category_id: str | None = None

    @classmethod
    def build(
        cls,
        query: str,
        filters: SearchFilters,
        *,
        color_table: SynonymTable,
        size_table: SynonymTable,
    ) -> PreparedQuery:
        normalized = normalize_text(query)
        return cls(
            normalized=normalized,
            tokens=tuple(split_tokens(normalized)),
            color=color_table.resolve(filters.color) if filters.color else None,
            size=size_table.resolve(filters.size) if filters.size else None,
            category_id=filters.category_id or None,
        )


def _any_similar(values: tuple[str, ...], target: str, threshold: int) -> bool:
    return any(value == target or is_similar(value, target, threshold) for value in values)


def score_entry(
    entry: IndexedEntry,
    query: PreparedQuery,
    *,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    threshold: int = DEFAULT_SIMILARITY_THRESHOLD,
) -> tuple[float, list[str]]:
    """Score one entry against a prepared query.

    Returns the final score and the names of the factors that fired.
    Entries failing the stock/featured hard filter must be skipped by the
    caller before scoring.
    """
    score = 0.0
    factors: list[str] = []
    name = entry.normalized_name

    if name == query.normalized:
        score += weights.exact_name
        factors.append("exact_name")

    if query.normalized in name:
        score += weights.name_contains
        factors.append("name_contains")

    for token in query.tokens:
        if token in name:
            score += weights.token_in_name
            factors.append("token_in_name")
        # Token against the whole name, not against name tokens
        if is_similar(token, name, threshold):
            score += weights.token_similar_name
            factors.append("token_similar_name")
        if token in entry.normalized_description:
            score += weights.token_in_description
            factors.append("token_in_description")

    if query.color is not None and _any_similar(entry.normalized_colors, query.color, threshold):
        score += weights.color
        factors.append("color")

    if query.size is not None and _any_similar(entry.normalized_sizes, query.size, threshold):
        score += weights.size
        factors.append("size")

    if query.category_id is not None and entry.product.category_id == query.category_id:
        score += weights.category
        factors.append("category")

    if entry.popularity > 0:
        score *= weights.featured_boost
        factors.append("featured")

    return score, factors
