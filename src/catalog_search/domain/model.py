"""Domain model - catalog records and derived search values.

Products arrive from the catalog store (outside this package) and are
validated into immutable Pydantic models. The engine keeps its own copy
for indexing only; the catalog store stays the source of truth.

Only the product id is essential. Every other field degrades to an empty
value when the store hands over something unusable, so one odd column
never keeps a product out of search.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class InvalidProductError(ValueError):
    """Raised when a product record has no usable id."""

    def __init__(self, message: str, *, product_id: str | None = None) -> None:
        super().__init__(message)
        self.product_id = product_id


def _text_or_none(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return None


def _finite_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


class Product(BaseModel):
    """Catalog product as supplied by the surrounding catalog service.

    Accepts both camelCase (``categoryId``) and snake_case field names.
    ``colors`` and ``sizes`` are kept in whatever shape the store handed
    over (JSON text or decoded lists); decoding happens at index time.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = ""
    description: str | None = None
    price: Decimal | None = None
    stock: int = 0
    category_id: str | None = Field(default=None, alias="categoryId")
    colors: Any = None
    sizes: Any = None
    featured: bool = False

    @field_validator("id", "description", "category_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str | None:
        return _text_or_none(value)

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, value: Any) -> str:
        return _text_or_none(value) or ""

    @field_validator("price", mode="before")
    @classmethod
    def _unparseable_price_is_none(cls, value: Any) -> Decimal | None:
        # "19,99" and similar locale formats end up here
        return _finite_decimal(value)

    @field_validator("stock", mode="before")
    @classmethod
    def _unusable_stock_is_zero(cls, value: Any) -> int:
        parsed = _finite_decimal(value)
        return int(parsed) if parsed is not None else 0

    @field_validator("featured", mode="before")
    @classmethod
    def _loose_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"true", "1", "yes"}
        if isinstance(value, (bool, int, float)):
            return bool(value)
        return False

    @classmethod
    def coerce(cls, record: Product | Mapping[str, Any]) -> Product:
        """Return ``record`` as a Product, validating plain mappings.

        Raises:
            InvalidProductError: if the record is not a mapping or has no id.
        """
        if isinstance(record, Product):
            return record
        try:
            return cls.model_validate(record)
        except ValidationError as exc:
            product_id = _text_or_none(record.get("id")) if isinstance(record, Mapping) else None
            raise InvalidProductError(
                f"Invalid product record: {exc.error_count()} validation error(s)",
                product_id=product_id or None,
            ) from exc


class SearchFilters(BaseModel):
    """Optional filters accepted by ``ProductSearchIndex.search``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    category_id: str | None = Field(default=None, alias="categoryId")
    color: str | None = None
    size: str | None = None
    max_results: int | None = Field(default=None, alias="maxResults")

    @field_validator("category_id", "color", "size", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str | None:
        # Hosts that parse query strings may hand over numbers ("size=38")
        return _text_or_none(value)

    @field_validator("max_results", mode="before")
    @classmethod
    def _unusable_means_default(cls, value: Any) -> int | None:
        # Query-string limits arrive as text; anything unusable falls back to the default
        if value is None or isinstance(value, bool):
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return None
        return parsed if parsed > 0 else None

    @classmethod
    def coerce(cls, filters: SearchFilters | Mapping[str, Any] | None) -> SearchFilters:
        """Return ``filters`` as a SearchFilters.

        Raises:
            pydantic.ValidationError: if ``filters`` is not a mapping.
        """
        if filters is None:
            return cls()
        if isinstance(filters, SearchFilters):
            return filters
        return cls.model_validate(filters)


@dataclass(frozen=True, slots=True)
class IndexedEntry:
    """Per-product cached representation used for scoring.

    Derived purely from a Product and replaced wholesale whenever the
    product changes.
    """

    product: Product
    normalized_name: str
    normalized_description: str
    normalized_colors: tuple[str, ...]
    normalized_sizes: tuple[str, ...]
    normalized_category: str
    tags: tuple[str, ...]
    popularity: int
    tokens: tuple[str, ...] = field(default_factory=tuple)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def is_searchable(self) -> bool:
        """False for out-of-stock products that are not featured."""
        return bool(self.product.stock) or self.popularity > 0


class RankedProduct(BaseModel):
    """A search hit with the score and the factors that produced it."""

    model_config = ConfigDict(frozen=True)

    product: Product
    score: float
    factors: list[str] = Field(default_factory=list)


class IndexStats(BaseModel):
    """Point-in-time size of the index."""

    model_config = ConfigDict(frozen=True)

    indexed_products: int
    total_tokens: int
