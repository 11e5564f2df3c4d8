"""Centralized configuration for catalog-search using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``CATALOG_SEARCH_*`` environment variables.

    Scoring weights are fixed by the ranking model; only the knobs that
    hosts legitimately tune are exposed here.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    catalog_name: str = Field(default="default", description="Label attached to logs and metrics")

    # Search settings
    default_max_results: int = Field(default=50, ge=1, description="Results returned when maxResults is absent")
    fuzzy_threshold: int = Field(default=2, ge=0, description="Maximum edit distance considered similar")
    featured_boost: float = Field(default=1.2, ge=1.0, description="Score multiplier for featured products")

    # Indexing settings
    min_token_length: int = Field(default=3, ge=1, description="Shortest token kept for autocomplete")
    low_stock_threshold: int = Field(default=5, ge=0, description="Stock at or below this is tagged low-stock")
    token_retention: Literal["append_only", "live"] = Field(
        default="append_only",
        description="append_only keeps tokens of removed products; live drops them with the last contributor",
    )

    # Autocomplete settings
    autocomplete_default_limit: int = Field(default=10, ge=1, description="Suggestions returned by default")
    autocomplete_max_limit: int = Field(default=20, ge=1, description="Upper bound on requested suggestions")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_autocomplete_limits(self) -> "Settings":
        if self.autocomplete_max_limit < self.autocomplete_default_limit:
            raise ValueError(
                "CATALOG_SEARCH_AUTOCOMPLETE_MAX_LIMIT must be >= CATALOG_SEARCH_AUTOCOMPLETE_DEFAULT_LIMIT"
            )
        return self

    def is_live_token_retention(self) -> bool:
        return self.token_retention == "live"

    def clamp_autocomplete_limit(self, limit: int | None) -> int:
        """Resolve a caller-supplied suggestion limit.

        Missing or zero limits fall back to the default; anything above the
        maximum is capped.
        """
        if not limit:
            return self.autocomplete_default_limit
        return min(limit, self.autocomplete_max_limit)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    return Settings()
