"""Shared test fixtures and configuration."""

from collections.abc import Callable
import os
from typing import Any

import pytest

from catalog_search.config import Settings, get_settings
from catalog_search.search.search_index import ProductSearchIndex, reset_search_index


# Strip host configuration so every test starts from documented defaults
for key in list(os.environ):
    if key.upper().startswith("CATALOG_SEARCH_"):
        del os.environ[key]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Clear cached settings and the shared index around every test."""
    for key in list(os.environ):
        if key.upper().startswith("CATALOG_SEARCH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))  # keep stray .env files out of Settings
    get_settings.cache_clear()
    reset_search_index()
    yield
    get_settings.cache_clear()
    reset_search_index()


@pytest.fixture
def make_product() -> Callable[..., dict[str, Any]]:
    """Factory for catalog records shaped like the catalog service's rows."""
    counter = {"next": 0}

    def _make(name: str, **overrides: Any) -> dict[str, Any]:
        counter["next"] += 1
        record: dict[str, Any] = {
            "id": f"p-{counter['next']}",
            "name": name,
            "description": None,
            "price": "19.99",
            "stock": 10,
            "categoryId": None,
            "colors": None,
            "sizes": None,
            "featured": False,
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(catalog_name="test")


@pytest.fixture
def index(settings: Settings) -> ProductSearchIndex:
    return ProductSearchIndex(settings)
