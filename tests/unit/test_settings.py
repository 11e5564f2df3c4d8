"""Unit tests for the config module."""

from pydantic import ValidationError
import pytest

from catalog_search.config import Settings, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.catalog_name == "default"
        assert settings.default_max_results == 50
        assert settings.fuzzy_threshold == 2
        assert settings.min_token_length == 3
        assert settings.low_stock_threshold == 5
        assert settings.featured_boost == pytest.approx(1.2)
        assert settings.token_retention == "append_only"
        assert settings.is_live_token_retention() is False

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_DEFAULT_MAX_RESULTS", "25")
        monkeypatch.setenv("CATALOG_SEARCH_TOKEN_RETENTION", "live")

        settings = Settings()

        assert settings.default_max_results == 25
        assert settings.is_live_token_retention() is True

    def test_rejects_invalid_values(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_DEFAULT_MAX_RESULTS", "0")

        with pytest.raises(ValidationError):
            Settings()

    def test_rejects_unknown_retention_policy(self):
        with pytest.raises(ValidationError):
            Settings(token_retention="forever")

    def test_autocomplete_max_must_cover_default(self):
        with pytest.raises(ValidationError):
            Settings(autocomplete_default_limit=30, autocomplete_max_limit=20)

    @pytest.mark.parametrize(("requested", "expected"), [(None, 10), (0, 10), (5, 5), (50, 20)])
    def test_clamp_autocomplete_limit(self, requested, expected):
        assert Settings().clamp_autocomplete_limit(requested) == expected

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
