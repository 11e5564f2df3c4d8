"""Unit tests for reading catalog exports."""

import json
import logging

import pytest

from catalog_search.catalog import CatalogLoadError, load_products


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_reads_top_level_array(tmp_path):
    path = _write(tmp_path / "catalog.json", [{"id": "1", "name": "Gorra"}])

    assert load_products(path) == [{"id": "1", "name": "Gorra"}]


def test_reads_products_envelope(tmp_path):
    path = _write(tmp_path / "catalog.json", {"products": [{"id": "1"}, {"id": "2"}], "total": 2})

    assert [record["id"] for record in load_products(path)] == ["1", "2"]


def test_skips_non_object_entries(tmp_path, caplog):
    path = _write(tmp_path / "catalog.json", [{"id": "1"}, "oops", 3])

    with caplog.at_level(logging.WARNING, logger="catalog_search.catalog"):
        records = load_products(path)

    assert records == [{"id": "1"}]
    assert "Ignored 2 non-object entries" in caplog.text


def test_missing_file_raises(tmp_path):
    with pytest.raises(CatalogLoadError, match="Cannot read catalog"):
        load_products(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogLoadError, match="not valid JSON"):
        load_products(path)


@pytest.mark.parametrize("payload", [{"items": []}, "text", 42, {"products": {"id": "1"}}])
def test_wrong_shape_raises(tmp_path, payload):
    path = _write(tmp_path / "catalog.json", payload)

    with pytest.raises(CatalogLoadError, match="must be a JSON array"):
        load_products(path)
