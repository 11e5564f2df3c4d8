"""Unit tests for the catalog-search command line."""

import json

import pytest

from catalog_search.cli import build_argument_parser, main
from catalog_search.config import Settings


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.json"
    products = [
        {"id": "v1", "name": "Vestido Negro", "price": "49.90", "stock": 3, "colors": '["Negro"]'},
        {"id": "v2", "name": "Vestido Rojo Largo", "price": "59.90", "stock": 8, "categoryId": "fiesta"},
        {"id": "g1", "name": "Gorra Vestida", "price": "9.90", "stock": 0},
    ]
    path.write_text(json.dumps({"products": products}), encoding="utf-8")
    return path


def _lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


@pytest.fixture
def cli_settings():
    return Settings(catalog_name="cli", log_json=False)


def test_search_prints_ranked_products(catalog_file, cli_settings, capsys):
    exit_code = main(["--catalog", str(catalog_file), "search", "vestido negro"], cli_settings)

    results = _lines(capsys)
    assert exit_code == 0
    assert [row["id"] for row in results] == ["v1", "v2"]
    assert results[0]["price"] == "49.90"
    assert "_score" not in results[0]


def test_search_with_scores_and_filters(catalog_file, cli_settings, capsys):
    argv = ["--catalog", str(catalog_file), "search", "vestido", "--category-id", "fiesta", "--scores", "--limit", "1"]

    assert main(argv, cli_settings) == 0

    (row,) = _lines(capsys)
    assert row["id"] == "v2"
    assert row["categoryId"] == "fiesta"
    assert "category" in row["_factors"]
    assert row["_score"] > 0


def test_autocomplete_clamps_limit(catalog_file, capsys):
    settings = Settings(log_json=False, autocomplete_default_limit=1, autocomplete_max_limit=2)

    assert main(["--catalog", str(catalog_file), "autocomplete", "ve", "--limit", "50"], settings) == 0
    assert _lines(capsys) == [{"suggestions": ["vestido", "vestida"]}]

    assert main(["--catalog", str(catalog_file), "autocomplete", "ve"], settings) == 0
    assert _lines(capsys) == [{"suggestions": ["vestido"]}]


def test_stats(catalog_file, cli_settings, capsys):
    assert main(["--catalog", str(catalog_file), "stats"], cli_settings) == 0

    (stats,) = _lines(capsys)
    assert stats["indexed_products"] == 3
    assert stats["total_tokens"] == 6


def test_unreadable_catalog_exits_with_error(tmp_path, cli_settings, capsys):
    assert main(["--catalog", str(tmp_path / "missing.json"), "stats"], cli_settings) == 1
    assert capsys.readouterr().out == ""


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_argument_parser().parse_args(["--catalog", "catalog.json"])
