"""Unit tests for building IndexedEntry values from products."""

import logging

import pytest

from catalog_search.domain.model import Product
from catalog_search.search.indexer import (
    TAG_FEATURED,
    TAG_LOW_STOCK,
    TAG_OUT_OF_STOCK,
    EntryBuilder,
    extract_tags,
    extract_tokens,
)


@pytest.fixture
def builder() -> EntryBuilder:
    return EntryBuilder()


def test_build_normalizes_every_field(builder, make_product):
    product = Product.coerce(
        make_product(
            "Vestido Fucsia",
            description="Vestido de algodón",
            categoryId="CAT-Vestidos",
            colors='["Rosado", "Azul Marino", "Mostaza"]',
            sizes='[{"size": "Mediano", "quantity": 2}, {"size": "28", "quantity": 1}]',
        )
    )

    entry = builder.build(product)

    assert entry.product is product
    assert entry.normalized_name == "vestido fucsia"
    assert entry.normalized_description == "vestido de algodon"
    assert entry.normalized_colors == ("rosa", "azul", "mostaza")
    assert entry.normalized_sizes == ("m", "32")
    assert entry.normalized_category == "cat-vestidos"
    assert entry.popularity == 0
    assert entry.product_id == product.id


def test_malformed_colors_do_not_block_other_fields(builder, make_product, caplog):
    product = Product.coerce(make_product("Camisa Lino", colors="{broken", sizes=["S"]))

    with caplog.at_level(logging.WARNING, logger="catalog_search.search.indexer"):
        entry = builder.build(product)

    assert entry.normalized_colors == ()
    assert entry.normalized_sizes == ("s",)
    assert entry.normalized_name == "camisa lino"
    assert "malformed colors" in caplog.text


def test_decode_error_callback_receives_field_name(make_product):
    seen: list[str] = []
    builder = EntryBuilder(on_decode_error=seen.append)

    builder.build(Product.coerce(make_product("Gorra", colors="nope", sizes="[null]")))

    assert seen == ["colors", "sizes"]


def test_absent_fields_are_not_reported(make_product):
    seen: list[str] = []
    builder = EntryBuilder(on_decode_error=seen.append)

    entry = builder.build(Product.coerce(make_product("Gorra")))

    assert seen == []
    assert entry.normalized_colors == ()
    assert entry.normalized_category == ""


def test_popularity_follows_featured_flag(builder, make_product):
    entry = builder.build(Product.coerce(make_product("Bolso", featured=True)))
    assert entry.popularity == 1


@pytest.mark.parametrize(
    ("stock", "featured", "expected"),
    [
        (0, False, (TAG_OUT_OF_STOCK,)),
        (0, True, (TAG_FEATURED, TAG_OUT_OF_STOCK)),
        (1, False, (TAG_LOW_STOCK,)),
        (5, False, (TAG_LOW_STOCK,)),
        (6, False, ()),
        (20, True, (TAG_FEATURED,)),
    ],
)
def test_extract_tags(make_product, stock, featured, expected):
    product = Product.coerce(make_product("Falda", stock=stock, featured=featured))
    assert extract_tags(product) == expected


def test_extract_tags_honors_threshold(make_product):
    product = Product.coerce(make_product("Falda", stock=8))
    assert extract_tags(product, low_stock_threshold=10) == (TAG_LOW_STOCK,)


def test_extract_tokens_skips_short_tokens_and_duplicates():
    tokens = extract_tokens("vestido de gala", "gala de noche con tul")

    assert tokens == ("vestido", "gala", "noche", "con", "tul")


def test_extract_tokens_min_length():
    assert extract_tokens("con tul lino", min_length=4) == ("lino",)
