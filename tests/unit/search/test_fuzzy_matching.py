"""Unit tests for edit distance and similarity."""

import pytest

from catalog_search.search.fuzzy import is_similar, levenshtein_distance


class TestLevenshteinDistance:
    def test_identical_strings(self):
        assert levenshtein_distance("vestido", "vestido") == 0

    def test_empty_strings(self):
        assert levenshtein_distance("", "") == 0
        assert levenshtein_distance("abc", "") == 3
        assert levenshtein_distance("", "abc") == 3

    def test_single_edits(self):
        assert levenshtein_distance("vestido", "vestdo") == 1  # deletion
        assert levenshtein_distance("falda", "faldas") == 1  # insertion
        assert levenshtein_distance("gorra", "gorro") == 1  # substitution

    def test_classic_examples(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("flaw", "lawn") == 2
        assert levenshtein_distance("intention", "execution") == 5

    def test_symmetric(self):
        assert levenshtein_distance("camisa", "camiseta") == levenshtein_distance("camiseta", "camisa")

    def test_case_sensitive(self):
        assert levenshtein_distance("Rojo", "rojo") == 1

    def test_bounded_returns_max_plus_one_when_exceeded(self):
        assert levenshtein_distance("abc", "xyz", max_distance=1) == 2
        assert levenshtein_distance("a", "abcdef", max_distance=2) == 3

    def test_bounded_is_exact_within_bound(self):
        assert levenshtein_distance("kitten", "sitting", max_distance=3) == 3
        assert levenshtein_distance("vestido", "vestdo", max_distance=2) == 1


class TestIsSimilar:
    def test_equal_strings_are_similar_even_with_zero_threshold(self):
        assert is_similar("negro", "negro", threshold=0)

    @pytest.mark.parametrize(("a", "b"), [("vestdo", "vestido"), ("rosa", "rosas"), ("gris", "grs")])
    def test_within_default_threshold(self, a, b):
        assert is_similar(a, b)

    def test_beyond_default_threshold(self):
        assert not is_similar("vestido", "vestido negro")

    def test_threshold_is_respected(self):
        assert is_similar("azul", "azules", threshold=2)
        assert not is_similar("azul", "azules", threshold=1)
