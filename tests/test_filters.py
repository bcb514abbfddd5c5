"""Tests for frontdoor.utils.filters — filter-expression builder."""

from __future__ import annotations

import pytest

from frontdoor.utils import filters


class TestQuote:
    def test_string(self):
        assert filters.quote("1dun.co") == '"1dun.co"'

    def test_quotes_and_backslashes_escaped(self):
        assert filters.quote('a"b\\c') == '"a\\"b\\\\c"'

    def test_non_ascii_kept(self):
        assert filters.quote("例子.中国") == '"例子.中国"'

    @pytest.mark.parametrize(
        ("value", "expected"), [(True, "true"), (None, "null"), (3, "3"), (1.5, "1.5")]
    )
    def test_json_scalars(self, value, expected):
        assert filters.quote(value) == expected


class TestField:
    @pytest.mark.parametrize("name", ["hostname", "site_id", "expand.site", "_x"])
    def test_valid(self, name):
        assert filters.field(name) == name

    @pytest.mark.parametrize("name", ["", "1abc", "a b", 'x"', "a||b", "a."])
    def test_invalid(self, name):
        with pytest.raises(ValueError):
            filters.field(name)


class TestCombinators:
    def test_eq_and_ne(self):
        assert filters.eq("site", "s1") == 'site = "s1"'
        assert filters.ne("site", "s1") == 'site != "s1"'

    def test_all_of_skips_empty(self):
        assert filters.all_of('a = "1"', "", 'b = "2"') == 'a = "1" && b = "2"'

    def test_any_of(self):
        assert filters.any_of('a = "1"', 'b = "2"') == '(a = "1" || b = "2")'
        assert filters.any_of('a = "1"') == 'a = "1"'
        assert filters.any_of() == ""

    def test_one_of(self):
        assert filters.one_of("status", ["active", "verified"]) == (
            '(status = "active" || status = "verified")'
        )
