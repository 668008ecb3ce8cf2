"""Tests for bstrings.extractor.match_filter and bstrings.extractor.patterns.

Covers literal and regex filtering, named-pattern resolution, invalid
expressions, and the built-in pattern catalogue.
"""

from __future__ import annotations

import pytest

from bstrings.common.errors import InvalidPatternError
from bstrings.extractor.match_filter import FilterSpec, MatchFilter
from bstrings.extractor.patterns import DEFAULT_CATALOG, PATTERNS, NamedPattern, PatternCatalog


# ---------------------------------------------------------------------------
# Literal filter
# ---------------------------------------------------------------------------


class TestLiteralFilter:
    """Case-insensitive substring matching."""

    def test_literal_keeps_only_containing(self) -> None:
        flt = MatchFilter(FilterSpec(literal="abc"))
        result = flt.apply(["xabcx", "xyz"])
        assert result.hits == ["xabcx"]
        assert result.count == 1

    def test_literal_is_case_insensitive(self) -> None:
        flt = MatchFilter(FilterSpec(literal="abc"))
        assert flt.apply(["xABCx", "xyz", "aBc"]).hits == ["xABCx", "aBc"]

    def test_literal_is_not_a_regex(self) -> None:
        flt = MatchFilter(FilterSpec(literal="a.c"))
        assert flt.apply(["abc", "a.c"]).hits == ["a.c"]

    def test_order_preserved(self) -> None:
        flt = MatchFilter(FilterSpec(literal="o"))
        assert flt.apply(["two", "one", "zero"]).hits == ["two", "one", "zero"]


# ---------------------------------------------------------------------------
# Regex filter
# ---------------------------------------------------------------------------


class TestRegexFilter:
    """Regular-expression matching."""

    def test_search_is_unanchored(self) -> None:
        flt = MatchFilter(FilterSpec(pattern=r"\d{3}"))
        assert flt.apply(["abc123def", "abc"]).hits == ["abc123def"]

    def test_ignore_case(self) -> None:
        flt = MatchFilter(FilterSpec(pattern="hello"))
        assert flt.matches("Say HELLO there")

    def test_pattern_whitespace_ignored(self) -> None:
        flt = MatchFilter(FilterSpec(pattern="hel lo"))
        assert flt.matches("hello")

    def test_self_anchored_pattern(self) -> None:
        flt = MatchFilter(FilterSpec(pattern="^start"))
        assert flt.matches("start here")
        assert not flt.matches("do not start")

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(InvalidPatternError):
            MatchFilter(FilterSpec(pattern="(unclosed"))

    def test_invalid_pattern_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            MatchFilter(FilterSpec(pattern="[z-a]"))


# ---------------------------------------------------------------------------
# Combined and pass-through behaviour
# ---------------------------------------------------------------------------


class TestFilterPrecedence:

    def test_no_filter_passes_everything(self) -> None:
        flt = MatchFilter()
        assert flt.apply(["a", "b", "c"]).hits == ["a", "b", "c"]

    def test_empty_values_never_reported(self) -> None:
        assert MatchFilter().apply(["", "x"]).hits == ["x"]

    def test_literal_checked_before_regex(self) -> None:
        flt = MatchFilter(FilterSpec(literal="needle", pattern=r"^\d+$"))
        assert flt.matches("haystack NEEDLE")
        assert flt.matches("12345")
        assert not flt.matches("nothing")

    def test_highlight_prefers_literal(self) -> None:
        flt = MatchFilter(FilterSpec(literal="a+b", pattern="guid"))
        term = flt.highlight_term()
        assert term is not None
        assert term.search("xA+By") is not None

    def test_highlight_uses_regex(self) -> None:
        flt = MatchFilter(FilterSpec(pattern=r"\d+"))
        assert flt.highlight_term() is flt.regex

    def test_no_highlight_without_filter(self) -> None:
        assert MatchFilter().highlight_term() is None


# ---------------------------------------------------------------------------
# Named patterns
# ---------------------------------------------------------------------------


class TestNamedPatterns:
    """Built-in pattern resolution and behaviour."""

    def test_guid_resolves(self) -> None:
        flt = MatchFilter(FilterSpec(pattern="guid"))
        assert flt.regex_source == DEFAULT_CATALOG.get("guid").regex
        assert flt.matches("3F2504E0-4F89-11D3-9A0C-0305E82C3301")
        assert not flt.matches("not-a-guid")

    def test_guid_lowercase(self) -> None:
        flt = MatchFilter(FilterSpec(pattern="guid"))
        assert flt.matches("{3f2504e0-4f89-11d3-9a0c-0305e82c3301}")

    def test_unknown_name_used_as_regex(self) -> None:
        assert DEFAULT_CATALOG.resolve("notapattern") == "notapattern"

    def test_names_are_case_sensitive(self) -> None:
        assert "usPhone" in DEFAULT_CATALOG
        assert "usphone" not in DEFAULT_CATALOG

    @pytest.mark.parametrize(
        ("name", "hit", "miss"),
        [
            ("ipv4", "connect to 192.168.1.254 now", "999.1.1.1"),
            ("ipv6", "2001:0db8:85a3:0000:0000:8a2e:0370:7334", "2001:db8::1"),
            ("email", "analyst@example.com", "mail me at analyst@example.com"),
            ("zip", "90210-1234", "9021"),
            ("mac", "00:1A:2B:3C:4D:5E", "00:1A:2B"),
            ("ssn", "123-45-6789", "000-45-6789"),
            ("cc", "4111111111111111", "41111111"),
            ("usPhone", "(212) 555-0187", "123-456"),
            ("unc", r"\\fileserver\share$\docs", r"C:\share\docs"),
            ("urlUser", "ftp://admin@host.example", "ftp://host.example"),
            ("url3986", "https://example.com:8443/path/to?q=1#frag", "not a url"),
            ("xml", "<Name attr='1'>value</Name>", "<Name>value</Other>"),
        ],
    )
    def test_catalogue_pattern(self, name: str, hit: str, miss: str) -> None:
        flt = MatchFilter(FilterSpec(pattern=name))
        assert flt.matches(hit), f"{name} should match {hit!r}"
        assert not flt.matches(miss), f"{name} should not match {miss!r}"


class TestPatternCatalogue:

    def test_all_expected_names(self) -> None:
        assert set(DEFAULT_CATALOG.names()) == {
            "guid", "usPhone", "unc", "mac", "ssn", "cc", "ipv4",
            "ipv6", "email", "zip", "urlUser", "url3986", "xml",
        }

    def test_every_pattern_compiles(self) -> None:
        for named in PATTERNS:
            MatchFilter(FilterSpec(pattern=named.name))

    def test_every_pattern_described(self) -> None:
        assert all(p.description for p in DEFAULT_CATALOG)

    def test_named_pattern_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            PATTERNS[0].regex = "x"  # type: ignore[misc]

    def test_custom_catalog(self) -> None:
        catalog = PatternCatalog((NamedPattern("hex", "Hex runs", r"\A[0-9a-f]+\Z"),))
        flt = MatchFilter(FilterSpec(pattern="hex"), catalog=catalog)
        assert flt.matches("DEADBEEF")
        assert len(catalog) == 1
