"""Tests for bstrings.extractor.scanner -- printable run extraction.

Covers ASCII and UTF-16LE run detection, minimum/maximum length handling,
whitespace trimming, and tolerance of malformed input.
"""

from __future__ import annotations

import pytest

from bstrings.extractor.scanner import EncodingMode, extract, iter_runs


def _wide(s: str) -> bytes:
    return s.encode("utf-16-le")


# ---------------------------------------------------------------------------
# ASCII mode
# ---------------------------------------------------------------------------


class TestAsciiRuns:
    """Single-byte printable runs."""

    def test_concrete_scenario(self) -> None:
        """Runs shorter than the minimum are dropped, separators split runs."""
        data = b"AB\x00xyz1\x01hello world"
        assert extract(data, EncodingMode.ASCII, 3) == ["xyz1", "hello world"]

    def test_run_embedded_in_padding(self) -> None:
        data = b"\x00\xff" * 50 + b"Recovered" + b"\x90" * 50
        assert extract(data, EncodingMode.ASCII, 3) == ["Recovered"]

    def test_run_below_minimum_is_absent(self) -> None:
        data = b"\x00" * 10 + b"abcd" + b"\x00" * 10
        assert extract(data, EncodingMode.ASCII, 5) == []

    def test_run_exactly_minimum(self) -> None:
        data = b"\x00abcde\x00"
        assert extract(data, EncodingMode.ASCII, 5) == ["abcde"]

    def test_range_boundaries(self) -> None:
        """0x20 and 0x7E are printable, 0x1F and 0x7F are not."""
        data = b"\x1f ~~~\x7f"
        # The leading space is part of the run but is stripped.
        assert extract(data, EncodingMode.ASCII, 3) == ["~~~"]

    def test_high_bytes_separate_runs(self) -> None:
        """UTF-8 multi-byte sequences never extend an ASCII run."""
        data = "abc\u00e9def".encode("utf-8")
        assert extract(data, EncodingMode.ASCII, 3) == ["abc", "def"]

    def test_tab_and_newline_are_separators(self) -> None:
        data = b"one\ttwo\nthree"
        assert extract(data, EncodingMode.ASCII, 3) == ["one", "two", "three"]

    def test_internal_whitespace_preserved(self) -> None:
        data = b"\x00  padded  value  \x00"
        assert extract(data, EncodingMode.ASCII, 3) == ["padded  value"]

    def test_whitespace_only_run_dropped(self) -> None:
        data = b"\x00     \x00"
        assert extract(data, EncodingMode.ASCII, 3) == []

    def test_empty_buffer(self) -> None:
        assert extract(b"", EncodingMode.ASCII, 3) == []

    def test_accepts_memoryview(self) -> None:
        data = memoryview(b"\x00memoryview\x00")
        assert extract(data, EncodingMode.ASCII, 3) == ["memoryview"]


# ---------------------------------------------------------------------------
# Maximum length
# ---------------------------------------------------------------------------


class TestMaximumLength:
    """Bounded maximum lengths truncate instead of splitting."""

    def test_long_run_truncated(self) -> None:
        data = b"\x00" + b"A" * 25 + b"\x00"
        assert extract(data, EncodingMode.ASCII, 3, 10) == ["A" * 10]

    def test_long_run_not_split_into_submatches(self) -> None:
        data = b"\x00abcdefghijklmnopqrstuvwxyz\x00"
        runs = extract(data, EncodingMode.ASCII, 3, 5)
        assert runs == ["abcde"]

    def test_run_within_bounds_untouched(self) -> None:
        data = b"\x00within\x00"
        assert extract(data, EncodingMode.ASCII, 3, 10) == ["within"]

    def test_unbounded_keeps_everything(self) -> None:
        data = b"Z" * 5000
        assert extract(data, EncodingMode.ASCII, 3) == ["Z" * 5000]

    def test_unicode_truncated(self) -> None:
        data = _wide("0123456789ABCDEF")
        assert extract(data, EncodingMode.UNICODE, 3, 8) == ["01234567"]


# ---------------------------------------------------------------------------
# Unicode mode
# ---------------------------------------------------------------------------


class TestUnicodeRuns:
    """UTF-16LE printable runs."""

    def test_wide_string_found(self) -> None:
        data = b"\xff\xff" + _wide("C:\\Windows\\System32") + b"\x00\x00"
        assert extract(data, EncodingMode.UNICODE, 3) == ["C:\\Windows\\System32"]

    def test_ascii_data_not_reported_as_wide(self) -> None:
        """Plain ASCII pairs decode to CJK code points, not printable runs."""
        data = b"plain ascii text"
        assert extract(data, EncodingMode.UNICODE, 3) == []

    def test_non_ascii_wide_chars_separate_runs(self) -> None:
        data = _wide("abc\u4e2ddef")
        assert extract(data, EncodingMode.UNICODE, 3) == ["abc", "def"]

    def test_unpaired_surrogate_ends_run(self) -> None:
        data = _wide("left") + b"\x00\xd8" + _wide("right")
        assert extract(data, EncodingMode.UNICODE, 3) == ["left", "right"]

    def test_odd_trailing_byte_tolerated(self) -> None:
        data = _wide("tail") + b"\x41"
        assert extract(data, EncodingMode.UNICODE, 3) == ["tail"]

    def test_minimum_applies_in_characters(self) -> None:
        data = b"\x00\x00" + _wide("ab") + b"\x00\x00" + _wide("abc")
        assert extract(data, EncodingMode.UNICODE, 3) == ["abc"]


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


class TestArguments:

    def test_zero_minimum_rejected(self) -> None:
        with pytest.raises(ValueError):
            list(iter_runs(b"abc", EncodingMode.ASCII, 0))

    def test_maximum_below_minimum_rejected(self) -> None:
        with pytest.raises(ValueError):
            list(iter_runs(b"abc", EncodingMode.ASCII, 5, 3))

    def test_iter_runs_is_lazy(self) -> None:
        runs = iter_runs(b"\x00first\x00second\x00", EncodingMode.ASCII, 3)
        assert next(runs) == "first"
        assert next(runs) == "second"
