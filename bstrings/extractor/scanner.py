"""Printable-run scanner for single windows of raw bytes.

A *run* is a maximal sequence of characters in the printable ASCII
range ``0x20``-``0x7E``.  Two interpretations of the same bytes are
supported:

``ascii``
    Each byte is one character.  Because UTF-8 never places a byte
    below ``0x80`` inside a multi-byte sequence, scanning raw bytes gives
    the same runs as decoding the window as UTF-8 first; every
    non-printable, multi-byte or malformed byte simply separates runs.

``unicode``
    The window is decoded as UTF-16LE, one character per 16-bit code
    unit.  Unpaired surrogates and a dangling odd byte decode to U+FFFD
    and therefore end the current run.  Decoding never raises.

Runs shorter than the minimum length are discarded.  Runs longer than a
bounded maximum are cut to their first ``max_len`` characters; the rest
of such a run is not reported.  Every reported run is stripped of
leading and trailing whitespace.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from enum import Enum

logger = logging.getLogger(__name__)

_ASCII_RUN_CLASS: bytes = rb"[\x20-\x7e]"
_WIDE_RUN_CLASS: str = r"[\x20-\x7e]"


class EncodingMode(Enum):
    """How a window's bytes are interpreted as characters."""

    ASCII = "ascii"
    UNICODE = "unicode"


def _quantifier(min_len: int) -> str:
    return "{%d,}" % min_len


def _validate_lengths(min_len: int, max_len: int | None) -> None:
    if min_len < 1:
        raise ValueError(f"min_len must be >= 1, got {min_len}")
    if max_len is not None and max_len < min_len:
        raise ValueError(f"max_len ({max_len}) must be >= min_len ({min_len})")


def iter_runs(
    data: bytes | bytearray | memoryview,
    mode: EncodingMode,
    min_len: int,
    max_len: int | None = None,
) -> Iterator[str]:
    """Yield the printable runs of *data* in order of appearance.

    Parameters
    ----------
    data:
        Raw window bytes.
    mode:
        :attr:`EncodingMode.ASCII` or :attr:`EncodingMode.UNICODE`.
    min_len:
        Minimum run length in characters (>= 1).
    max_len:
        Maximum reported length, or ``None`` for unbounded.

    Yields
    ------
    str
        Each qualifying run, truncated to *max_len* and stripped.
    """
    _validate_lengths(min_len, max_len)
    data = bytes(data)

    if mode is EncodingMode.ASCII:
        pattern = re.compile(_ASCII_RUN_CLASS + _quantifier(min_len).encode("ascii"))
        for match in pattern.finditer(data):
            run = match.group().decode("ascii")
            if max_len is not None:
                run = run[:max_len]
            run = run.strip()
            if run:
                yield run
    elif mode is EncodingMode.UNICODE:
        text = data.decode("utf-16-le", errors="replace")
        pattern = re.compile(_WIDE_RUN_CLASS + _quantifier(min_len))
        for match in pattern.finditer(text):
            run = match.group()
            if max_len is not None:
                run = run[:max_len]
            run = run.strip()
            if run:
                yield run
    else:
        raise ValueError(f"Unsupported encoding mode: {mode!r}")


def extract(
    data: bytes | bytearray | memoryview,
    mode: EncodingMode,
    min_len: int,
    max_len: int | None = None,
) -> list[str]:
    """Return all printable runs of *data* as a list.

    See :func:`iter_runs` for the parameters.
    """
    runs = list(iter_runs(data, mode, min_len, max_len))
    logger.debug(
        "extract: mode=%s bytes=%d runs=%d",
        mode.value,
        len(data),
        len(runs),
    )
    return runs
