"""Exception types raised by the string extraction toolkit.

Each error also derives from the closest built-in exception so callers
that already handle :class:`FileNotFoundError`, :class:`OSError` or
:class:`ValueError` keep working unchanged.
"""

from __future__ import annotations


class BStringsError(Exception):
    """Base class for all toolkit errors."""


class NotFoundError(BStringsError, FileNotFoundError):
    """The input file does not exist."""


class ScanReadError(BStringsError, OSError):
    """The input file could not be opened, or a window read came up short."""


class InvalidPatternError(BStringsError, ValueError):
    """A regular-expression filter failed to compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid regular expression {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class OutputPathError(BStringsError, OSError):
    """The results file cannot be created at the requested location."""
