"""
Built-in regular expressions addressable by a short name.

A value passed to the regex filter is first looked up here; when it
names a catalogued pattern (``guid``, ``ipv4``, ...) the stored
expression is used instead of the literal value.  Names are matched
exactly (they are case-sensitive, e.g. ``usPhone``).

All expressions are written for ``re.IGNORECASE | re.VERBOSE``, the
flags the match filter compiles with, so literal spaces only count
inside character classes.

Usage:
    from bstrings.extractor.patterns import DEFAULT_CATALOG

    regex = DEFAULT_CATALOG.resolve("guid")
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class NamedPattern:
    """A regular expression published under a mnemonic name."""

    name: str
    """Lookup key supplied to the regex filter (e.g. 'guid')."""

    description: str
    """One-line description shown by the pattern listing."""

    regex: str
    """The expression, in Python ``re`` verbose syntax."""


# ---------------------------------------------------------------------------
# Pattern catalogue
# ---------------------------------------------------------------------------

_URL_3986 = r"""^
    [a-z][a-z0-9+\-.]*://                           # Scheme
    ([a-z0-9\-._~%!$&'()*+,;=]+@)?                  # User
    (?P<host>[a-z0-9\-._~%]+                        # Named host
    |\[[a-f0-9:.]+\]                                # IPv6 host
    |\[v[a-f0-9][a-z0-9\-._~%!$&'()*+,;=:]+\])      # IPvFuture host
    (:[0-9]+)?                                      # Port
    (/[a-z0-9\-._~%!$&'()*+,;=:@]+)*/?              # Path
    (\?[a-z0-9\-._~%!$&'()*+,;=:@/?]*)?             # Query
    (\#[a-z0-9\-._~%!$&'()*+,;=:@/?]*)?             # Fragment
    $"""

PATTERNS: tuple[NamedPattern, ...] = (
    NamedPattern(
        name="guid",
        description="Finds GUIDs",
        regex=r"\b[A-F0-9]{8}(?:-[A-F0-9]{4}){3}-[A-F0-9]{12}\b",
    ),
    NamedPattern(
        name="usPhone",
        description="Finds US phone numbers",
        regex=r"\(?\b[2-9][0-9]{2}\)?[-. ]?[2-9][0-9]{2}[-. ]?[0-9]{4}\b",
    ),
    NamedPattern(
        name="unc",
        description="Finds UNC paths",
        regex=r"^\\\\(?P<server>[a-z0-9 %._-]+)\\(?P<share>[a-z0-9 $%._-]+)",
    ),
    NamedPattern(
        name="mac",
        description="Finds MAC addresses",
        regex=r"\b[0-9A-F]{2}([-:]?)(?:[0-9A-F]{2}\1){4}[0-9A-F]{2}\b",
    ),
    NamedPattern(
        name="ssn",
        description="Finds US Social Security Numbers",
        regex=r"\b(?!000)(?!666)[0-8][0-9]{2}[- ](?!00)[0-9]{2}[- ](?!0000)[0-9]{4}\b",
    ),
    NamedPattern(
        name="cc",
        description="Finds credit card numbers",
        regex=(
            r"^(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|6(?:011|5[0-9][0-9])[0-9]{12}"
            r"|3[47][0-9]{13}|3(?:0[0-5]|[68][0-9])[0-9]{11}|(?:2131|1800|35\d{3})\d{11})$"
        ),
    ),
    NamedPattern(
        name="ipv4",
        description="Finds IP version 4 addresses",
        regex=(
            r"\b(?:(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\.){3}"
            r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\b"
        ),
    ),
    NamedPattern(
        name="ipv6",
        description="Finds IP version 6 addresses",
        regex=r"(?<![:.\w])(?:[A-F0-9]{1,4}:){7}[A-F0-9]{1,4}(?![:.\w])",
    ),
    NamedPattern(
        name="email",
        description="Finds email addresses",
        regex=r"\A\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,6}\b\Z",
    ),
    NamedPattern(
        name="zip",
        description="Finds zip codes",
        regex=r"\A\b[0-9]{5}(?:-[0-9]{4})?\b\Z",
    ),
    NamedPattern(
        name="urlUser",
        description="Finds usernames in URLs",
        regex=r"^[a-z0-9+\-.]+://(?P<user>[a-z0-9\-._~%!$&'()*+,;=]+)@",
    ),
    NamedPattern(
        name="url3986",
        description="Finds URLs according to RFC 3986",
        regex=_URL_3986,
    ),
    NamedPattern(
        name="xml",
        description="Finds XML/HTML tags",
        regex=r"\A<([A-Z][A-Z0-9]*)\b[^>]*>(.*?)</\1>\Z",
    ),
)


class PatternCatalog:
    """Read-only name -> :class:`NamedPattern` lookup table."""

    def __init__(self, patterns: tuple[NamedPattern, ...] = PATTERNS) -> None:
        self._by_name: Mapping[str, NamedPattern] = MappingProxyType(
            {p.name: p for p in patterns}
        )

    def resolve(self, value: str) -> str:
        """Return the catalogued expression for *value*, or *value* itself."""
        named = self._by_name.get(value)
        return named.regex if named is not None else value

    def get(self, name: str) -> NamedPattern | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[NamedPattern]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


# Built once at import time and shared by every filter.
DEFAULT_CATALOG: PatternCatalog = PatternCatalog()
