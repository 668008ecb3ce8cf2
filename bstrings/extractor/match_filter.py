"""Literal / regular-expression filtering of the aggregated strings.

The literal substring is tested first (case-insensitively).  A value
that does not contain it is then tested against the regular expression,
when one is configured.  With neither configured every non-empty value
passes.  Regular expressions are compiled case-insensitive and
whitespace-insensitive (``re.VERBOSE``) and are searched, not anchored,
unless the expression anchors itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from bstrings.common.errors import InvalidPatternError
from bstrings.extractor.patterns import DEFAULT_CATALOG, PatternCatalog

logger = logging.getLogger(__name__)

REGEX_FLAGS: int = re.IGNORECASE | re.VERBOSE


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Which strings to report.

    Attributes
    ----------
    literal:
        Substring to look for; empty disables the literal test.
    pattern:
        Regular expression, or the name of a catalogued pattern; empty
        disables the regex test.
    """

    literal: str = ""
    pattern: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.literal or self.pattern)


@dataclass(slots=True)
class FilterResult:
    """Values that passed the filter, in input order."""

    hits: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.hits)


class MatchFilter:
    """Apply a :class:`FilterSpec` to a sequence of extracted strings.

    Usage::

        flt = MatchFilter(FilterSpec(pattern="guid"))
        result = flt.apply(strings)
        print(result.count)
    """

    def __init__(
        self,
        spec: FilterSpec | None = None,
        catalog: PatternCatalog = DEFAULT_CATALOG,
    ) -> None:
        self.spec = spec or FilterSpec()
        self._literal_folded = self.spec.literal.casefold()

        self.regex_source: str = catalog.resolve(self.spec.pattern) if self.spec.pattern else ""
        self._regex: re.Pattern[str] | None = None
        if self.regex_source:
            try:
                self._regex = re.compile(self.regex_source, REGEX_FLAGS)
            except re.error as exc:
                raise InvalidPatternError(self.regex_source, str(exc)) from exc
            logger.info("Compiled regex filter: %s", self.regex_source)

    @property
    def regex(self) -> re.Pattern[str] | None:
        """The compiled regular expression, if one is configured."""
        return self._regex

    def matches(self, value: str) -> bool:
        """Return ``True`` if *value* should be reported."""
        if not value:
            return False
        if not self.spec.is_active:
            return True
        if self._literal_folded and self._literal_folded in value.casefold():
            return True
        if self._regex is not None and self._regex.search(value) is not None:
            return True
        return False

    def apply(self, values: Iterable[str]) -> FilterResult:
        """Return the values that match, preserving their order."""
        result = FilterResult(hits=[v for v in values if self.matches(v)])
        logger.debug("apply: hits=%d", result.count)
        return result

    def highlight_term(self) -> re.Pattern[str] | None:
        """Expression marking the matched portion of each hit for display.

        The literal takes precedence over the regex, mirroring the order
        in which they are tested.
        """
        if self.spec.literal:
            return re.compile(re.escape(self.spec.literal), re.IGNORECASE)
        return self._regex
