"""Deduplicating result set shared across all windows of one scan."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum

logger = logging.getLogger(__name__)


class SortMode(Enum):
    """Ordering applied when the result set is finalized."""

    NONE = "none"
    ALPHABETICAL = "alphabetical"
    LENGTH = "length"


class ResultAggregator:
    """Collect extracted strings into an insertion-ordered set.

    Identity is string content only; which encoding produced a value is
    not recorded.  Values are kept in first-seen order, so output for
    :attr:`SortMode.NONE` and tie order for :attr:`SortMode.LENGTH` are
    deterministic for a given file and configuration.
    """

    def __init__(self) -> None:
        # dict keys double as an ordered set.
        self._seen: dict[str, None] = {}

    def ingest(self, strings: Iterable[str]) -> int:
        """Add *strings* to the set and return how many were new."""
        before = len(self._seen)
        for value in strings:
            self._seen.setdefault(value, None)
        added = len(self._seen) - before
        logger.debug("ingest: added=%d total=%d", added, len(self._seen))
        return added

    def finalize(self, sort_mode: SortMode = SortMode.NONE) -> list[str]:
        """Return the unique values ordered according to *sort_mode*.

        ``ALPHABETICAL`` compares by code point.  ``LENGTH`` is ascending
        and stable, ties keep first-seen order.
        """
        values = list(self._seen)
        if sort_mode is SortMode.ALPHABETICAL:
            values.sort()
        elif sort_mode is SortMode.LENGTH:
            values.sort(key=len)
        return values

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, value: object) -> bool:
        return value in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._seen)
