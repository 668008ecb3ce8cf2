"""Binary string extractor -- find printable runs in arbitrary files.

Scans files of any size in fixed windows for ASCII and UTF-16LE
printable strings, deduplicates and sorts them, and filters them by a
literal or a regular expression (raw or one of the named patterns).
"""

from .aggregator import ResultAggregator, SortMode
from .engine import ExtractionResult, ScanConfig, StringExtractor
from .match_filter import FilterResult, FilterSpec, MatchFilter
from .patterns import DEFAULT_CATALOG, PATTERNS, NamedPattern, PatternCatalog
from .scanner import EncodingMode, extract, iter_runs

__all__ = [
    "DEFAULT_CATALOG",
    "EncodingMode",
    "ExtractionResult",
    "FilterResult",
    "FilterSpec",
    "MatchFilter",
    "NamedPattern",
    "PATTERNS",
    "PatternCatalog",
    "ResultAggregator",
    "ScanConfig",
    "SortMode",
    "StringExtractor",
    "extract",
    "iter_runs",
]
