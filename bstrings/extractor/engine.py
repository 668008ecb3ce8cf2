"""Chunked dual-encoding string extraction engine.

Drives a full scan of one input file:

    1.  Open the file read-only and split it into fixed-size windows
        (512 MiB by default) so memory use is bounded by one window.
    2.  Scan every window for printable runs, once per enabled encoding
        (UTF-16LE first, then ASCII).
    3.  Merge all runs into a single deduplicated result set.
    4.  Order the set by the requested sort mode.

Windows never overlap.  A run crossing a window edge is reported as the
two pieces on either side of it, and a piece shorter than the minimum
length is dropped.  Results are therefore identical to scanning each
window as a separate file and merging the sets.

An unreadable window aborts the scan; nothing gathered before the
failure is returned.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from bstrings.common.report import create_progress, format_bytes
from bstrings.common.safe_io import DEFAULT_CHUNK_SIZE, SafeReader, Window
from bstrings.extractor.aggregator import ResultAggregator, SortMode
from bstrings.extractor.scanner import EncodingMode, extract

logger = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH: int = 3


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Configuration for one extraction run.

    Attributes
    ----------
    min_length:
        Minimum run length in characters.  Default is 3.
    max_length:
        Maximum reported run length, or ``None`` for unbounded.  Longer
        runs are truncated.
    scan_ascii:
        Look for single-byte printable runs.
    scan_unicode:
        Look for UTF-16LE printable runs.
    chunk_size:
        Window size in bytes; must be even.  Default is 512 MiB.
    """

    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int | None = None
    scan_ascii: bool = True
    scan_unicode: bool = True
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.min_length < 1:
            raise ValueError(f"min_length must be >= 1, got {self.min_length}")
        if self.max_length is not None and self.max_length <= self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be greater than "
                f"min_length ({self.min_length})"
            )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {self.chunk_size}")
        # Windows must start on a UTF-16 code unit boundary.
        if self.chunk_size % 2:
            raise ValueError(f"chunk_size must be even, got {self.chunk_size}")

    @classmethod
    def from_options(
        cls,
        min_length: int | None = None,
        max_length: int | None = None,
        scan_ascii: bool = True,
        scan_unicode: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> ScanConfig:
        """Build a config from loosely validated user options.

        A *min_length* only replaces the default when it is positive.  A
        *max_length* only applies when it is greater than the effective
        minimum; otherwise the maximum is unbounded.  An odd *chunk_size*
        is rounded down to the nearest even number.
        """
        effective_min = min_length if min_length is not None and min_length > 0 else DEFAULT_MIN_LENGTH
        effective_max = max_length if max_length is not None and max_length > effective_min else None
        effective_chunk = chunk_size
        if chunk_size > 1 and chunk_size % 2:
            effective_chunk = chunk_size - 1
            logger.debug("Rounded chunk size %d down to %d", chunk_size, effective_chunk)
        return cls(
            min_length=effective_min,
            max_length=effective_max,
            scan_ascii=scan_ascii,
            scan_unicode=scan_unicode,
            chunk_size=effective_chunk,
        )

    @property
    def modes(self) -> list[EncodingMode]:
        """Encodings to scan, in scan order."""
        modes: list[EncodingMode] = []
        if self.scan_unicode:
            modes.append(EncodingMode.UNICODE)
        if self.scan_ascii:
            modes.append(EncodingMode.ASCII)
        return modes


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ExtractionResult:
    """Outcome of extracting strings from a single file."""

    source_path: Path
    """Resolved path of the scanned file."""

    file_size: int
    """Total file size in bytes."""

    scan_config: ScanConfig
    """The configuration used for this scan."""

    sort_mode: SortMode = SortMode.NONE
    """Order applied to :attr:`strings`."""

    strings: list[str] = field(default_factory=list)
    """Unique extracted strings, ordered by :attr:`sort_mode`."""

    windows_scanned: int = 0
    """Number of windows read."""

    bytes_scanned: int = 0
    """Total bytes read."""

    duration_seconds: float = 0.0
    """Wall-clock time for the scan."""


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class StringExtractor:
    """Extract unique printable strings from a file, window by window.

    Usage::

        extractor = StringExtractor(ScanConfig(min_length=5))
        result = extractor.extract(Path("/evidence/pagefile.sys"))
        for s in result.strings:
            print(s)
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()

    # -- public API ---------------------------------------------------------

    def extract(
        self,
        file_path: str | Path,
        sort_mode: SortMode = SortMode.NONE,
        show_progress: bool = False,
    ) -> ExtractionResult:
        """Scan *file_path* and return its unique printable strings.

        Parameters
        ----------
        file_path:
            File to scan.
        sort_mode:
            Order of :attr:`ExtractionResult.strings`.
        show_progress:
            Draw a progress bar on the console while scanning.

        Returns
        -------
        ExtractionResult
            The ordered unique strings plus scan statistics.

        Raises
        ------
        NotFoundError
            If *file_path* does not exist.
        ScanReadError
            If the file cannot be opened or a window cannot be read.
        """
        start_time = time.monotonic()
        aggregator = ResultAggregator()
        windows_scanned = 0
        bytes_scanned = 0

        with SafeReader(file_path) as reader:
            file_size = reader.get_size()
            total_windows = reader.count_windows(self.config.chunk_size)
            logger.info(
                "Searching %d window(s) (%s each) in %s",
                total_windows,
                format_bytes(self.config.chunk_size),
                reader.path,
            )

            windows = reader.iter_windows(self.config.chunk_size)
            if show_progress:
                progress = create_progress("Extracting strings")
                with progress:
                    task = progress.add_task("Scanning", total=total_windows)
                    for window in windows:
                        self._scan_window(window, aggregator)
                        windows_scanned += 1
                        bytes_scanned += window.length
                        self._log_window(window, total_windows, aggregator, start_time)
                        progress.update(task, advance=1)
            else:
                for window in windows:
                    self._scan_window(window, aggregator)
                    windows_scanned += 1
                    bytes_scanned += window.length
                    self._log_window(window, total_windows, aggregator, start_time)

            source_path = reader.path

        strings = aggregator.finalize(sort_mode)
        elapsed = time.monotonic() - start_time

        logger.info(
            "Extraction complete: %d unique string(s) from %s in %.3fs",
            len(strings),
            format_bytes(bytes_scanned),
            elapsed,
        )

        return ExtractionResult(
            source_path=source_path,
            file_size=file_size,
            scan_config=self.config,
            sort_mode=sort_mode,
            strings=strings,
            windows_scanned=windows_scanned,
            bytes_scanned=bytes_scanned,
            duration_seconds=elapsed,
        )

    # -- internals ----------------------------------------------------------

    def _scan_window(self, window: Window, aggregator: ResultAggregator) -> None:
        for mode in self.config.modes:
            runs = extract(
                window.data,
                mode,
                self.config.min_length,
                self.config.max_length,
            )
            aggregator.ingest(runs)

    @staticmethod
    def _log_window(
        window: Window,
        total_windows: int,
        aggregator: ResultAggregator,
        start_time: float,
    ) -> None:
        logger.info(
            "Window %d of %d finished. Total strings so far: %d Elapsed time: %.3f seconds",
            window.index + 1,
            total_windows,
            len(aggregator),
            time.monotonic() - start_time,
        )
