"""CLI entry point for the binary string extractor.

Extracts ASCII and UTF-16LE strings from any file, optionally keeping
only those that contain a literal or match a regular expression (raw or
one of the built-in named patterns).

Usage examples::

    # Every string of at least 3 characters
    bstrings -f /evidence/UsrClass.dat

    # Only strings containing "mui", shortest first
    bstrings -f /evidence/UsrClass.dat --ls mui --sl

    # GUIDs, sorted, also saved to a file
    bstrings -f /evidence/memory.dmp --lr guid --sa -o /cases/42/guids.txt

    # Credit card numbers between 15 and 22 characters, ASCII only
    bstrings -f /evidence/unalloc.bin --lr cc -m 15 -x 22 -u false

    # List the built-in patterns
    bstrings -p
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import TextIO

from bstrings import __version__
from bstrings.common.errors import (
    InvalidPatternError,
    NotFoundError,
    OutputPathError,
    ScanReadError,
)
from bstrings.common.report import (
    format_bytes,
    format_duration,
    plural,
    print_banner,
    print_finding,
    print_hit,
    print_note,
    print_summary,
    print_table,
)
from bstrings.common.safe_io import DEFAULT_CHUNK_SIZE, prepare_output_file, validate_input_path

from .aggregator import SortMode
from .engine import ScanConfig, StringExtractor
from .match_filter import FilterSpec, MatchFilter
from .patterns import DEFAULT_CATALOG

logger = logging.getLogger(__name__)

TOOL_NAME = "bstrings"


# ---------------------------------------------------------------------------
# Option parsing helpers
# ---------------------------------------------------------------------------

def _parse_size(s: str) -> int:
    """Parse a human-readable size string (e.g. '10M', '1G', '512K') to bytes."""
    s = s.strip().upper()
    multipliers = {"K": 1024, "M": 1024 ** 2, "G": 1024 ** 3}
    try:
        if s and s[-1] in multipliers:
            value = int(float(s[:-1]) * multipliers[s[-1]])
        else:
            value = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {s!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive: {s!r}")
    return value


_TRUE_WORDS = frozenset({"true", "t", "yes", "y", "1", "on"})
_FALSE_WORDS = frozenset({"false", "f", "no", "n", "0", "off"})


def _parse_bool(s: str) -> bool:
    """Parse 'true'/'false' style switch values (``-a false``)."""
    word = s.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {s!r}")


def _sort_mode(args: argparse.Namespace) -> SortMode:
    if args.sort_alpha:
        return SortMode.ALPHABETICAL
    if args.sort_length:
        return SortMode.LENGTH
    return SortMode.NONE


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _handle_patterns() -> int:
    """Print the built-in pattern table."""
    print_table(
        [{"Name": p.name, "Description": p.description} for p in DEFAULT_CATALOG],
        ["Name", "Description"],
    )
    print_note("To use a built in pattern, supply the Name to the --lr switch")
    return 0


def _warn_no_sink(output: str, exc: OSError) -> None:
    logger.warning("Results will not be saved to a file: %s", exc)
    print_finding(
        f"Invalid path: '{output}'. Results will not be saved to a file.",
        {"Error": str(exc)},
        severity="warning",
    )


def _check_output(args: argparse.Namespace, input_path: Path) -> Path | None:
    """Validate the results path before scanning; ``None`` disables the file sink."""
    if not args.output:
        return None
    try:
        return prepare_output_file(args.output, input_path)
    except OutputPathError as exc:
        _warn_no_sink(args.output, exc)
        return None


def _open_sink(
    args: argparse.Namespace, out_path: Path | None, stack: ExitStack
) -> TextIO | None:
    """Open the results file once the scan has finished."""
    if out_path is None:
        return None
    try:
        sink = stack.enter_context(open(out_path, "w", encoding="utf-8", newline="\n"))
    except OSError as exc:
        _warn_no_sink(args.output, exc)
        return None
    if not args.quiet:
        print_finding(f"Saving hits to '{out_path}'", {}, severity="info")
    return sink


def _discard_stdout() -> None:
    """Send further stdout writes to the null device after the reader went away."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        sys.stdout = open(os.devnull, "w", encoding="utf-8")
    finally:
        os.close(devnull)


def _handle_extract(args: argparse.Namespace) -> int:
    """Scan the input file and report matching strings."""
    try:
        input_path = validate_input_path(args.file)
    except NotFoundError:
        logger.warning("'%s' not found. Exiting", args.file)
        print_finding("File not found", {"File": args.file}, severity="critical")
        return 1
    except ScanReadError as exc:
        print_finding("Cannot read input file", {"Error": str(exc)}, severity="critical")
        return 1

    try:
        match_filter = MatchFilter(FilterSpec(literal=args.ls, pattern=args.lr))
    except InvalidPatternError as exc:
        print_finding("Invalid regular expression", {"Error": str(exc)}, severity="critical")
        return 1

    if match_filter.regex_source and not args.quiet:
        print_finding(
            "Searching via RegEx pattern",
            {"Pattern": match_filter.regex_source},
            severity="info",
        )

    config = ScanConfig.from_options(
        min_length=args.min_length,
        max_length=args.max_length,
        scan_ascii=args.ascii,
        scan_unicode=args.unicode,
        chunk_size=args.chunk_size,
    )
    if not config.modes:
        logger.warning("Both ASCII and Unicode scanning are disabled; nothing to search")

    out_path = _check_output(args, input_path)

    extractor = StringExtractor(config)
    try:
        result = extractor.extract(
            input_path,
            sort_mode=_sort_mode(args),
            show_progress=not args.quiet,
        )
    except FileNotFoundError as exc:
        print_finding("File not found", {"Error": str(exc)}, severity="critical")
        return 1
    except ScanReadError as exc:
        print_finding("Read error; scan aborted", {"Error": str(exc)}, severity="critical")
        return 1

    with ExitStack() as stack:
        sink = _open_sink(args, out_path, stack)
        filtered = match_filter.apply(result.strings)
        term = match_filter.highlight_term()
        for hit in filtered.hits:
            print_hit(hit, term)
            if sink is not None:
                sink.write(hit + "\n")

    if not args.quiet:
        print_note()
        print_summary(
            "Extraction Results",
            {
                "Source": str(result.source_path),
                "File size": format_bytes(result.file_size),
                "Windows scanned": str(result.windows_scanned),
                "Unique strings": f"{len(result.strings):,}",
                "Reported": f"{filtered.count:,}",
                "Duration": format_duration(result.duration_seconds),
            },
        )
        print_finding(
            f"Found {plural(filtered.count, 'string')} in "
            f"{format_duration(result.duration_seconds)}",
            {},
        )

    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description=(
            "Extract ASCII and Unicode (UTF-16LE) strings from any file, "
            "optionally filtered by a literal or a regular expression."
        ),
        epilog=(
            "Examples: bstrings -f \"UsrClass 1.dat\" --ls URL | "
            "bstrings -f someFile.txt --lr guid | "
            "bstrings -f someOtherFile.txt --lr cc --sa -m 15 -x 22"
        ),
    )
    parser.add_argument(
        "-f", "--file",
        help="File to search. This is required.",
    )
    parser.add_argument(
        "-o", "--output",
        default="",
        help="File to save results to.",
    )
    parser.add_argument(
        "-a", "--ascii",
        type=_parse_bool,
        default=True,
        metavar="BOOL",
        help="Look for ASCII strings (default: true). Use -a false to disable.",
    )
    parser.add_argument(
        "-u", "--unicode",
        type=_parse_bool,
        default=True,
        metavar="BOOL",
        help="Look for Unicode strings (default: true). Use -u false to disable.",
    )
    parser.add_argument(
        "-m", "--min-length",
        type=int,
        default=3,
        metavar="N",
        help="Minimum string length (default: 3).",
    )
    parser.add_argument(
        "-x", "--max-length",
        type=int,
        default=-1,
        metavar="N",
        help="Maximum string length (default: unlimited).",
    )
    parser.add_argument(
        "--ls",
        default="",
        metavar="TEXT",
        help="String to look for. When set, only matching strings are returned.",
    )
    parser.add_argument(
        "--lr",
        default="",
        metavar="REGEX",
        help=(
            "Regex to look for, or the name of a built-in pattern (see -p). "
            "When set, only matching strings are returned."
        ),
    )
    sort_group = parser.add_mutually_exclusive_group()
    sort_group.add_argument(
        "--sa",
        dest="sort_alpha",
        action="store_true",
        help="Sort results alphabetically.",
    )
    sort_group.add_argument(
        "--sl",
        dest="sort_length",
        action="store_true",
        help="Sort results by length.",
    )
    parser.add_argument(
        "-p", "--patterns",
        action="store_true",
        help="Display list of built in regular expressions.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (do not show header or total number of hits).",
    )
    parser.add_argument(
        "--chunk-size",
        type=_parse_size,
        default=DEFAULT_CHUNK_SIZE,
        metavar="SIZE",
        help="Bytes read per window, e.g. 64M or 1G; odd sizes are rounded down (default: 512M).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{TOOL_NAME} {__version__}",
    )
    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the string extractor."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.patterns:
        sys.exit(_handle_patterns())

    if not args.file:
        parser.print_help()
        sys.exit(1)

    if not args.quiet:
        print_banner(TOOL_NAME, __version__)

    try:
        sys.exit(_handle_extract(args))
    except KeyboardInterrupt:
        print("\nScan interrupted by user.", file=sys.stderr)
        sys.exit(130)
    except BrokenPipeError:
        # Output was piped to a reader that exited early, e.g. ``head``.
        _discard_stdout()
        sys.exit(0)
    except Exception as exc:
        logger.exception("Unexpected error during scan")
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
