"""Terminal reporting utilities for the string extractor.

This module provides all console output: the banner, findings, the
built-in pattern table, progress bars, the final summary, and the hit
lines themselves with the active filter term highlighted.  Output goes
through a single ``rich`` console.
"""

from __future__ import annotations

import re
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table
from rich.text import Text

# A module-level console instance used by all printing helpers.
_console: Console = Console(highlight=False)

# Severity-to-colour mapping for :func:`print_finding`.
_SEVERITY_STYLES: dict[str, str] = {
    "info": "bold cyan",
    "warning": "bold yellow",
    "critical": "bold red",
}

# Style applied to the portions of a hit that match the filter term.
HIT_HIGHLIGHT_STYLE: str = "bold red on green"


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def print_banner(tool_name: str, version: str = "1.0.0") -> None:
    """Print a styled banner identifying the tool and its version.

    Parameters
    ----------
    tool_name:
        Display name of the tool.
    version:
        Version string shown alongside the tool name.
    """
    title_text = Text(tool_name, style="bold white")
    subtitle = Text(f"v{version}", style="dim")
    panel = Panel(
        title_text,
        subtitle=subtitle,
        border_style="bright_blue",
        expand=False,
        padding=(1, 4),
    )
    _console.print(panel)


def print_finding(
    title: str,
    details: dict[str, Any],
    severity: str = "info",
) -> None:
    """Print a formatted finding to the terminal.

    Parameters
    ----------
    title:
        Short description of the finding.
    details:
        Key/value pairs providing additional context.
    severity:
        One of ``"info"``, ``"warning"``, or ``"critical"``.  Controls the
        colour and prefix label of the output.
    """
    severity = severity.lower()
    label = severity.upper()

    style = _SEVERITY_STYLES.get(severity, "bold cyan")
    _console.print(Text(f"[{label}] {title}", style=style), soft_wrap=True)
    for key, value in details.items():
        _console.print(Text(f"  {key}: {value}"), soft_wrap=True)
    _console.print()


def print_note(message: str = "") -> None:
    """Print a plain line of text, or a blank line when *message* is empty."""
    _console.print(Text(message), soft_wrap=True)


def print_table(items: list[dict], columns: list[str]) -> None:
    """Print a table of items to the terminal.

    Parameters
    ----------
    items:
        Rows of data.  Each dict should contain keys matching *columns*.
    columns:
        Column header names, in display order.
    """
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col)
    for item in items:
        table.add_row(*(Text(str(item.get(col, ""))) for col in columns))
    _console.print(table)


def create_progress(description: str = "Scanning") -> Progress:
    """Create a configured :class:`rich.progress.Progress` bar.

    The bar shows a spinner, description, bar, window count, elapsed
    time, and estimated time remaining.

    Parameters
    ----------
    description:
        Label displayed next to the progress bar.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=_console,
        transient=True,
    )


def print_summary(title: str, stats: dict[str, Any]) -> None:
    """Print a summary box with key statistics.

    Parameters
    ----------
    title:
        Heading for the summary panel.
    stats:
        Key/value pairs rendered inside the box.
    """
    body = Text()
    for i, (key, value) in enumerate(stats.items()):
        if i:
            body.append("\n")
        body.append(f"{key}:", style="bold")
        body.append(f" {value}")
    panel = Panel(body, title=title, border_style="green", expand=False)
    _console.print(panel)


def highlight_hit(hit: str, term: re.Pattern[str] | None) -> Text:
    """Return *hit* as a :class:`Text` with every match of *term* styled.

    Parameters
    ----------
    hit:
        The extracted string.
    term:
        Compiled expression to highlight, or ``None`` for plain output.
    """
    text = Text(hit, no_wrap=True)
    if term is None:
        return text
    for match in term.finditer(hit):
        if match.end() > match.start():
            text.stylize(HIT_HIGHLIGHT_STYLE, match.start(), match.end())
    return text


def print_hit(hit: str, term: re.Pattern[str] | None = None) -> None:
    """Print one extracted string on its own line."""
    _console.print(highlight_hit(hit, term), soft_wrap=True)


# ---------------------------------------------------------------------------
# Formatting utilities
# ---------------------------------------------------------------------------

_BYTE_UNITS: list[tuple[int, str]] = [
    (1 << 40, "TiB"),
    (1 << 30, "GiB"),
    (1 << 20, "MiB"),
    (1 << 10, "KiB"),
]


def format_bytes(n: int) -> str:
    """Return a human-readable byte-size string using IEC binary units.

    Examples: ``"1.5 GiB"``, ``"512 MiB"``, ``"0 B"``.

    Parameters
    ----------
    n:
        Size in bytes (non-negative integer).

    Returns
    -------
    str
        Formatted string with at most one decimal place.
    """
    if n < 0:
        raise ValueError(f"Byte count must be non-negative, got {n}")

    for threshold, unit in _BYTE_UNITS:
        if n >= threshold:
            value = n / threshold
            # Drop the decimal when it would be ".0".
            if value == int(value):
                return f"{int(value)} {unit}"
            return f"{value:.1f} {unit}"

    return f"{n} B"


def format_duration(seconds: float) -> str:
    """Return a duration with millisecond precision, e.g. ``"1.234 seconds"``."""
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative, got {seconds}")
    return f"{seconds:,.3f} seconds"


def plural(count: int, noun: str) -> str:
    """Return ``"1 string"`` / ``"2 strings"`` style counts."""
    suffix = "" if count == 1 else "s"
    return f"{count:,} {noun}{suffix}"
