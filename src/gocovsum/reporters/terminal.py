"""Terminal report: sorting, color buckets and tab-aligned rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.text import Text

from gocovsum.models.coverage import Report

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gocovsum.models.coverage import FileCoverage

error_console = Console(stderr=True)

RED_THRESHOLD = 30.0
YELLOW_THRESHOLD = 70.0

# text/tabwriter layout with '\t' padding: minwidth 1, tabwidth 8, padding 1.
_TAB_WIDTH = 8
_CELL_PADDING = 1
_MIN_CELL_WIDTH = 1

TOTAL_LABEL = "Total:"


def color_for_percent(
    percent: float,
    *,
    red_threshold: float = RED_THRESHOLD,
    yellow_threshold: float = YELLOW_THRESHOLD,
) -> str:
    """Return a Rich color name for a coverage percentage.

    Both thresholds belong to the lower bucket: with the defaults, 30.0 is
    red and 70.0 is yellow.
    """
    if percent <= red_threshold:
        return "red"
    if percent <= yellow_threshold:
        return "yellow"
    return "green"


def format_percent(percent: float) -> str:
    return f"{percent:.1f}%"


def build_report(files: Iterable[FileCoverage], *, reverse: bool = False) -> Report:
    """Sort file coverage by percent and compute the weighted total.

    The sort is stable in both directions, so equal percentages keep
    their input order.
    """
    items = list(files)
    ordered = sorted(items, key=lambda f: f.percent, reverse=reverse)
    return Report(
        files=tuple(ordered),
        covered_statements=sum(f.covered_statements for f in items),
        total_statements=sum(f.total_statements for f in items),
    )


@dataclass(frozen=True)
class ReportLine:
    """One rendered output line and its color bucket (None for separators)."""

    text: str
    color: str | None = None


def render_lines(
    report: Report,
    *,
    red_threshold: float = RED_THRESHOLD,
    yellow_threshold: float = YELLOW_THRESHOLD,
) -> list[ReportLine]:
    """Render the report as tab-aligned lines.

    One ``path<TABS>NN.N%`` row per file, an empty separator line, then the
    ``Total:`` row.
    """

    def _color(percent: float) -> str:
        return color_for_percent(
            percent, red_threshold=red_threshold, yellow_threshold=yellow_threshold
        )

    rows = [(f.file_path, format_percent(f.percent), _color(f.percent)) for f in report.files]
    total = report.total_percent
    labels = [label for label, _, _ in rows] + [TOTAL_LABEL]
    cell_width = _cell_width(labels)

    lines = [ReportLine(_align(label, cell_width) + value, color) for label, value, color in rows]
    lines.append(ReportLine(""))
    total_text = _align(TOTAL_LABEL, cell_width) + format_percent(total)
    lines.append(ReportLine(total_text, _color(total)))
    return lines


def _cell_width(cells: list[str]) -> int:
    width = max(max((len(c) for c in cells), default=0) + _CELL_PADDING, _MIN_CELL_WIDTH)
    return -(-width // _TAB_WIDTH) * _TAB_WIDTH


def _align(cell: str, cell_width: int) -> str:
    tabs = -(-(cell_width - len(cell)) // _TAB_WIDTH)
    return cell + "\t" * tabs


class TerminalReporter:
    """Terminal output for coverage summaries."""

    def __init__(
        self,
        *,
        color: bool = True,
        red_threshold: float = RED_THRESHOLD,
        yellow_threshold: float = YELLOW_THRESHOLD,
    ) -> None:
        """Initialize the reporter with its color policy."""
        self.error_console = error_console
        self.color = color
        self.red_threshold = red_threshold
        self.yellow_threshold = yellow_threshold

    def format_line(self, line: ReportLine) -> str:
        """Return the line text, wrapped in ANSI color codes when color is on."""
        if self.color and line.color:
            return click.style(line.text, fg=line.color)
        return line.text

    def print_report(self, report: Report) -> None:
        """Print every report line to stdout.

        Tabs are written as-is so the columns stay tab-separated.
        """
        for line in render_lines(
            report,
            red_threshold=self.red_threshold,
            yellow_threshold=self.yellow_threshold,
        ):
            click.echo(self.format_line(line))

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        self.error_console.print(
            Text(f"error: {message}", style="red" if self.color else ""), soft_wrap=True
        )
