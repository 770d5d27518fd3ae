"""Coverage report rendering."""

from gocovsum.reporters.terminal import (
    ReportLine,
    TerminalReporter,
    build_report,
    color_for_percent,
    render_lines,
)

__all__ = [
    "ReportLine",
    "TerminalReporter",
    "build_report",
    "color_for_percent",
    "render_lines",
]
