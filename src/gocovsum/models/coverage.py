"""Coverage data models.

Positions follow the Go ``token.Position`` convention used by cover
profiles: lines and columns are 1-based, columns count bytes, and an end
position points just past the last character of the range.
"""

from __future__ import annotations

from dataclasses import dataclass, field


def _percent(covered: int, total: int) -> float:
    return 100.0 * covered / max(total, 1)


@dataclass(frozen=True)
class CoverageBlock:
    """A statement block from a cover profile."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_statements: int
    """Number of statements in the block."""

    hit_count: int
    """Execution count (0/1 in ``set`` mode)."""

    @property
    def is_covered(self) -> bool:
        """Return True if the block was executed at least once."""
        return self.hit_count > 0


@dataclass(frozen=True)
class Profile:
    """All blocks recorded for one source file, sorted by start position."""

    file_name: str
    """File name as written in the profile (usually import path + base name)."""

    mode: str = "set"
    """Profile mode: ``set``, ``count`` or ``atomic``."""

    blocks: tuple[CoverageBlock, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FunctionExtent:
    """Source range of a function declaration."""

    name: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    is_method: bool = False


@dataclass(frozen=True)
class FileCoverage:
    """Statement coverage totals for one source file."""

    file_path: str
    """Resolved on-disk path of the source file."""

    covered_statements: int
    total_statements: int

    @property
    def percent(self) -> float:
        """Return statement coverage as a percentage (0.0-100.0).

        A file that contributes no statements reports 0.0.
        """
        return _percent(self.covered_statements, self.total_statements)


@dataclass(frozen=True)
class Report:
    """Sorted per-file coverage plus the statement-weighted total."""

    files: tuple[FileCoverage, ...] = ()
    covered_statements: int = 0
    total_statements: int = 0

    @property
    def total_percent(self) -> float:
        """Return overall coverage weighted by statement count."""
        return _percent(self.covered_statements, self.total_statements)
