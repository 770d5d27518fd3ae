"""Block-to-function statement coverage aggregation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gocovsum.models.coverage import FileCoverage

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from gocovsum.models.coverage import CoverageBlock, FunctionExtent


def function_coverage(
    extent: FunctionExtent, blocks: Sequence[CoverageBlock]
) -> tuple[int, int]:
    """Return ``(covered, total)`` statements of the blocks inside ``extent``.

    ``blocks`` must be sorted by start position, as profiles are. A block
    that overlaps the function at all is attributed to it entirely. A
    function with no statements yields ``(0, 1)``.
    """
    # O(functions * blocks) per file; both are small in practice.
    covered = 0
    total = 0
    for b in blocks:
        if b.start_line > extent.end_line or (
            b.start_line == extent.end_line and b.start_col >= extent.end_col
        ):
            # Past the end of the function; later blocks start even later.
            break
        if b.end_line < extent.start_line or (
            b.end_line == extent.start_line and b.end_col <= extent.start_col
        ):
            continue
        total += b.num_statements
        if b.is_covered:
            covered += b.num_statements
    if total == 0:
        total = 1
    return covered, total


def file_coverage(
    file_path: str,
    extents: Iterable[FunctionExtent],
    blocks: Sequence[CoverageBlock],
) -> FileCoverage:
    """Sum function coverage over every extent of a file."""
    covered = 0
    total = 0
    for extent in extents:
        n, d = function_coverage(extent, blocks)
        covered += n
        total += d
    return FileCoverage(file_path=file_path, covered_statements=covered, total_statements=total)
