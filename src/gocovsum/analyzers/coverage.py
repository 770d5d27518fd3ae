"""Coverage summary pipeline.

Reads a cover profile, resolves every profiled file through ``go list``,
extracts function extents from each source file and aggregates statement
coverage into a sorted ``Report``. Any failure aborts the whole run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from gocovsum.adapters.cover_profile import parse_profiles
from gocovsum.adapters.go_list import find_packages
from gocovsum.analyzers.aggregator import file_coverage
from gocovsum.models.coverage import FileCoverage, Report
from gocovsum.parsing.go import extract_functions
from gocovsum.reporters.terminal import build_report

logger = logging.getLogger(__name__)


@dataclass
class CoverageSummaryTask:
    """Inputs for one coverage summary run."""

    profile_path: Path
    """Path to the ``go test -coverprofile`` output."""

    reverse: bool = False
    """Sort from best to worst coverage."""

    include_methods: bool = False
    """Count method declarations in addition to plain functions."""

    go_binary: str | None = None
    """``go`` executable; discovered from GOROOT/PATH when unset."""

    workdir: Path | None = None
    """Directory ``go list`` runs in."""

    timeout: float = 120.0
    """Timeout in seconds for ``go list``."""


async def analyze_profile(task: CoverageSummaryTask) -> Report:
    """Run the full pipeline for ``task`` and return the sorted report.

    Raises:
        CoverageSummaryError: Subclasses for every failure kind; nothing is
            reported partially.
    """
    profiles = parse_profiles(task.profile_path)
    packages = await find_packages(
        profiles,
        go_binary=task.go_binary,
        cwd=task.workdir,
        timeout=task.timeout,
    )

    files: list[FileCoverage] = []
    for profile in profiles:
        path = packages.resolve(profile.file_name)
        extents = extract_functions(path, include_methods=task.include_methods)
        coverage = file_coverage(path, extents, profile.blocks)
        logger.debug(
            "%s: %d/%d statements covered",
            path,
            coverage.covered_statements,
            coverage.total_statements,
        )
        files.append(coverage)

    return build_report(files, reverse=task.reverse)
