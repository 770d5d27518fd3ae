"""Coverage aggregation and the end-to-end summary pipeline."""

from gocovsum.analyzers.aggregator import file_coverage, function_coverage
from gocovsum.analyzers.coverage import CoverageSummaryTask, analyze_profile

__all__ = [
    "CoverageSummaryTask",
    "analyze_profile",
    "file_coverage",
    "function_coverage",
]
