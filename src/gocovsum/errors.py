"""Exception hierarchy for gocovsum.

Every error is fatal to a run: the CLI reports the message and exits
non-zero without printing a partial report.
"""

from __future__ import annotations


class CoverageSummaryError(Exception):
    """Base exception for all gocovsum failures."""


class ConfigError(CoverageSummaryError):
    """Raised when ``.gocovsum.yml`` is malformed or fails validation."""


class ProfileParseError(CoverageSummaryError):
    """Raised when a cover profile cannot be read or is malformed."""


class ToolInvocationError(CoverageSummaryError):
    """Raised when ``go list`` cannot be run or exits unsuccessfully."""

    def __init__(self, message: str, stderr: str = "") -> None:
        """Initialize with error message and captured standard error."""
        if stderr.strip():
            message = f"{message}\n{stderr.rstrip()}"
        super().__init__(message)
        self.stderr = stderr


class PackageNotFoundError(CoverageSummaryError):
    """Raised when a profiled file's package is missing from ``go list`` output."""


class PackageResolutionError(CoverageSummaryError):
    """Raised when ``go list`` reported an error for a profiled file's package."""


class SourceParseError(CoverageSummaryError):
    """Raised when a Go source file cannot be read or does not parse."""
