"""Data models for gocovsum."""

from gocovsum.models.coverage import (
    CoverageBlock,
    FileCoverage,
    FunctionExtent,
    Profile,
    Report,
)

__all__ = [
    "CoverageBlock",
    "FileCoverage",
    "FunctionExtent",
    "Profile",
    "Report",
]
