"""Adapters for Go toolchain inputs: cover profiles and ``go list``."""

from gocovsum.adapters.cover_profile import parse_profile_text, parse_profiles
from gocovsum.adapters.go_list import GoPackage, PackageMap, find_packages

__all__ = [
    "GoPackage",
    "PackageMap",
    "find_packages",
    "parse_profile_text",
    "parse_profiles",
]
