"""Go source parsing and function extent extraction."""

from gocovsum.parsing.go import extract_from_source, extract_functions
from gocovsum.parsing.treesitter import parse_code, parse_file

__all__ = [
    "extract_from_source",
    "extract_functions",
    "parse_code",
    "parse_file",
]
