"""Tree-sitter wrapper for parsing Go source files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

import tree_sitter_language_pack as tslp

from gocovsum.errors import SourceParseError

if TYPE_CHECKING:
    import tree_sitter

logger = logging.getLogger(__name__)

GO_LANGUAGE: Final = "go"

_parser_cache: dict[str, tree_sitter.Parser] = {}


def get_parser() -> tree_sitter.Parser:
    """Get the cached Go tree-sitter parser."""
    cached = _parser_cache.get(GO_LANGUAGE)
    if cached is not None:
        return cached
    parser = tslp.get_parser(GO_LANGUAGE)
    _parser_cache[GO_LANGUAGE] = parser
    return parser


def parse_code(source: bytes) -> tree_sitter.Tree:
    """Parse Go source bytes into a tree-sitter AST."""
    return get_parser().parse(source)


def parse_file(file_path: str | Path) -> tree_sitter.Tree:
    """Parse a Go source file, failing on unreadable or malformed input.

    Raises:
        SourceParseError: If the file cannot be read or contains syntax errors.
    """
    path = Path(file_path)
    try:
        source = path.read_bytes()
    except OSError as exc:
        raise SourceParseError(f"cannot read {path}: {exc}") from exc

    tree = parse_code(source)
    if tree.root_node.has_error:
        line, column = first_error_position(tree.root_node)
        raise SourceParseError(f"{path}:{line}:{column}: syntax error")
    logger.debug("Parsed %s (%d bytes)", path, len(source))
    return tree


def first_error_position(root: tree_sitter.Node) -> tuple[int, int]:
    """Return the 1-based (line, column) of the first error or missing node."""
    errors = collect_error_ranges(root)
    if errors:
        return errors[0]
    return root.start_point.row + 1, root.start_point.column + 1


def collect_error_ranges(root: tree_sitter.Node) -> list[tuple[int, int]]:
    """Collect start positions of parse error nodes in document order."""
    errors: list[tuple[int, int]] = []
    _walk_errors(root, errors)
    return errors


def _walk_errors(node: tree_sitter.Node, errors: list[tuple[int, int]]) -> None:
    if node.is_error or node.is_missing:
        errors.append((node.start_point.row + 1, node.start_point.column + 1))
        return
    if not node.has_error:
        return
    for child in node.children:
        _walk_errors(child, errors)
