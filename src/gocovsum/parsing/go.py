"""Go function extent extraction."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from gocovsum.models.coverage import FunctionExtent
from gocovsum.parsing.treesitter import parse_code, parse_file

if TYPE_CHECKING:
    import tree_sitter

logger = logging.getLogger(__name__)

_FUNCTION_DECLARATION = "function_declaration"
_METHOD_DECLARATION = "method_declaration"


def extract_functions(
    file_path: str | Path, *, include_methods: bool = False
) -> list[FunctionExtent]:
    """Parse a Go file and return the extents of its function declarations.

    Only top-level ``func Name(...)`` declarations are collected unless
    ``include_methods`` is set; function literals never are. Extents are
    returned in source order.

    Raises:
        SourceParseError: If the file cannot be read or does not parse.
    """
    tree = parse_file(file_path)
    extents = extract_from_root(tree.root_node, include_methods=include_methods)
    logger.debug("Found %d functions in %s", len(extents), file_path)
    return extents


def extract_from_source(source: bytes, *, include_methods: bool = False) -> list[FunctionExtent]:
    """Extract function extents from Go source bytes without error checking."""
    return extract_from_root(parse_code(source).root_node, include_methods=include_methods)


def extract_from_root(
    root: tree_sitter.Node, *, include_methods: bool = False
) -> list[FunctionExtent]:
    kinds = {_FUNCTION_DECLARATION}
    if include_methods:
        kinds.add(_METHOD_DECLARATION)
    return [_extent(child) for child in root.children if child.type in kinds]


def _text(node: tree_sitter.Node | None) -> str:
    """Decode node text from bytes, returning empty string for None."""
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def _extent(node: tree_sitter.Node) -> FunctionExtent:
    # tree-sitter points are 0-based; Go positions are 1-based byte columns.
    return FunctionExtent(
        name=_text(node.child_by_field_name("name")),
        start_line=node.start_point.row + 1,
        start_col=node.start_point.column + 1,
        end_line=node.end_point.row + 1,
        end_col=node.end_point.column + 1,
        is_method=node.type == _METHOD_DECLARATION,
    )
