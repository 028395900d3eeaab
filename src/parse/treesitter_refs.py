"""Tree-sitter based name reference extraction for PHP sources."""

from __future__ import annotations

import tree_sitter_php as tsphp
from tree_sitter import Language, Node, Parser

_PARSER: Parser | None = None

# Leaf node carrying identifiers in class headers, type hints and calls.
_NAME_NODE = "name"
# $variables wrap a name node but never refer to a type.
_VARIABLE_NODE = "variable_name"


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the PHP language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(tsphp.language_php())
        _PARSER = Parser(lang)

    return _PARSER


def _collect_names(root: Node, wanted: str) -> list[tuple[int, int]]:
    """Walk ``root`` in document order with an explicit stack.

    Generated PHP (long ``.`` chains, nested arrays) can nest deeper than the
    interpreter's recursion limit, so the walk never recurses.
    """
    found: list[tuple[int, int]] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == _VARIABLE_NODE:
            continue

        if node.type == _NAME_NODE:
            if node.text and node.text.decode("utf8").lower() == wanted:
                found.append((node.start_point[0] + 1, node.start_point[1] + 1))
            continue

        stack.extend(reversed(node.children))
    return found


def extract_name_references(source: str, name: str) -> list[tuple[int, int]]:
    """Return 1-based (line, column) pairs of every ``name`` node equal to ``name``.

    Comparison is case-insensitive, as PHP class and function names are.
    Mentions inside comments and string literals are not name nodes and are
    therefore never returned. Columns count UTF-8 bytes, as tree-sitter does.
    """
    tree = _get_parser().parse(source.encode("utf8"))
    return _collect_names(tree.root_node, name.lower())


__all__ = ["extract_name_references"]
