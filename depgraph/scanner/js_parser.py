"""Tree-sitter parsing of JavaScript and TypeScript sources."""

from __future__ import annotations

import threading
from pathlib import Path

from depgraph.errors import ParseFailure
from depgraph.scanner.language_map import grammar_for

try:
    from tree_sitter_language_pack import get_parser
except ImportError as _err:
    raise ImportError(
        "tree-sitter-language-pack is required. Install with: "
        "pip install tree-sitter-language-pack"
    ) from _err


class SourceParser:
    """Parses source files into tree-sitter syntax trees.

    Parsers are not shared between threads, so each worker thread keeps
    its own per-grammar cache.
    """

    def __init__(self):
        self._local = threading.local()

    def parse(self, path: Path):
        """Parse *path*, raising ``ParseFailure`` on unreadable or invalid source."""
        path = Path(path)
        try:
            source_bytes = path.read_bytes()
        except OSError as e:
            raise ParseFailure(path, e) from e
        return self.parse_bytes(source_bytes, grammar_for(path.suffix), path=path)

    def parse_bytes(self, source_bytes: bytes, grammar_name: str, path: Path | None = None):
        tree = self._get_parser(grammar_name).parse(source_bytes)
        if tree.root_node.has_error:
            raise ParseFailure(path or "<source>", _describe_error(tree.root_node))
        return tree

    def _get_parser(self, grammar_name: str):
        cache = getattr(self._local, "parsers", None)
        if cache is None:
            cache = self._local.parsers = {}
        if grammar_name not in cache:
            cache[grammar_name] = get_parser(grammar_name)
        return cache[grammar_name]


def _describe_error(root) -> str:
    """Locate the first syntax error under *root*."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            line, column = node.start_point
            kind = f"missing {node.type}" if node.is_missing else "unexpected token"
            return f"{kind} at line {line + 1}, column {column + 1}"
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return "syntax error"
