"""Discovery of wildcard imports and ``require.context`` calls in syntax trees."""

from __future__ import annotations

import codecs
import logging
from typing import Callable, Union

from depgraph.errors import UnresolvedDynamicPattern
from depgraph.models import DirectoryImport, ImportGlob

logger = logging.getLogger(__name__)

DynamicImport = Union[ImportGlob, DirectoryImport]

_DEFAULT_FILTER = r"^\./.*$"


def scan_tree(root) -> list[DynamicImport]:
    """Walk a syntax tree and return every statically resolvable dynamic import.

    Arguments that are not plain literals cannot be resolved ahead of time;
    those occurrences are skipped.
    """
    found: list[DynamicImport] = []
    stack = [root]
    while stack:
        node = stack.pop()
        handler = _HANDLERS.get(node.type)
        if handler is not None:
            try:
                result = handler(node)
            except UnresolvedDynamicPattern as e:
                logger.debug("Skipping dynamic import at line %d: %s", node.start_point[0] + 1, e)
                result = None
            if result is not None:
                found.append(result)
        stack.extend(reversed(node.children))
    return found


def _import_glob(node) -> ImportGlob | None:
    source = node.child_by_field_name("source")
    if source is None:
        return None
    specifier = _string_value(source)
    if "*" not in specifier:
        return None
    return ImportGlob(pattern=specifier, line_number=node.start_point[0] + 1)


def _require_context(node) -> DirectoryImport | None:
    function = node.child_by_field_name("function")
    if function is None or function.type != "member_expression":
        return None
    target = function.child_by_field_name("object")
    prop = function.child_by_field_name("property")
    if (target is None or prop is None
            or target.type != "identifier" or _text(target) != "require"
            or _text(prop) != "context"):
        return None

    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        raise UnresolvedDynamicPattern("require.context without an argument list")
    args = [a for a in arguments.named_children if a.type != "comment"]
    if not args:
        raise UnresolvedDynamicPattern("require.context without a directory")

    directory = _string_value(args[0])
    recursive = _boolean_value(args[1]) if len(args) > 1 else False
    filter_pattern, flags = _regex_value(args[2]) if len(args) > 2 else (_DEFAULT_FILTER, "")
    return DirectoryImport(
        directory=directory,
        recursive=recursive,
        filter_pattern=filter_pattern,
        flags=flags,
        line_number=node.start_point[0] + 1,
    )


_HANDLERS: dict[str, Callable] = {
    "import_statement": _import_glob,
    "call_expression": _require_context,
}


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def _string_value(node) -> str:
    if node.type != "string":
        raise UnresolvedDynamicPattern(f"{node.type} is not a string literal")
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(_text(child))
        elif child.type == "escape_sequence":
            parts.append(_unescape(_text(child)))
        else:
            raise UnresolvedDynamicPattern(f"unexpected {child.type} in string literal")
    return "".join(parts)


def _unescape(sequence: str) -> str:
    try:
        return codecs.decode(sequence, "unicode_escape")
    except UnicodeDecodeError:
        return sequence[1:]


def _boolean_value(node) -> bool:
    if node.type == "true":
        return True
    if node.type == "false":
        return False
    raise UnresolvedDynamicPattern(f"{node.type} is not a boolean literal")


def _regex_value(node) -> tuple[str, str]:
    if node.type != "regex":
        raise UnresolvedDynamicPattern(f"{node.type} is not a regular expression literal")
    pattern = node.child_by_field_name("pattern")
    flags = node.child_by_field_name("flags")
    return (_text(pattern) if pattern else ""), (_text(flags) if flags else "")
