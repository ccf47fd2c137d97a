"""Graphviz DOT serialization of the dependency graph."""

from __future__ import annotations

import os
from typing import Iterator, TextIO

from depgraph.analysis.graph_models import DependencyGraph

NODE_COLOR_SCHEME_NAME = "set312"
NODE_COLOR_SCHEME_SIZE = 12
GRAPH_STYLES = ["rankdir=LR"]
NODE_STYLES_DEFAULT = [
    "shape=box",
    "style=filled",
    f"colorscheme={NODE_COLOR_SCHEME_NAME}",
    "fontname=Helvetica",
]
NODE_STYLES_CYCLE = [
    "colorscheme=X11",
    "fillcolor=yellow",
    "color=red",
    "fontcolor=red",
    "penwidth=2",
]
EDGE_STYLES_DEFAULT: list[str] = []
EDGE_STYLES_CYCLE = ["color=red", "penwidth=2"]
EDGE_STYLES_NON_PRODUCTION = ["style=dashed"]


def common_prefix(names: list[str]) -> str:
    """Longest shared path prefix, e.g. ``@scope/`` for ``@scope/a`` and ``@scope/b``."""
    if not names:
        return ""
    prefix = os.path.commonprefix(names)
    return prefix[: prefix.rfind("/") + 1]


def color_group(label: str) -> str:
    """Grouping token: ``ui-`` for ``ui-button``, ``core`` for ``core``."""
    comps = label.split("-")
    return comps[0] + ("-" if len(comps) > 1 else "")


def assign_colors(labels: list[str]) -> dict[str, int]:
    """Fill color index (1-based) per group, in first-seen order."""
    colors: dict[str, int] = {}
    for label in labels:
        group = color_group(label)
        if group not in colors:
            colors[group] = len(colors) % NODE_COLOR_SCHEME_SIZE + 1
    return colors


def _quote(label: str) -> str:
    return '"' + label.replace("\\", "\\\\").replace('"', '\\"') + '"'


def iter_dot(graph: DependencyGraph) -> Iterator[str]:
    """Yield the DOT document line by line."""
    names = graph.nodes()
    prefix_len = len(common_prefix(names))

    def label(name: str) -> str:
        return name[prefix_len:]

    yield "digraph g {"
    for style in GRAPH_STYLES:
        yield f"  {style}"

    cycle_nodes: set[str] = set()
    for edge in graph.edges():
        styles = list(EDGE_STYLES_DEFAULT)
        if edge.cycle:
            cycle_nodes.add(edge.dependent)
            styles.extend(EDGE_STYLES_CYCLE)
        if not edge.is_production:
            styles.extend(EDGE_STYLES_NON_PRODUCTION)
        yield (
            f"  {_quote(label(edge.dependent))} -> {_quote(label(edge.dependency))}"
            f" [{','.join(styles)}]"
        )

    colors = assign_colors([label(name) for name in names])
    for name in names:
        styles = list(NODE_STYLES_DEFAULT)
        styles.append(f"fillcolor={colors[color_group(label(name))]}")
        if name in cycle_nodes:
            styles.extend(NODE_STYLES_CYCLE)
        yield f"  {_quote(label(name))} [{','.join(styles)}]"
    yield "}"


def write_dot(graph: DependencyGraph, out: TextIO) -> None:
    for line in iter_dot(graph):
        out.write(line + "\n")


def render_dot(graph: DependencyGraph) -> str:
    return "".join(line + "\n" for line in iter_dot(graph))
