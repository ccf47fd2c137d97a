"""Graph serialization and rendering."""

from __future__ import annotations

from depgraph.exporter.dot_writer import iter_dot, render_dot, write_dot
from depgraph.exporter.renderer import GraphRenderer

__all__ = [
    "GraphRenderer",
    "iter_dot",
    "render_dot",
    "write_dot",
]
