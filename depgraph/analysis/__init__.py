"""Graph construction and cycle analysis."""

from __future__ import annotations

from depgraph.analysis.cycles import mark_cycles
from depgraph.analysis.graph_models import DependencyGraph
from depgraph.analysis.manifest_edges import ManifestEdgeCollector

__all__ = [
    "DependencyGraph",
    "ManifestEdgeCollector",
    "mark_cycles",
]
