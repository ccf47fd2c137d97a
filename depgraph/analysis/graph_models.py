"""The shared dependency graph written to by all collectors."""

from __future__ import annotations

import threading
from typing import Iterator

from depgraph.models import Edge, SourceKind


class DependencyGraph:
    """Mapping of package name -> dependency name -> Edge.

    Every endpoint of an edge is also a node, and a package never has an
    edge to itself. Insertion is commutative and idempotent so collectors
    may add edges in any order from concurrent tasks.
    """

    def __init__(self, nodes: list[str] | None = None):
        self._nodes: dict[str, dict[str, Edge]] = {}
        self._lock = threading.Lock()
        self._sealed = False
        for name in nodes or []:
            self.ensure_node(name)

    def ensure_node(self, name: str) -> None:
        with self._lock:
            self._check_open()
            self._nodes.setdefault(name, {})

    def add_edge(self, dependent: str, dependency: str, source: SourceKind) -> None:
        if dependent == dependency:
            return
        with self._lock:
            self._check_open()
            outgoing = self._nodes.setdefault(dependent, {})
            self._nodes.setdefault(dependency, {})
            edge = outgoing.get(dependency)
            if edge is None:
                outgoing[dependency] = edge = Edge(dependent=dependent, dependency=dependency)
            edge.sources.add(source)

    def seal(self) -> None:
        """End the collection phase and fix outgoing edge order by name."""
        with self._lock:
            for name, outgoing in self._nodes.items():
                self._nodes[name] = {dep: outgoing[dep] for dep in sorted(outgoing)}
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def mark_cycle(self, dependent: str, dependency: str) -> None:
        self._nodes[dependent][dependency].cycle = True

    def nodes(self) -> list[str]:
        return list(self._nodes)

    def successors(self, name: str) -> list[str]:
        return list(self._nodes.get(name, {}))

    def get_edge(self, dependent: str, dependency: str) -> Edge | None:
        return self._nodes.get(dependent, {}).get(dependency)

    def edges(self) -> Iterator[Edge]:
        for outgoing in self._nodes.values():
            yield from outgoing.values()

    @property
    def edge_count(self) -> int:
        return sum(len(outgoing) for outgoing in self._nodes.values())

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def _check_open(self) -> None:
        if self._sealed:
            raise RuntimeError("dependency graph is sealed; no further edges may be added")
