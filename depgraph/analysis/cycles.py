"""Cycle discovery over a completed dependency graph."""

from __future__ import annotations

from collections import deque
from typing import Callable

from depgraph.analysis.graph_models import DependencyGraph

CycleCallback = Callable[[list[str]], None]


def mark_cycles(graph: DependencyGraph, on_cycle: CycleCallback | None = None) -> int:
    """Mark every edge that closes or lies on a discovered cycle.

    Breadth-first expansion starts from every node in graph order, carrying
    the ancestor path. A dependency already on the path closes a cycle; the
    cycle's nodes become "seen" and are never expanded again, which bounds
    the search. Returns the number of cycles reported.
    """
    queue: deque[tuple[str, list[str]]] = deque((name, []) for name in graph.nodes())
    seen: set[str] = set()
    cycle_count = 0

    while queue:
        name, ancestors = queue.popleft()
        if name in seen:
            continue
        path = ancestors + [name]
        for dependency in graph.successors(name):
            if dependency in path:
                trail = path[path.index(dependency):] + [dependency]
                for dependent, target in zip(trail, trail[1:]):
                    graph.mark_cycle(dependent, target)
                seen.update(trail)
                cycle_count += 1
                if on_cycle:
                    on_cycle(trail)
            elif dependency not in seen:
                queue.append((dependency, path))

    return cycle_count
