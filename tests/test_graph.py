"""Tests for the shared dependency graph."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from depgraph.analysis.graph_models import DependencyGraph
from depgraph.models import SourceKind


class TestAddEdge:
    def test_repeated_insert_is_idempotent(self):
        graph = DependencyGraph()
        graph.add_edge("a", "b", SourceKind.RUNTIME)
        graph.add_edge("a", "b", SourceKind.RUNTIME)
        assert graph.edge_count == 1
        assert graph.get_edge("a", "b").sources == {SourceKind.RUNTIME}

    def test_self_edge_suppressed(self):
        graph = DependencyGraph()
        for kind in SourceKind:
            graph.add_edge("a", "a", kind)
        assert graph.edge_count == 0
        assert "a" not in graph

    def test_sources_merge(self):
        graph = DependencyGraph()
        graph.add_edge("a", "b", SourceKind.DEVELOPMENT)
        graph.add_edge("a", "b", SourceKind.DYNAMIC)
        edge = graph.get_edge("a", "b")
        assert edge.sources == {SourceKind.DEVELOPMENT, SourceKind.DYNAMIC}
        assert edge.cycle is False
        assert not edge.is_production

    def test_dependency_becomes_node(self):
        graph = DependencyGraph()
        graph.add_edge("a", "b", SourceKind.RUNTIME)
        assert "b" in graph
        assert graph.successors("b") == []
        assert graph.nodes() == ["a", "b"]

    def test_initial_nodes_keep_order(self):
        graph = DependencyGraph(nodes=["c", "a", "b"])
        graph.add_edge("a", "c", SourceKind.RUNTIME)
        assert graph.nodes() == ["c", "a", "b"]

    def test_concurrent_inserts_lose_nothing(self):
        graph = DependencyGraph()
        pairs = [(f"p{i}", f"p{j}") for i in range(20) for j in range(20) if i != j]
        kinds = [SourceKind.RUNTIME, SourceKind.DYNAMIC]

        def insert(args):
            (a, b), kind = args
            graph.add_edge(a, b, kind)

        work = [(pair, kind) for pair in pairs for kind in kinds] * 3
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(insert, work))

        assert graph.edge_count == len(pairs)
        assert all(e.sources == set(kinds) for e in graph.edges())


class TestSeal:
    def test_seal_orders_outgoing_edges(self):
        graph = DependencyGraph()
        graph.add_edge("a", "d", SourceKind.RUNTIME)
        graph.add_edge("a", "b", SourceKind.RUNTIME)
        graph.add_edge("a", "c", SourceKind.RUNTIME)
        graph.seal()
        assert graph.successors("a") == ["b", "c", "d"]
        assert graph.sealed

    def test_sealed_graph_rejects_edges(self):
        graph = DependencyGraph(nodes=["a", "b"])
        graph.seal()
        with pytest.raises(RuntimeError):
            graph.add_edge("a", "b", SourceKind.RUNTIME)
        with pytest.raises(RuntimeError):
            graph.ensure_node("c")

    def test_sealed_graph_allows_cycle_marks(self):
        graph = DependencyGraph()
        graph.add_edge("a", "b", SourceKind.RUNTIME)
        graph.seal()
        graph.mark_cycle("a", "b")
        assert graph.get_edge("a", "b").cycle is True
