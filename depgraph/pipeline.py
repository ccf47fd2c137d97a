"""Graph-build pipeline: enumerate -> collect edges -> seal -> mark cycles -> render."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable

from depgraph.analysis.cycles import mark_cycles
from depgraph.analysis.dynamic_edges import DynamicEdgeCollector
from depgraph.analysis.graph_models import DependencyGraph
from depgraph.analysis.manifest_edges import ManifestEdgeCollector
from depgraph.concurrency import IOLimiter
from depgraph.exporter.renderer import GraphRenderer
from depgraph.models import GraphConfig, Package
from depgraph.scanner.path_matcher import PathMatcher
from depgraph.workspace.manifest import ManifestStore
from depgraph.workspace.package_index import PackageIndex
from depgraph.workspace.reader import WorkspaceReader

logger = logging.getLogger(__name__)


@dataclass
class GraphResult:
    """Outcome of a graph-build run."""
    graph: DependencyGraph
    packages: list[Package] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    @property
    def cycle_count(self) -> int:
        return len(self.cycles)


def _default_parser():
    from depgraph.scanner.js_parser import SourceParser
    return SourceParser()


async def build_graph(
    config: GraphConfig,
    store: ManifestStore | None = None,
    parser_factory: Callable[[], object] = _default_parser,
) -> tuple[DependencyGraph, list[Package]]:
    """Enumerate the workspace and collect every edge into a sealed graph."""
    store = store or ManifestStore()
    limiter = IOLimiter(config.concurrency)
    reader = WorkspaceReader(config.root_path, store=store, exclude_dirs=config.exclude_dirs)
    packages = await limiter.run(reader.read_packages)

    index = PackageIndex.build(packages, exclude_dirs=config.exclude_dirs)
    graph = DependencyGraph(nodes=[p.name for p in packages])

    collectors = [ManifestEdgeCollector(graph, index, store, limiter).collect(packages)]
    if config.bundler_imports:
        dynamic = DynamicEdgeCollector(
            graph,
            index,
            PathMatcher(config.root_path, exclude_dirs=config.exclude_dirs),
            parser_factory(),
            limiter,
            config.extensions,
            allow_parse_error=config.allow_parse_error,
        )
        collectors.append(dynamic.collect(packages))
    await asyncio.gather(*collectors)

    graph.seal()
    return graph, packages


def analyze(config: GraphConfig, **kwargs) -> GraphResult:
    """Build the graph and mark its cycles, without rendering."""
    logger.info("Building dependency graph for %s", config.root_path)
    graph, packages = asyncio.run(build_graph(config, **kwargs))
    logger.info("Found %d package(s)", len(graph))

    logger.info("Discovering dependency cycles")
    result = GraphResult(graph=graph, packages=packages)

    def on_cycle(trail: list[str]) -> None:
        logger.warning("Cycle detected: %s", " -> ".join(trail))
        result.cycles.append(trail)

    mark_cycles(graph, on_cycle=on_cycle)
    if result.cycle_count > 0:
        logger.warning("Found %d dependency cycle(s)", result.cycle_count)
    else:
        logger.info("No dependency cycles found")
    return result


def run_pipeline(
    config: GraphConfig,
    renderer: GraphRenderer | None = None,
    **kwargs,
) -> GraphResult:
    """Full run: renderer check, graph build, cycle marking, image output."""
    renderer = renderer or GraphRenderer(config.renderer)
    renderer.ensure_available()

    result = analyze(config, **kwargs)

    logger.info("Writing dependency graph to %s", config.output_file)
    renderer.render(result.graph, config.output_file, config.output_format)
    logger.info("Completed")
    return result
