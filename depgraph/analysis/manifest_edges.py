"""Edges declared in package manifests."""

from __future__ import annotations

import asyncio

from depgraph.analysis.graph_models import DependencyGraph
from depgraph.concurrency import IOLimiter
from depgraph.models import MANIFEST_KINDS, Package
from depgraph.workspace.manifest import ManifestStore
from depgraph.workspace.package_index import PackageIndex


class ManifestEdgeCollector:
    """Adds one edge per manifest-listed dependency that is a workspace package."""

    def __init__(
        self,
        graph: DependencyGraph,
        index: PackageIndex,
        store: ManifestStore,
        limiter: IOLimiter,
    ):
        self.graph = graph
        self.index = index
        self.store = store
        self.limiter = limiter

    async def collect(self, packages: list[Package]) -> None:
        await asyncio.gather(*(self.collect_package(p) for p in packages))

    async def collect_package(self, package: Package) -> None:
        manifest = await self.limiter.run(self.store.read, package.directory)
        for kind in MANIFEST_KINDS:
            for name in manifest.declared(kind):
                # Registry dependencies are not graph nodes
                if name in self.index:
                    self.graph.add_edge(package.name, name, kind)
