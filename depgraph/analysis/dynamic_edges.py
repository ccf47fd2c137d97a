"""Edges discovered by scanning sources for dynamic imports."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Callable

from depgraph.analysis.graph_models import DependencyGraph
from depgraph.concurrency import IOLimiter
from depgraph.errors import ParseFailure, UnresolvedDynamicPattern
from depgraph.models import DirectoryImport, ImportGlob, Package, SourceKind
from depgraph.scanner.import_scanner import DynamicImport, scan_tree
from depgraph.scanner.path_matcher import PathMatcher
from depgraph.workspace.package_index import PackageIndex

logger = logging.getLogger(__name__)

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def compile_filter(pattern: str, flags: str = "") -> re.Pattern[str]:
    """Compile a JavaScript regular expression literal body for Python ``re``."""
    value = 0
    for flag in flags:
        value |= _REGEX_FLAGS.get(flag, 0)
    try:
        return re.compile(pattern, value)
    except re.error as e:
        raise UnresolvedDynamicPattern(f"unsupported regular expression /{pattern}/{flags}: {e}") from e


class DynamicEdgeCollector:
    """Adds edges for packages reached through wildcard imports and ``require.context``."""

    def __init__(
        self,
        graph: DependencyGraph,
        index: PackageIndex,
        matcher: PathMatcher,
        parser,
        limiter: IOLimiter,
        extensions: list[str],
        allow_parse_error: bool = False,
    ):
        self.graph = graph
        self.index = index
        self.matcher = matcher
        self.parser = parser
        self.limiter = limiter
        self.extensions = extensions
        self.allow_parse_error = allow_parse_error

    async def collect(self, packages: list[Package]) -> None:
        await asyncio.gather(*(self.collect_package(p) for p in packages))

    async def collect_package(self, package: Package) -> None:
        owned = await self.limiter.run(self._owned_files, package)
        await asyncio.gather(*(self.collect_file(package, f) for f in owned))

    async def collect_file(self, package: Package, path: Path) -> None:
        try:
            tree = await self.limiter.run(self.parser.parse, path)
        except ParseFailure as e:
            if not self.allow_parse_error:
                raise
            logger.warning("%s", e)
            return

        imports = scan_tree(tree.root_node)
        if not imports:
            return
        owners = await asyncio.gather(
            *(self.resolve(package, path, found) for found in imports)
        )
        for name in _unique(n for names in owners for n in names):
            self.graph.add_edge(package.name, name, SourceKind.DYNAMIC)

    async def resolve(self, package: Package, path: Path, found: DynamicImport) -> list[str]:
        """Owning packages, other than *package*, of the files *found* refers to."""
        ref_dir = path.parent
        if isinstance(found, ImportGlob):
            return await self.limiter.run(
                self._match_owners, package,
                self.matcher.match_import_glob, found.pattern, ref_dir, self.extensions,
            )
        elif isinstance(found, DirectoryImport):
            try:
                pattern = compile_filter(found.filter_pattern, found.flags)
            except UnresolvedDynamicPattern as e:
                logger.debug("%s:%d: %s", path, found.line_number, e)
                return []
            return await self.limiter.run(
                self._match_owners, package,
                self.matcher.match_directory_import, ref_dir / found.directory, found.recursive, pattern,
            )
        return []

    def _owned_files(self, package: Package) -> list[Path]:
        files = self.matcher.source_files(package.directory, self.extensions)
        # Files of a nested workspace package belong to that package
        return [f for f in files if self.index.owner_of(f) == package.name]

    def _match_owners(self, package: Package, match: Callable[..., list[Path]], *args) -> list[str]:
        """Run *match* and map its files to owning packages, in a worker thread."""
        owners = (self.index.owner_of(path) for path in match(*args))
        return _unique(o for o in owners if o is not None and o != package.name)


def _unique(names) -> list[str]:
    return list(dict.fromkeys(names))
