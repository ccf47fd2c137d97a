"""Workspace member enumeration from the root manifest."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path

from depgraph.errors import WorkspaceError
from depgraph.models import Package
from depgraph.workspace.manifest import MANIFEST_NAME, ManifestStore

logger = logging.getLogger(__name__)


class WorkspaceReader:
    """Lists the packages declared by a workspace root."""

    def __init__(
        self,
        root: Path,
        store: ManifestStore | None = None,
        exclude_dirs: list[str] | None = None,
    ):
        self.root = Path(root)
        self.store = store or ManifestStore()
        self.exclude_dirs = exclude_dirs if exclude_dirs is not None else ["node_modules"]

    def workspace_patterns(self) -> list[str]:
        data = self.store.load_document(self.root / MANIFEST_NAME)
        workspaces = data.get("workspaces")
        # yarn accepts {"packages": [...], "nohoist": [...]}
        if isinstance(workspaces, dict):
            workspaces = workspaces.get("packages")
        if not isinstance(workspaces, list) or not workspaces:
            raise WorkspaceError(f"{self.root / MANIFEST_NAME} declares no workspaces")
        return [p for p in workspaces if isinstance(p, str) and p.strip()]

    def package_dirs(self) -> list[Path]:
        """Directories matched by the workspace patterns, sorted."""
        include: set[Path] = set()
        exclude: set[Path] = set()
        for pattern in self.workspace_patterns():
            target = exclude if pattern.startswith("!") else include
            for match in self.root.glob(pattern.lstrip("!").rstrip("/")):
                if match.is_dir() and not self._is_vendored(match):
                    target.add(match.resolve())
        return sorted(include - exclude)

    def read_packages(self) -> list[Package]:
        packages: list[Package] = []
        owners: dict[str, Path] = {}
        for directory in self.package_dirs():
            manifest = self.store.read(directory)
            if manifest.name in owners:
                raise WorkspaceError(
                    f"Package name {manifest.name!r} is declared by both "
                    f"{owners[manifest.name]} and {directory}"
                )
            owners[manifest.name] = directory
            packages.append(Package(name=manifest.name, directory=directory))
        logger.debug("Workspace %s has %d member(s)", self.root, len(packages))
        return packages

    def _is_vendored(self, path: Path) -> bool:
        try:
            rel = path.relative_to(self.root)
        except ValueError:
            rel = path
        return any(
            fnmatch.fnmatch(part, pattern)
            for part in rel.parts
            for pattern in self.exclude_dirs
        )
