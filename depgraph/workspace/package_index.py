"""Resolution of file paths to their owning workspace package."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

from depgraph.models import Package


class PackageIndex:
    """Package name -> directory, with nearest-ancestor ownership lookup."""

    def __init__(self, packages: list[Package], exclude_dirs: list[str] | None = None):
        self.exclude_dirs = exclude_dirs if exclude_dirs is not None else ["node_modules"]
        self._by_name: dict[str, Package] = {p.name: p for p in packages}
        # Deepest directories first so nested packages win over their parents
        self._dirs: list[tuple[Path, str]] = sorted(
            ((Path(os.path.realpath(p.directory)), p.name) for p in packages),
            key=lambda entry: len(entry[0].parts),
            reverse=True,
        )

    @classmethod
    def build(cls, packages: list[Package], exclude_dirs: list[str] | None = None) -> PackageIndex:
        return cls(packages, exclude_dirs=exclude_dirs)

    def owner_of(self, path: Path | str) -> str | None:
        """Name of the package whose directory is the nearest ancestor of *path*."""
        resolved = Path(os.path.realpath(path))
        for directory, name in self._dirs:
            if resolved != directory and directory not in resolved.parents:
                continue
            rel = resolved.relative_to(directory)
            if self._is_vendored(rel):
                return None
            return name
        return None

    def get(self, name: str) -> Package | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def _is_vendored(self, rel: Path) -> bool:
        return any(
            fnmatch.fnmatch(part, pattern)
            for part in rel.parts
            for pattern in self.exclude_dirs
        )
