"""Workspace enumeration, manifests, and package ownership."""

from __future__ import annotations

from depgraph.workspace.manifest import MANIFEST_NAME, ManifestStore
from depgraph.workspace.package_index import PackageIndex
from depgraph.workspace.reader import WorkspaceReader

__all__ = [
    "MANIFEST_NAME",
    "ManifestStore",
    "PackageIndex",
    "WorkspaceReader",
]
