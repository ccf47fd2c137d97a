"""Package manifest (package.json) loading."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

from depgraph.errors import ManifestMissing
from depgraph.models import MANIFEST_KINDS, Manifest

MANIFEST_NAME = "package.json"


class ManifestStore:
    """Reads and caches manifests by package directory."""

    def __init__(self):
        self._cache: dict[Path, Manifest] = {}
        self._lock = threading.Lock()

    def load_document(self, path: Path) -> dict[str, Any]:
        """Load a manifest file as a JSON object."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ManifestMissing(path, "file not found")
        except OSError as e:
            raise ManifestMissing(path, str(e)) from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestMissing(path, f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise ManifestMissing(path, "manifest is not a JSON object")
        return data

    def read(self, directory: Path) -> Manifest:
        """Return the manifest of the package rooted at *directory*."""
        directory = Path(directory)
        with self._lock:
            cached = self._cache.get(directory)
        if cached is not None:
            return cached

        path = directory / MANIFEST_NAME
        data = self.load_document(path)
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ManifestMissing(path, "missing package name")

        manifest = Manifest(name=name, path=path)
        for kind in MANIFEST_KINDS:
            section = data.get(kind.value)
            if isinstance(section, dict):
                manifest.dependencies[kind] = list(section)

        with self._lock:
            self._cache[directory] = manifest
        return manifest
