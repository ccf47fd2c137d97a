"""Shared fixtures: throwaway workspaces on disk."""

import json
from pathlib import Path

import pytest


def pkg(name, dependencies=None, dev=None, optional=None):
    """Manifest dict for a workspace member."""
    manifest = {"name": name, "version": "1.0.0"}
    if dependencies:
        manifest["dependencies"] = {d: "*" for d in dependencies}
    if dev:
        manifest["devDependencies"] = {d: "*" for d in dev}
    if optional:
        manifest["optionalDependencies"] = {d: "*" for d in optional}
    return manifest


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


@pytest.fixture
def make_workspace(tmp_path):
    """Build ``<tmp>/ws`` with one ``packages/<dir>`` member per manifest."""
    def _make(packages, workspaces=("packages/*",), files=None):
        root = tmp_path / "ws"
        write_json(root / "package.json", {
            "name": "root",
            "private": True,
            "workspaces": list(workspaces),
        })
        for dirname, manifest in packages.items():
            write_json(root / "packages" / dirname / "package.json", manifest)
        for rel, text in (files or {}).items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text)
        return root
    return _make
