"""Data models for the workspace dependency graph."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path


class SourceKind(enum.Enum):
    """Where an edge was declared or discovered."""
    RUNTIME = "dependencies"
    DEVELOPMENT = "devDependencies"
    OPTIONAL = "optionalDependencies"
    DYNAMIC = "dynamic"


# Manifest sections read by the manifest collector, in declaration order
MANIFEST_KINDS: tuple[SourceKind, ...] = (
    SourceKind.RUNTIME,
    SourceKind.DEVELOPMENT,
    SourceKind.OPTIONAL,
)


@dataclass(frozen=True)
class Package:
    """A workspace member, identified by its manifest name."""
    name: str
    directory: Path


@dataclass
class Manifest:
    """The parts of a package manifest the graph needs."""
    name: str
    path: Path
    dependencies: dict[SourceKind, list[str]] = field(default_factory=dict)

    def declared(self, kind: SourceKind) -> list[str]:
        return self.dependencies.get(kind, [])


@dataclass
class Edge:
    """A dependent -> dependency edge with its originating sources."""
    dependent: str
    dependency: str
    sources: set[SourceKind] = field(default_factory=set)
    cycle: bool = False

    @property
    def is_production(self) -> bool:
        return SourceKind.RUNTIME in self.sources


@dataclass(frozen=True)
class ImportGlob:
    """A wildcard import declaration, e.g. ``import './views/*.js'``."""
    pattern: str
    line_number: int = 0


@dataclass(frozen=True)
class DirectoryImport:
    """A ``require.context(directory, recursive, regExp)`` call."""
    directory: str
    recursive: bool = False
    filter_pattern: str = r"^\./.*$"
    flags: str = ""
    line_number: int = 0


@dataclass
class GraphConfig:
    """Configuration for a graph-build run."""
    root_path: Path = field(default_factory=lambda: Path("."))
    output_file: Path = field(default_factory=lambda: Path("dependencies.svg"))
    extensions: list[str] = field(default_factory=lambda: ["js"])
    bundler_imports: bool = False
    allow_parse_error: bool = False
    exclude_dirs: list[str] = field(default_factory=lambda: ["node_modules"])
    concurrency: int | None = None
    renderer: str = "dot"

    def __post_init__(self):
        self.root_path = Path(os.path.abspath(self.root_path))
        output = Path(self.output_file)
        if not output.is_absolute():
            output = self.root_path / output
        self.output_file = Path(os.path.normpath(output))
        self.extensions = [ext.strip().lower().lstrip(".") for ext in self.extensions if ext.strip()]

    @property
    def output_format(self) -> str:
        return self.output_file.suffix[1:].lower() or "svg"

    @staticmethod
    def parse_extensions(value: str) -> list[str]:
        """Split a comma-separated extension list such as ``"js, JSX"``."""
        return [ext.strip().lower().lstrip(".") for ext in value.split(",") if ext.strip()]
