"""Errors raised while building and rendering a dependency graph."""

from __future__ import annotations

from pathlib import Path


class DepGraphError(Exception):
    """Base class for all graph-build failures."""


class ManifestMissing(DepGraphError):
    """A workspace member has no readable or valid manifest."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid manifest {self.path}: {reason}")


class WorkspaceError(DepGraphError):
    """The workspace root cannot be enumerated into packages."""


class ParseFailure(DepGraphError):
    """A source file could not be parsed."""

    def __init__(self, path: Path | str, cause: object):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to parse {self.path}: {cause}")


class UnresolvedDynamicPattern(DepGraphError):
    """A dynamic import argument is not a static literal."""


class RendererUnavailable(DepGraphError):
    """The graph renderer executable cannot be started."""


class RendererFailure(DepGraphError):
    """The graph renderer exited with a non-zero status."""

    def __init__(self, returncode: int):
        self.returncode = returncode
        super().__init__(f"Renderer exited with {returncode}")
