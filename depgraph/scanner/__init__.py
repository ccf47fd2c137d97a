"""Source parsing and filesystem matching."""

from __future__ import annotations

from depgraph.scanner.gitignore import GitIgnore
from depgraph.scanner.path_matcher import PathMatcher, expand_braces

__all__ = [
    "GitIgnore",
    "PathMatcher",
    "expand_braces",
]
