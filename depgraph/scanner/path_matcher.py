"""Filesystem matching for source listing and dynamic import resolution."""

from __future__ import annotations

import fnmatch
import glob
import os
import re
from pathlib import Path

from depgraph.scanner.gitignore import GitIgnore

_BRACE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, which ``glob`` does not understand."""
    m = _BRACE.search(pattern)
    if not m:
        return [pattern]
    expanded: list[str] = []
    for alternative in m.group(1).split(","):
        expanded.extend(expand_braces(pattern[:m.start()] + alternative + pattern[m.end():]))
    return expanded


class PathMatcher:
    """Resolves file sets while honouring ignore rules and excluded directories."""

    def __init__(
        self,
        root: Path,
        exclude_dirs: list[str] | None = None,
        ignore: GitIgnore | None = None,
    ):
        self.root = Path(os.path.realpath(root))
        self.exclude_dirs = exclude_dirs if exclude_dirs is not None else ["node_modules"]
        self.ignore = ignore if ignore is not None else GitIgnore(self.root)

    def is_excluded(self, path: Path) -> bool:
        rel = os.path.relpath(path, self.root)
        parts = Path(path).parts if rel.startswith("..") else Path(rel).parts
        return any(
            fnmatch.fnmatch(part, pattern)
            for part in parts
            for pattern in self.exclude_dirs
        )

    def source_files(self, directory: Path, extensions: list[str]) -> list[Path]:
        """Source files with one of *extensions* under *directory*, sorted."""
        suffixes = {"." + ext.lower() for ext in extensions}
        files: list[Path] = []
        for dirpath, dirs, filenames in os.walk(directory):
            dirs[:] = sorted(
                d for d in dirs
                if not d.startswith(".")
                and not any(fnmatch.fnmatch(d, p) for p in self.exclude_dirs)
            )
            for filename in sorted(filenames):
                if filename.startswith("."):
                    continue
                if os.path.splitext(filename)[1].lower() in suffixes:
                    files.append(Path(os.path.realpath(os.path.join(dirpath, filename))))
        return self.ignore.filter(files)

    def match_import_glob(self, pattern: str, ref_dir: Path, extensions: list[str]) -> list[Path]:
        """Files matched by a wildcard import specifier relative to *ref_dir*."""
        allowed = {ext.lower() for ext in extensions}
        matches: set[Path] = set()
        for expanded in expand_braces(pattern):
            # The importing directory is literal; only the specifier is a pattern
            for hit in glob.glob(os.path.join(glob.escape(str(ref_dir)), expanded), recursive=True):
                if os.path.isfile(hit):
                    matches.add(Path(os.path.realpath(hit)))

        candidates = [
            path for path in sorted(matches)
            if path.suffix[1:].lower() in allowed
            and not os.path.relpath(path, self.root).startswith(".")
            and not self.is_excluded(path)
        ]
        return self.ignore.filter(candidates)

    def match_directory_import(
        self,
        base: Path,
        recursive: bool,
        filter_pattern: re.Pattern[str],
    ) -> list[Path]:
        """Files a ``require.context`` call over *base* would include."""
        base = Path(os.path.realpath(base))
        if not base.is_dir():
            return []
        walker = base.rglob("*") if recursive else base.iterdir()
        candidates: list[Path] = []
        for path in sorted(walker):
            if not path.is_file() or self.is_excluded(path):
                continue
            key = "./" + path.relative_to(base).as_posix()
            stripped = key[: -len(path.suffix)] if path.suffix else key
            if filter_pattern.search(key) or filter_pattern.search(stripped):
                candidates.append(Path(os.path.realpath(path)))
        return self.ignore.filter(candidates)
