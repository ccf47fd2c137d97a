"""Version-control ignore checks via ``git check-ignore``."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class GitIgnore:
    """Batch ignore checks against the repository containing *root*.

    When git is missing or *root* is not inside a work tree, nothing is
    reported as ignored.
    """

    def __init__(self, root: Path, executable: str = "git"):
        self.root = Path(root)
        self.executable = executable
        self._available: bool | None = None
        self._lock = threading.Lock()

    @property
    def available(self) -> bool | None:
        return self._available

    def filter(self, paths: list[Path]) -> list[Path]:
        """Return *paths* without the ones git ignores."""
        if not paths or self._available is False:
            return list(paths)
        ignored = self.ignored(paths)
        return [p for p in paths if p not in ignored]

    def ignored(self, paths: list[Path]) -> set[Path]:
        candidates: dict[str, Path] = {}
        for path in paths:
            rel = os.path.relpath(path, self.root)
            # git refuses the whole batch if any path leaves the repository
            if rel.startswith(".."):
                continue
            candidates[Path(rel).as_posix()] = path
        if not candidates:
            return set()

        # -z: NUL-terminated paths both ways, never quoted
        payload = "\0".join(candidates) + "\0"
        try:
            proc = subprocess.run(
                [self.executable, "-C", str(self.root), "check-ignore", "-z", "--stdin"],
                input=payload,
                text=True,
                encoding="utf-8",
                capture_output=True,
            )
        except (FileNotFoundError, OSError) as e:
            self._disable(f"cannot run {self.executable}: {e}")
            return set()

        # 0: some ignored, 1: none ignored, anything else: not a repository
        if proc.returncode not in (0, 1):
            self._disable(proc.stderr.strip() or f"exit status {proc.returncode}")
            return set()

        with self._lock:
            self._available = True
        return {
            candidates[entry]
            for entry in proc.stdout.split("\0")
            if entry in candidates
        }

    def _disable(self, reason: str) -> None:
        with self._lock:
            if self._available is None:
                logger.debug("Ignore rules unavailable for %s: %s", self.root, reason)
            self._available = False
