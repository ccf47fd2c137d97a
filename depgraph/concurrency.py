"""Bounded offloading of blocking filesystem and parse work."""

from __future__ import annotations

import asyncio
import os
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def default_limit() -> int:
    """Slots proportional to available parallelism."""
    return (os.cpu_count() or 1) * 4


class IOLimiter:
    """Caps how many blocking operations are in flight at once.

    Args:
        limit: Maximum concurrent operations; defaults to ``default_limit()``.
    """

    def __init__(self, limit: int | None = None):
        self.limit = limit if limit and limit > 0 else default_limit()
        self._semaphore = asyncio.Semaphore(self.limit)
        self._active = 0
        self.peak = 0

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        """Run *fn* in a worker thread once a slot is free."""
        async with self._semaphore:
            self._active += 1
            self.peak = max(self.peak, self._active)
            try:
                return await asyncio.to_thread(fn, *args)
            finally:
                self._active -= 1

    @property
    def active(self) -> int:
        return self._active
