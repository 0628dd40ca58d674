"""Build cache keyed by source hash, with a dirty flag."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class BuildCache(Generic[T]):
    """Holds the last build result and the source hash it was built from.

    ``get_or_build`` decides "reuse or rebuild" under a lock, so concurrent
    callers never run two builds for the same invalidation. An invalidation
    that lands while a build is running leaves the cache dirty.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._value: T | None = None
        self._hash: str | None = None
        self._generation = 0
        self._built_generation = -1
        self.builds = 0

    @property
    def dirty(self) -> bool:
        return self._value is None or self._built_generation != self._generation

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def source_hash(self) -> str | None:
        return self._hash

    def invalidate(self) -> None:
        """Mark the cached value stale; the next get_or_build rebuilds."""
        self._generation += 1

    async def get_or_build(
        self, source_hash: str, builder: Callable[[], Awaitable[T]]
    ) -> T:
        async with self._lock:
            if not self.dirty and self._hash == source_hash:
                return self._value  # type: ignore[return-value]

            generation = self._generation
            log.debug(f"Rebuilding (hash {source_hash}, generation {generation})")
            value = await builder()
            self._value = value
            self._hash = source_hash
            self._built_generation = generation
            self.builds += 1
            return value
