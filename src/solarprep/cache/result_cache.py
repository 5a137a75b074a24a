"""In-process TTL cache of prepared datasets.

One entry per lookback window. An entry is served while its age is below
the TTL; expired entries are dropped on access. Entries are replaced whole,
never patched. Nothing survives a process restart.

Concurrent requests for the same window serialize on a per-key asyncio.Lock,
so a cold key triggers one computation that the waiting requests then reuse.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solarprep.pipeline.dataset import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    dataset: "Dataset"
    stored_at: float


class ResultCache:
    """TTL cache keyed by lookback window (days).

    Args:
        ttl_hours: Lifetime of an entry in hours (default: 6)
        clock: Monotonic time source in seconds (default: time.monotonic)

    Usage:
        cache = ResultCache(ttl_hours=6)
        async with cache.lock(30):
            dataset = cache.get(30)
            if dataset is None:
                dataset = await build()
                cache.put(30, dataset)
    """

    def __init__(
        self,
        ttl_hours: float = 6.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_hours <= 0:
            raise ValueError(f"ttl_hours ({ttl_hours}) must be > 0")
        self.ttl_seconds = ttl_hours * 3600
        self._clock = clock
        self._entries: dict[int, CacheEntry] = {}
        self._locks: dict[int, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: int) -> bool:
        return self.get(key) is not None

    def lock(self, key: int) -> asyncio.Lock:
        """Per-key lock guarding the check-then-compute sequence."""
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def is_valid(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.stored_at < self.ttl_seconds

    def get(self, key: int) -> "Dataset | None":
        """Return the cached dataset for ``key`` if still within the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self.is_valid(entry):
            logger.debug("Cache entry for %d days expired", key)
            del self._entries[key]
            return None
        return entry.dataset

    def put(self, key: int, dataset: "Dataset") -> None:
        """Store ``dataset`` under ``key``, replacing any previous entry."""
        self._entries[key] = CacheEntry(dataset=dataset, stored_at=self._clock())

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
        logger.info("Data cache cleared")
