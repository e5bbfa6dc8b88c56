"""
In-Memory Counter Store
=======================
Process-local counter store for development and testing.
"""

import math
import time
from typing import Callable, Dict, List, Optional


class InMemoryCounterStore:
    """
    Simple in-memory counter store.

    For development and testing only.
    Use RedisCounterStore in production.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Monotonic seconds source, injectable for tests
        """
        self.clock = clock
        self._counters: Dict[str, List[float]] = {}  # key -> [count, expires_at]

    def _live(self, key: str) -> Optional[List[float]]:
        entry = self._counters.get(key)
        if entry is not None and entry[1] <= self.clock():
            del self._counters[key]
            return None
        return entry

    async def incr_and_get(self, key: str, window_seconds: int) -> int:
        # No await between read and write, so this is atomic within the loop
        entry = self._live(key)
        if entry is None:
            entry = [0, self.clock() + window_seconds]
            self._counters[key] = entry
        entry[0] += 1
        return int(entry[0])

    async def ttl(self, key: str) -> Optional[int]:
        entry = self._live(key)
        if entry is None:
            return None
        return max(0, math.ceil(entry[1] - self.clock()))

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._counters.clear()
