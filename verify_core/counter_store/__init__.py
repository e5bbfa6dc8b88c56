"""
Counter Store
=============
Atomic increment-with-expiry primitives used for all throttling.
"""

from typing import Optional, Protocol

from .in_memory import InMemoryCounterStore
from .redis_store import RedisCounterStore, INCR_EXPIRE_SCRIPT


class CounterStore(Protocol):
    """Capability required by the rate limiter."""

    async def incr_and_get(self, key: str, window_seconds: int) -> int: ...

    async def ttl(self, key: str) -> Optional[int]: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


__all__ = [
    "CounterStore",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "INCR_EXPIRE_SCRIPT",
]
