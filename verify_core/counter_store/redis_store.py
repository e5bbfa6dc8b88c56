"""
Redis Counter Store
===================
Atomic increment-with-expiry backed by a Lua script.
"""

import asyncio
from typing import Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

from verify_core.exceptions import CounterStoreError

logger = structlog.get_logger(__name__)

# INCR and EXPIRE run as one script so a crash between them can never leave
# a counter without expiry. A key found without TTL is repaired in place.
INCR_EXPIRE_SCRIPT = """
local current = redis.call('INCR', KEYS[1])
if current == 1 or redis.call('TTL', KEYS[1]) == -1 then
    redis.call('EXPIRE', KEYS[1], tonumber(ARGV[1]))
end
return current
"""


class RedisCounterStore:
    """
    Redis-backed counter store.

    Every call is bounded by ``timeout``; connection errors and timeouts are
    raised as CounterStoreError for the caller's fail-closed/fail-open policy.
    """

    def __init__(self, redis_client: Redis, timeout: float = 1.0):
        """
        Args:
            redis_client: Async Redis client
            timeout: Per-call timeout in seconds
        """
        self.redis = redis_client
        self.timeout = timeout
        self._script_sha: Optional[str] = None

    @classmethod
    def from_url(cls, url: str, timeout: float = 1.0) -> "RedisCounterStore":
        """Create a store with its own connection pool."""
        client = Redis.from_url(
            url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
            decode_responses=True,
        )
        return cls(client, timeout=timeout)

    async def _ensure_script(self) -> str:
        """Load Lua script into Redis if needed."""
        if self._script_sha is None:
            self._script_sha = await self.redis.script_load(INCR_EXPIRE_SCRIPT)
        return self._script_sha

    async def _incr(self, key: str, window_seconds: int) -> int:
        script_sha = await self._ensure_script()
        try:
            result = await self.redis.evalsha(script_sha, 1, key, window_seconds)
        except NoScriptError:
            # Script cache flushed (e.g. Redis restart)
            self._script_sha = None
            script_sha = await self._ensure_script()
            result = await self.redis.evalsha(script_sha, 1, key, window_seconds)
        return int(result)

    async def incr_and_get(self, key: str, window_seconds: int) -> int:
        """
        Atomically increment a counter and return its new value.

        The expiry is set only when the increment created the key.

        Args:
            key: Counter key
            window_seconds: Expiry applied on creation

        Returns:
            Count after increment

        Raises:
            CounterStoreError: store unreachable or call timed out
        """
        try:
            return await asyncio.wait_for(self._incr(key, window_seconds), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error("Counter increment timed out", key=key, timeout=self.timeout)
            raise CounterStoreError("Counter store timed out", cause=e) from e
        except RedisError as e:
            logger.error("Counter increment failed", key=key, error=str(e))
            raise CounterStoreError("Counter store unavailable", cause=e) from e

    async def ttl(self, key: str) -> Optional[int]:
        """
        Remaining time-to-live of a key in seconds.

        Returns:
            Seconds remaining, or None if the key is missing or has no expiry
        """
        try:
            remaining = await asyncio.wait_for(self.redis.ttl(key), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error("Counter TTL timed out", key=key, timeout=self.timeout)
            raise CounterStoreError("Counter store timed out", cause=e) from e
        except RedisError as e:
            logger.error("Counter TTL failed", key=key, error=str(e))
            raise CounterStoreError("Counter store unavailable", cause=e) from e

        remaining = int(remaining)
        return remaining if remaining >= 0 else None

    async def ping(self) -> bool:
        return bool(await asyncio.wait_for(self.redis.ping(), self.timeout))

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self.redis.aclose()
        logger.info("Redis counter store closed")
