"""
Fixed Window Rate Limiter
=========================
Counter-store backed fixed-window quota checks.
"""

import structlog

from verify_core.counter_store import CounterStore
from verify_core.exceptions import CounterStoreError

from .models import RateLimitInfo

logger = structlog.get_logger(__name__)


class FixedWindowRateLimiter:
    """
    Fixed-window rate limiter.

    The first increment of a key opens a window of ``window_seconds``; the
    count resets when the key expires. Because windows are fixed, a client
    can land up to ``2 * limit`` requests across a window boundary. That
    burst is accepted in exchange for one round trip per check.

    When the counter store fails the limiter fails closed unless constructed
    with ``fail_open=True``.
    """

    key_prefix = "ratelimit"

    def __init__(self, counter_store: CounterStore, fail_open: bool = False):
        """
        Args:
            counter_store: Atomic increment-with-expiry backend
            fail_open: Allow requests when the counter store is unavailable
        """
        self.store = counter_store
        self.fail_open = fail_open

    def get_key(self, identifier: str) -> str:
        """Generate a rate limit key."""
        return f"{self.key_prefix}:{identifier}"

    async def check(self, identifier: str, limit: int, window_seconds: int) -> RateLimitInfo:
        """
        Count a request against ``identifier`` and decide whether it is allowed.

        Args:
            identifier: Dimension-scoped identifier (e.g. "otp:ip:1.2.3.4")
            limit: Requests allowed per window
            window_seconds: Window size in seconds

        Returns:
            RateLimitInfo with decision and quota
        """
        key = self.get_key(identifier)

        try:
            count = await self.store.incr_and_get(key, window_seconds)
        except CounterStoreError as e:
            logger.error(
                "Rate limit check failed",
                identifier=identifier,
                fail_open=self.fail_open,
                error=str(e),
            )
            return RateLimitInfo(
                allowed=self.fail_open,
                remaining=limit if self.fail_open else 0,
                limit=limit,
                degraded=True,
            )

        if count <= limit:
            return RateLimitInfo(allowed=True, remaining=limit - count, limit=limit)

        # Over the limit is decided; only the retry hint depends on ttl
        try:
            retry_after = await self.store.ttl(key)
        except CounterStoreError as e:
            logger.warning("Rate limit ttl lookup failed", identifier=identifier, error=str(e))
            retry_after = None

        return RateLimitInfo(
            allowed=False,
            remaining=0,
            limit=limit,
            retry_after=retry_after if retry_after is not None else window_seconds,
        )
