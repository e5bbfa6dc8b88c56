"""
Rate Limit Models
=================
Data models for rate limiting results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class RateLimitResult(str, Enum):
    """Rate limit decision result."""
    ALLOWED = "allowed"
    BLOCKED = "blocked"
    DEGRADED = "degraded"


@dataclass
class RateLimitInfo:
    """Rate limit check result with quota information."""
    allowed: bool
    remaining: int
    limit: int
    retry_after: Optional[int] = None  # Seconds until the window resets
    degraded: bool = False  # Decided without the counter store

    @property
    def result(self) -> RateLimitResult:
        if self.degraded:
            return RateLimitResult.DEGRADED
        return RateLimitResult.ALLOWED if self.allowed else RateLimitResult.BLOCKED


@dataclass
class PolicyDecision:
    """Combined outcome of every dimension in a policy."""
    allowed: bool
    checks: Dict[str, RateLimitInfo]
    failed_dimension: Optional[str] = None
    retry_after: Optional[int] = None
