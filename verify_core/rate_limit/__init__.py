"""
Rate Limiting
=============
Fixed-window limiter and the issuance throttling policy.
"""

from .models import RateLimitResult, RateLimitInfo, PolicyDecision
from .fixed_window import FixedWindowRateLimiter
from .policy import (
    IssuanceRateLimitPolicy,
    DEFAULT_IP_RULE,
    DEFAULT_PHONE_RULE,
    DEFAULT_DAILY_RULE,
)

__all__ = [
    # Models
    "RateLimitResult",
    "RateLimitInfo",
    "PolicyDecision",
    # Limiters
    "FixedWindowRateLimiter",
    "IssuanceRateLimitPolicy",
    # Rules
    "DEFAULT_IP_RULE",
    "DEFAULT_PHONE_RULE",
    "DEFAULT_DAILY_RULE",
]
