"""
Issuance Rate Limit Policy
==========================
The three throttling dimensions applied before a code is issued.
"""

import asyncio
from typing import List, Tuple

import structlog

from verify_core.config import RateLimitRule

from .fixed_window import FixedWindowRateLimiter
from .models import PolicyDecision

logger = structlog.get_logger(__name__)

DEFAULT_IP_RULE = RateLimitRule("ip", 5, 600)  # 5 / 10 min
DEFAULT_PHONE_RULE = RateLimitRule("phone", 2, 600)  # 2 / 10 min
DEFAULT_DAILY_RULE = RateLimitRule("phone_daily", 12, 86400)  # 12 / day


class IssuanceRateLimitPolicy:
    """
    Per-IP, per-phone and per-phone-per-day quotas for code issuance.

    All dimensions are counted concurrently on every request. If any is
    exceeded the request is rejected and the decision reports the first
    exceeded dimension in evaluation order (ip, phone, phone_daily).
    """

    def __init__(
        self,
        limiter: FixedWindowRateLimiter,
        ip_rule: RateLimitRule = DEFAULT_IP_RULE,
        phone_rule: RateLimitRule = DEFAULT_PHONE_RULE,
        daily_rule: RateLimitRule = DEFAULT_DAILY_RULE,
    ):
        self.limiter = limiter
        self.ip_rule = ip_rule
        self.phone_rule = phone_rule
        self.daily_rule = daily_rule

    def _dimensions(self, client_ip: str, phone_key: str) -> List[Tuple[RateLimitRule, str]]:
        return [
            (self.ip_rule, f"otp:ip:{client_ip}"),
            (self.phone_rule, f"otp:phone:{phone_key}"),
            (self.daily_rule, f"otp:phone:day:{phone_key}"),
        ]

    async def check(self, client_ip: str, phone_key: str) -> PolicyDecision:
        """
        Evaluate every dimension for one issuance request.

        Args:
            client_ip: Requesting network address
            phone_key: Normalized target phone number

        Returns:
            PolicyDecision; ``retry_after`` comes from the first failed dimension
        """
        dimensions = self._dimensions(client_ip, phone_key)
        results = await asyncio.gather(
            *(
                self.limiter.check(identifier, rule.limit, rule.window_seconds)
                for rule, identifier in dimensions
            )
        )

        checks = {rule.name: info for (rule, _), info in zip(dimensions, results)}

        for (rule, _), info in zip(dimensions, results):
            if not info.allowed:
                logger.info(
                    "Issuance throttled",
                    dimension=rule.name,
                    limit=rule.limit,
                    retry_after=info.retry_after,
                    degraded=info.degraded,
                )
                return PolicyDecision(
                    allowed=False,
                    checks=checks,
                    failed_dimension=rule.name,
                    retry_after=info.retry_after,
                )

        return PolicyDecision(allowed=True, checks=checks)
