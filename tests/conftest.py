"""
Shared fixtures for verify-core tests.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import pytest

from verify_core.counter_store import InMemoryCounterStore
from verify_core.delivery.base import BaseSMSSender, MessageStatus, SendResult
from verify_core.otp.models import OTPConfig
from verify_core.otp.proof_token import ProofToken
from verify_core.rate_limit import FixedWindowRateLimiter, IssuanceRateLimitPolicy
from verify_core.services import OTPIssuanceService, OTPVerificationService
from verify_core.store import InMemoryRecordStore

SECRET = "test-secret"
PHONE = "+14155551234"

_CODE_RE = re.compile(r"code is (\d+)")


class FakeClock:
    """Wall clock and monotonic clock advanced together by tests."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.mono = 1000.0

    def __call__(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.mono

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)
        self.mono += seconds


class RecordingSender(BaseSMSSender):
    """Captures messages instead of sending them."""

    name = "recording"

    def __init__(self, fail: bool = False):
        super().__init__()
        self.fail = fail
        self.sent: List[Tuple[str, str]] = []

    async def send_sms(self, to: str, body: str) -> SendResult:
        self.sent.append((to, body))
        if self.fail:
            return SendResult(
                success=False,
                status=MessageStatus.FAILED,
                error_code="30003",
                error_message="Unreachable destination handset",
            )
        return SendResult(success=True, provider_message_id="SM123", status=MessageStatus.SENT)

    def last_code(self, phone: Optional[str] = None) -> str:
        for to, body in reversed(self.sent):
            if phone is None or to == phone:
                return _CODE_RE.search(body).group(1)
        raise AssertionError("no code sent")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def counter_store(clock):
    return InMemoryCounterStore(clock=clock.monotonic)


@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def otp_config():
    return OTPConfig(length=6, ttl_seconds=120, max_attempts=5)


@pytest.fixture
def policy(counter_store):
    return IssuanceRateLimitPolicy(FixedWindowRateLimiter(counter_store))


@pytest.fixture
def issuance(record_store, policy, sender, otp_config, clock):
    return OTPIssuanceService(
        store=record_store,
        policy=policy,
        sender=sender,
        secret=SECRET,
        config=otp_config,
        clock=clock,
    )


@pytest.fixture
def verification(record_store, otp_config, clock):
    return OTPVerificationService(
        store=record_store,
        secret=SECRET,
        config=otp_config,
        proof_token=ProofToken(SECRET),
        clock=clock,
    )
