"""
OTP Issuance Service
====================
Validates, throttles, generates, stores and delivers a verification code.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from verify_core import metrics
from verify_core.delivery.base import BaseSMSSender
from verify_core.exceptions import DeliveryError, ThrottledError
from verify_core.ip_utils import LOOPBACK_PLACEHOLDER
from verify_core.logging_config import mask_phone
from verify_core.otp.hashing import generate_otp, hash_otp
from verify_core.otp.models import IssueResult, OTPConfig, VerificationRecord
from verify_core.rate_limit.policy import IssuanceRateLimitPolicy
from verify_core.schemas import SendOTPRequest, normalize_phone_key, parse_request
from verify_core.store.base import VerificationRecordStore

logger = structlog.get_logger(__name__)

SENT_MESSAGE = "Verification code sent"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OTPIssuanceService:
    """
    Issues a fresh code for a phone number.

    Order of work: validate, throttle, generate, store, deliver. The record
    is written before delivery so a storage failure never sends a code that
    cannot be verified; a delivery failure leaves the stored record in place.
    """

    def __init__(
        self,
        store: VerificationRecordStore,
        policy: IssuanceRateLimitPolicy,
        sender: BaseSMSSender,
        secret: str,
        config: Optional[OTPConfig] = None,
        delivery_timeout: float = 10.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.policy = policy
        self.sender = sender
        self.secret = secret
        self.config = config or OTPConfig()
        self.delivery_timeout = delivery_timeout
        self.clock = clock

    def build_message(self, otp: str) -> str:
        return (
            f"Your verification code is {otp}. "
            f"It expires in {self.config.ttl_minutes} minutes. Do not share it."
        )

    async def request_code(self, phone_number: str, client_ip: Optional[str] = None) -> IssueResult:
        """
        Issue and deliver a new code.

        Args:
            phone_number: Target number, must be E.164
            client_ip: Requesting address; loopback placeholder if unknown

        Returns:
            IssueResult with a generic acknowledgment

        Raises:
            ValidationError: phone number is malformed
            ThrottledError: a rate-limit dimension is exhausted
            StorageError: the record could not be written (nothing sent)
            DeliveryError: the record was written but the SMS was not sent
        """
        request = parse_request(
            SendOTPRequest,
            {"phoneNumber": phone_number},
            "Invalid phone number format",
        )
        phone = normalize_phone_key(request.phone_number)
        client_ip = client_ip or LOOPBACK_PLACEHOLDER

        decision = await self.policy.check(client_ip, phone)
        if not decision.allowed:
            metrics.record_throttled(decision.failed_dimension or "unknown")
            raise ThrottledError(
                retry_after=decision.retry_after,
                dimension=decision.failed_dimension,
            )

        otp = generate_otp(self.config.length)
        now = self.clock()
        expires_at = now + timedelta(seconds=self.config.ttl_seconds)

        await self.store.upsert(
            VerificationRecord(
                phone_number=phone,
                hashed_code=hash_otp(otp, self.secret),
                expires_at=expires_at,
                attempt_count=0,
                last_issued_at=now,
            )
        )
        metrics.record_issued()
        logger.info(
            "Verification code issued",
            phone=mask_phone(phone),
            expires_in=self.config.ttl_seconds,
        )

        await self._deliver(phone, otp)

        return IssueResult(message=SENT_MESSAGE, expires_at=expires_at)

    async def _deliver(self, phone: str, otp: str) -> None:
        try:
            result = await asyncio.wait_for(
                self.sender.send_sms(phone, self.build_message(otp)),
                self.delivery_timeout,
            )
        except asyncio.TimeoutError as e:
            metrics.record_delivery_failure()
            logger.error(
                "Code delivery timed out",
                phone=mask_phone(phone),
                provider=self.sender.name,
                timeout=self.delivery_timeout,
            )
            raise DeliveryError("Code delivery timed out", cause=e) from e

        if not result.success:
            metrics.record_delivery_failure()
            logger.error(
                "Code delivery failed",
                phone=mask_phone(phone),
                provider=self.sender.name,
                error_code=result.error_code,
                error=result.error_message,
            )
            raise DeliveryError(f"Code delivery failed: {result.error_message or 'unknown error'}")
