"""
OTP Verification Service
========================
Checks a claimed code against the stored record.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from verify_core import metrics
from verify_core.exceptions import (
    ExpiredError,
    LockedError,
    MismatchError,
    NotFoundError,
    VerificationFailed,
)
from verify_core.logging_config import mask_phone
from verify_core.otp.hashing import verify_otp_hash
from verify_core.otp.models import OTPConfig, VerifyResult
from verify_core.otp.proof_token import ProofToken
from verify_core.schemas import VerifyOTPRequest, normalize_phone_key, parse_request
from verify_core.store.base import VerificationRecordStore

from .issuance import utcnow

logger = structlog.get_logger(__name__)


class OTPVerificationService:
    """
    Single-use, attempt-bounded verification of issued codes.

    A record is consumed (deleted) on success, on expiry, and when the
    failed-attempt count reaches ``max_attempts``.
    """

    def __init__(
        self,
        store: VerificationRecordStore,
        secret: str,
        config: Optional[OTPConfig] = None,
        proof_token: Optional[ProofToken] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.secret = secret
        self.config = config or OTPConfig()
        self.proof_token = proof_token
        self.clock = clock

    async def verify(self, phone_number: str, code: str) -> VerifyResult:
        """
        Verify ``code`` for ``phone_number``.

        Returns:
            VerifyResult on success

        Raises:
            ValidationError: malformed phone number or code
            NotFoundError: no outstanding code
            ExpiredError: code expired (record removed)
            MismatchError: wrong code, attempts remain
            LockedError: wrong code, attempts exhausted (record removed)
            StorageError: record store fault
        """
        request = parse_request(
            VerifyOTPRequest,
            {"phoneNumber": phone_number, "otp": code},
            "Invalid verification request",
        )
        phone = normalize_phone_key(request.phone_number)

        try:
            result = await self._verify(phone, request.otp)
        except VerificationFailed as e:
            metrics.record_verification(e.reason)
            logger.info("Verification failed", phone=mask_phone(phone), reason=e.reason)
            raise

        metrics.record_verification("success")
        logger.info("Verification succeeded", phone=mask_phone(phone))
        return result

    async def _verify(self, phone: str, code: str) -> VerifyResult:
        record = await self.store.find(phone)
        if record is None:
            raise NotFoundError()

        now = self.clock()
        digest = record.hashed_code
        # Writes only apply to the record read above, never to a reissued one
        if record.is_expired(now):
            if not await self.store.delete(phone, hashed_code=digest):
                raise NotFoundError()
            raise ExpiredError()

        if record.attempt_count >= self.config.max_attempts:
            if not await self.store.delete(phone, hashed_code=digest):
                raise NotFoundError()
            raise LockedError()

        if verify_otp_hash(code, self.secret, digest):
            # Whoever deletes the record owns the success
            if not await self.store.delete(phone, hashed_code=digest):
                raise NotFoundError()
            token = self.proof_token.generate(phone) if self.proof_token else None
            return VerifyResult(phone_number=phone, verified_at=now, proof_token=token)

        attempts = await self.store.increment_attempt(phone, hashed_code=digest)
        if attempts is None:
            raise NotFoundError()

        if attempts >= self.config.max_attempts:
            await self.store.delete(phone, hashed_code=digest)
            raise LockedError()

        raise MismatchError(remaining_attempts=self.config.max_attempts - attempts)
