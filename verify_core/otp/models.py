"""
OTP Models
==========
Data models for verification records and policy.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass
class OTPConfig:
    """Policy for code generation and verification."""
    length: int = 6
    ttl_seconds: int = 120  # 2 minutes
    max_attempts: int = 5

    @property
    def ttl_minutes(self) -> int:
        return max(1, round(self.ttl_seconds / 60))


@dataclass
class VerificationRecord:
    """The outstanding code for one phone number."""
    phone_number: str
    hashed_code: str
    expires_at: datetime
    attempt_count: int = 0
    last_issued_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now > self.expires_at


@dataclass
class IssueResult:
    """Acknowledgment returned to the issuance caller."""
    message: str
    expires_at: datetime


@dataclass
class VerifyResult:
    """Successful verification outcome."""
    phone_number: str
    verified_at: datetime
    proof_token: Optional[str] = None
    message: str = "Verified"
