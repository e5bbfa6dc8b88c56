"""
OTP Generation and Hashing
==========================
Numeric code generation, keyed digests and verification records.
"""

from .models import OTPConfig, VerificationRecord, IssueResult, VerifyResult
from .hashing import generate_otp, hash_otp, verify_otp_hash, hash_phone
from .proof_token import ProofToken

__all__ = [
    # Models
    "OTPConfig",
    "VerificationRecord",
    "IssueResult",
    "VerifyResult",
    # Hashing
    "generate_otp",
    "hash_otp",
    "verify_otp_hash",
    "hash_phone",
    # Proof Token
    "ProofToken",
]
