"""
OTP Hashing Utilities
=====================
Secure generation and keyed hashing of numeric verification codes.
"""

import hashlib
import hmac
import secrets


def generate_otp(length: int = 6) -> str:
    """
    Generate a secure random numeric OTP.

    Drawn uniformly from the full ``10 ** length`` space and zero-padded,
    so codes with leading zeros are as likely as any other.

    Args:
        length: Number of digits

    Returns:
        OTP string of exactly ``length`` digits
    """
    if length < 1:
        raise ValueError("OTP length must be positive")
    otp = secrets.randbelow(10 ** length)
    return str(otp).zfill(length)


def hash_otp(otp: str, secret: str) -> str:
    """
    Keyed digest of an OTP (HMAC-SHA256).

    Args:
        otp: Plain OTP
        secret: Server-held secret key

    Returns:
        Hex digest
    """
    return hmac.new(secret.encode(), otp.encode(), hashlib.sha256).hexdigest()


def verify_otp_hash(otp: str, secret: str, stored_hash: str) -> bool:
    """
    Verify an OTP against its digest.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        otp: User-provided OTP
        secret: Server-held secret key
        stored_hash: Stored digest to compare

    Returns:
        True if OTP matches
    """
    computed_hash = hash_otp(otp, secret)
    return hmac.compare_digest(computed_hash, stored_hash)


def hash_phone(phone: str, secret: str) -> str:
    """Keyed HMAC-SHA256 of a phone number, for tokens that must not carry it."""
    return hmac.new(secret.encode(), phone.encode(), hashlib.sha256).hexdigest()
