"""
OTP Services
============
Issuance and verification orchestrators.
"""

from .issuance import OTPIssuanceService, SENT_MESSAGE
from .verification import OTPVerificationService

__all__ = [
    "OTPIssuanceService",
    "OTPVerificationService",
    "SENT_MESSAGE",
]
