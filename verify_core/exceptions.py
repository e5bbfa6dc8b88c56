"""
Verification Exceptions
=======================
Error taxonomy for the issuance and verification paths.

Only ``ValidationError`` and ``ThrottledError`` carry details that may be
shown to the caller. Verification failures collapse to one generic message
externally, infrastructure faults to another.
"""

from typing import Any, Dict, List, Optional


class VerifyCoreError(Exception):
    """Base exception for all verify-core errors."""

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.__class__.__name__
        super().__init__(self.message)


class ConfigurationError(VerifyCoreError):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        self.missing = missing or []
        super().__init__(message)


class ValidationError(VerifyCoreError):
    """Malformed phone number or code."""

    def __init__(self, message: str, issues: Optional[List[Dict[str, Any]]] = None):
        self.issues = issues or []
        super().__init__(message)


class ThrottledError(VerifyCoreError):
    """Request quota exceeded."""

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        retry_after: Optional[int] = None,
        dimension: Optional[str] = None,
    ):
        self.retry_after = retry_after
        self.dimension = dimension
        super().__init__(message)


# =============================================================================
# Verification failures
# =============================================================================

class VerificationFailed(VerifyCoreError):
    """Claimed code could not be accepted."""

    reason = "failed"


class NotFoundError(VerificationFailed):
    """No outstanding code for this phone number."""

    reason = "not_found"


class ExpiredError(VerificationFailed):
    """Outstanding code has expired."""

    reason = "expired"


class MismatchError(VerificationFailed):
    """Claimed code does not match."""

    reason = "mismatch"

    def __init__(self, remaining_attempts: int):
        self.remaining_attempts = remaining_attempts
        super().__init__(f"Invalid code. {remaining_attempts} attempts remaining")


class LockedError(VerificationFailed):
    """Too many failed attempts; a new code must be requested."""

    reason = "locked"


# =============================================================================
# Infrastructure faults
# =============================================================================

class InfrastructureError(VerifyCoreError):
    """Base class for faults in an external collaborator."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class StorageError(InfrastructureError):
    """Record store unreachable, timed out, or rejected the operation."""


class DeliveryError(InfrastructureError):
    """SMS delivery failed or timed out."""


class CounterStoreError(InfrastructureError):
    """Counter store unreachable or timed out."""
