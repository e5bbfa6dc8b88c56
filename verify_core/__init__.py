"""
Verify Core Library
===================
Phone-number verification: short-lived single-use codes with throttled
issuance and attempt-bounded verification.
"""

__version__ = "0.1.0"

# Configuration
from verify_core.config import Settings, RateLimitRule, load_settings

# Exceptions
from verify_core.exceptions import (
    VerifyCoreError,
    ConfigurationError,
    ValidationError,
    ThrottledError,
    VerificationFailed,
    NotFoundError,
    ExpiredError,
    MismatchError,
    LockedError,
    InfrastructureError,
    StorageError,
    DeliveryError,
    CounterStoreError,
)

# Counter Store
from verify_core.counter_store import (
    CounterStore,
    InMemoryCounterStore,
    RedisCounterStore,
)

# Rate Limiting
from verify_core.rate_limit import (
    FixedWindowRateLimiter,
    IssuanceRateLimitPolicy,
    RateLimitInfo,
    RateLimitResult,
    PolicyDecision,
)

# OTP
from verify_core.otp import (
    generate_otp,
    hash_otp,
    verify_otp_hash,
    OTPConfig,
    VerificationRecord,
    IssueResult,
    VerifyResult,
    ProofToken,
)

# Record Store
from verify_core.store import (
    VerificationRecordStore,
    InMemoryRecordStore,
    SQLAlchemyRecordStore,
    Database,
)

# Delivery
from verify_core.delivery import (
    BaseSMSSender,
    SendResult,
    TwilioSender,
    LogSender,
)

# Services
from verify_core.services import OTPIssuanceService, OTPVerificationService
from verify_core.container import VerifyContainer

# API
from verify_core.api import create_app

__all__ = [
    # Configuration
    "Settings",
    "RateLimitRule",
    "load_settings",
    # Exceptions
    "VerifyCoreError",
    "ConfigurationError",
    "ValidationError",
    "ThrottledError",
    "VerificationFailed",
    "NotFoundError",
    "ExpiredError",
    "MismatchError",
    "LockedError",
    "InfrastructureError",
    "StorageError",
    "DeliveryError",
    "CounterStoreError",
    # Counter Store
    "CounterStore",
    "InMemoryCounterStore",
    "RedisCounterStore",
    # Rate Limiting
    "FixedWindowRateLimiter",
    "IssuanceRateLimitPolicy",
    "RateLimitInfo",
    "RateLimitResult",
    "PolicyDecision",
    # OTP
    "generate_otp",
    "hash_otp",
    "verify_otp_hash",
    "OTPConfig",
    "VerificationRecord",
    "IssueResult",
    "VerifyResult",
    "ProofToken",
    # Record Store
    "VerificationRecordStore",
    "InMemoryRecordStore",
    "SQLAlchemyRecordStore",
    "Database",
    # Delivery
    "BaseSMSSender",
    "SendResult",
    "TwilioSender",
    "LogSender",
    # Services
    "OTPIssuanceService",
    "OTPVerificationService",
    "VerifyContainer",
    # API
    "create_app",
]
