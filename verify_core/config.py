"""
Configuration
=============
Environment-driven settings, validated once at startup.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from verify_core.exceptions import ConfigurationError

PRODUCTION = "production"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class RateLimitRule:
    """A named fixed-window quota."""
    name: str
    limit: int
    window_seconds: int


@dataclass
class Settings:
    """Runtime settings for the verification service."""
    otp_secret: str
    redis_url: str
    database_url: str
    environment: str = "development"

    # Delivery
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone_number: Optional[str] = None
    twilio_messaging_service_sid: Optional[str] = None

    # OTP policy
    otp_length: int = 6
    otp_ttl_seconds: int = 120  # 2 minutes
    otp_max_attempts: int = 5

    # Rate limits
    ip_limit: RateLimitRule = field(
        default_factory=lambda: RateLimitRule("ip", 5, 600)
    )
    phone_limit: RateLimitRule = field(
        default_factory=lambda: RateLimitRule("phone", 2, 600)
    )
    daily_phone_limit: RateLimitRule = field(
        default_factory=lambda: RateLimitRule("phone_daily", 12, 86400)
    )
    rate_limit_fail_open: bool = False

    # Timeouts (seconds)
    counter_store_timeout: float = 1.0
    record_store_timeout: float = 2.0
    delivery_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    service_name: str = "verify-core"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION


def _get_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _get_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _get_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Missing required values are collected and reported together so that a
    misconfigured deployment fails once, at startup, with the full list.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: if a required value is absent or malformed
    """
    environ = os.environ if environ is None else environ
    environment = environ.get("ENVIRONMENT", "development")

    required = ["OTP_SECRET", "REDIS_URL", "DATABASE_URL"]
    if environment.lower() == PRODUCTION:
        required += ["TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN"]

    missing: List[str] = [name for name in required if not environ.get(name)]

    if (
        environment.lower() == PRODUCTION
        and not environ.get("TWILIO_PHONE_NUMBER")
        and not environ.get("TWILIO_MESSAGING_SERVICE_SID")
    ):
        missing.append("TWILIO_PHONE_NUMBER|TWILIO_MESSAGING_SERVICE_SID")

    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}",
            missing=missing,
        )

    settings = Settings(
        otp_secret=environ["OTP_SECRET"],
        redis_url=environ["REDIS_URL"],
        database_url=environ["DATABASE_URL"],
        environment=environment,
        twilio_account_sid=environ.get("TWILIO_ACCOUNT_SID"),
        twilio_auth_token=environ.get("TWILIO_AUTH_TOKEN"),
        twilio_phone_number=environ.get("TWILIO_PHONE_NUMBER"),
        twilio_messaging_service_sid=environ.get("TWILIO_MESSAGING_SERVICE_SID"),
        otp_length=_get_int(environ, "OTP_LENGTH", 6),
        otp_ttl_seconds=_get_int(environ, "OTP_TTL_SECONDS", 120),
        otp_max_attempts=_get_int(environ, "OTP_MAX_ATTEMPTS", 5),
        ip_limit=RateLimitRule(
            "ip",
            _get_int(environ, "RATE_LIMIT_IP_COUNT", 5),
            _get_int(environ, "RATE_LIMIT_IP_WINDOW", 600),
        ),
        phone_limit=RateLimitRule(
            "phone",
            _get_int(environ, "RATE_LIMIT_PHONE_COUNT", 2),
            _get_int(environ, "RATE_LIMIT_PHONE_WINDOW", 600),
        ),
        daily_phone_limit=RateLimitRule(
            "phone_daily",
            _get_int(environ, "RATE_LIMIT_DAILY_COUNT", 12),
            _get_int(environ, "RATE_LIMIT_DAILY_WINDOW", 86400),
        ),
        rate_limit_fail_open=_get_bool(environ, "RATE_LIMIT_FAIL_OPEN", False),
        counter_store_timeout=_get_float(environ, "COUNTER_STORE_TIMEOUT", 1.0),
        record_store_timeout=_get_float(environ, "RECORD_STORE_TIMEOUT", 2.0),
        delivery_timeout=_get_float(environ, "DELIVERY_TIMEOUT", 10.0),
        log_level=environ.get("LOG_LEVEL", "INFO"),
        log_json=_get_bool(environ, "LOG_JSON", True),
        service_name=environ.get("SERVICE_NAME", "verify-core"),
    )

    if not 4 <= settings.otp_length <= 10:
        raise ConfigurationError("OTP_LENGTH must be between 4 and 10")
    if settings.otp_max_attempts < 1:
        raise ConfigurationError("OTP_MAX_ATTEMPTS must be at least 1")

    return settings
