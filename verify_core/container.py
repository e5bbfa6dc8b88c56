"""
Service Container
=================
Composition root: builds every collaborator once and owns their lifecycle.
"""

import structlog

from verify_core.config import Settings
from verify_core.counter_store import CounterStore, RedisCounterStore
from verify_core.delivery import BaseSMSSender, LogSender, TwilioSender
from verify_core.otp.models import OTPConfig
from verify_core.otp.proof_token import ProofToken
from verify_core.rate_limit import FixedWindowRateLimiter, IssuanceRateLimitPolicy
from verify_core.services import OTPIssuanceService, OTPVerificationService
from verify_core.store import Database, SQLAlchemyRecordStore, VerificationRecordStore

logger = structlog.get_logger(__name__)


def build_sender(settings: Settings) -> BaseSMSSender:
    """Twilio in production; the log side channel everywhere else."""
    if settings.is_production:
        return TwilioSender(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_phone_number,
            messaging_service_sid=settings.twilio_messaging_service_sid,
            timeout=settings.delivery_timeout,
        )
    return LogSender(settings.environment)


class VerifyContainer:
    """
    Holds the counter store, record store and sender, and the services
    wired on top of them.

    Usage:
        container = VerifyContainer.from_settings(load_settings())
        await container.startup()
        ...
        await container.shutdown()
    """

    def __init__(
        self,
        settings: Settings,
        counter_store: CounterStore,
        record_store: VerificationRecordStore,
        sender: BaseSMSSender,
    ):
        self.settings = settings
        self.counter_store = counter_store
        self.record_store = record_store
        self.sender = sender

        otp_config = OTPConfig(
            length=settings.otp_length,
            ttl_seconds=settings.otp_ttl_seconds,
            max_attempts=settings.otp_max_attempts,
        )
        limiter = FixedWindowRateLimiter(counter_store, fail_open=settings.rate_limit_fail_open)
        policy = IssuanceRateLimitPolicy(
            limiter,
            ip_rule=settings.ip_limit,
            phone_rule=settings.phone_limit,
            daily_rule=settings.daily_phone_limit,
        )

        self.issuance = OTPIssuanceService(
            store=record_store,
            policy=policy,
            sender=sender,
            secret=settings.otp_secret,
            config=otp_config,
            delivery_timeout=settings.delivery_timeout,
        )
        self.verification = OTPVerificationService(
            store=record_store,
            secret=settings.otp_secret,
            config=otp_config,
            proof_token=ProofToken(settings.otp_secret),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "VerifyContainer":
        """Build production collaborators from settings."""
        database = Database(settings.database_url)
        return cls(
            settings=settings,
            counter_store=RedisCounterStore.from_url(
                settings.redis_url, timeout=settings.counter_store_timeout
            ),
            record_store=SQLAlchemyRecordStore(database, timeout=settings.record_store_timeout),
            sender=build_sender(settings),
        )

    async def startup(self) -> None:
        await self.sender.initialize()
        logger.info(
            "Verification container started",
            environment=self.settings.environment,
            sender=self.sender.name,
            record_store=self.record_store.name,
        )

    async def shutdown(self) -> None:
        await self.sender.close()
        await self.counter_store.close()
        await self.record_store.close()
        logger.info("Verification container stopped")
