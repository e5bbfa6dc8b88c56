"""
Log Sender
==========
Non-production delivery that writes the message to the log.
"""

import structlog

from verify_core.config import PRODUCTION

from .base import BaseSMSSender, MessageStatus, SendResult

logger = structlog.get_logger(__name__)


class LogSender(BaseSMSSender):
    """
    Surfaces the code through the log instead of sending an SMS.

    Refuses to exist in a production environment.
    """

    name = "log"

    def __init__(self, environment: str):
        if environment.lower() == PRODUCTION:
            raise ValueError("LogSender cannot be used in production")
        super().__init__()
        self.environment = environment

    async def send_sms(self, to: str, body: str) -> SendResult:
        logger.warning("[DEV] SMS not sent", to=to, body=body, environment=self.environment)
        return SendResult(success=True, status=MessageStatus.SENT)
