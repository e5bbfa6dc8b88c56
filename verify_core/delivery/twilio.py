"""
Twilio SMS Sender
=================
Production delivery through the Twilio Messages API.
"""

from base64 import b64encode
from typing import Optional

import httpx
import structlog

from verify_core.logging_config import mask_phone

from .base import BaseSMSSender, MessageStatus, SendResult

logger = structlog.get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSender(BaseSMSSender):
    """Twilio SMS sender over httpx."""

    name = "twilio"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: Optional[str] = None,
        messaging_service_sid: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            account_sid: Twilio account SID ("ACxxx")
            auth_token: Twilio auth token
            from_number: Sender number, used when no messaging service is set
            messaging_service_sid: Messaging service SID ("MGxxx"), preferred
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests)
        """
        super().__init__()
        if not from_number and not messaging_service_sid:
            raise ValueError("Twilio sender needs from_number or messaging_service_sid")
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.messaging_service_sid = messaging_service_sid
        self.timeout = timeout
        self.base_url = f"{TWILIO_API_BASE}/Accounts/{account_sid}"
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create HTTP client with auth."""
        auth = b64encode(f"{self.account_sid}:{self.auth_token}".encode()).decode()
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"Basic {auth}"},
            timeout=self.timeout,
            transport=self._transport,
        )
        await super().initialize()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        await super().close()

    async def send_sms(self, to: str, body: str) -> SendResult:
        """Send SMS via Twilio."""
        if not self._client:
            raise RuntimeError("Sender not initialized")

        payload = {"To": to, "Body": body}
        if self.messaging_service_sid:
            payload["MessagingServiceSid"] = self.messaging_service_sid
        else:
            payload["From"] = self.from_number

        try:
            response = await self._client.post(
                f"{self.base_url}/Messages.json",
                data=payload,
            )
        except httpx.HTTPError as e:
            logger.error("Twilio send failed", to=mask_phone(to), error=str(e))
            return SendResult(
                success=False,
                status=MessageStatus.FAILED,
                error_message=str(e),
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code == 201:
            return SendResult(
                success=True,
                provider_message_id=data.get("sid"),
                status=self._map_status(data.get("status", "")),
                raw_response=data,
            )

        logger.warning(
            "Twilio rejected message",
            to=mask_phone(to),
            status_code=response.status_code,
            error_code=data.get("code"),
        )
        return SendResult(
            success=False,
            status=MessageStatus.FAILED,
            error_code=str(data.get("code", response.status_code)),
            error_message=data.get("message", "Unknown error"),
            raw_response=data,
        )

    def _map_status(self, twilio_status: str) -> MessageStatus:
        """Map Twilio status to internal status."""
        mapping = {
            "queued": MessageStatus.PENDING,
            "accepted": MessageStatus.PENDING,
            "sending": MessageStatus.PENDING,
            "sent": MessageStatus.SENT,
            "delivered": MessageStatus.DELIVERED,
            "undelivered": MessageStatus.FAILED,
            "failed": MessageStatus.FAILED,
        }
        return mapping.get(twilio_status.lower(), MessageStatus.PENDING)

    async def health_check(self) -> bool:
        """Check Twilio API availability."""
        if not self._client:
            return False

        try:
            response = await self._client.get(f"{self.base_url}.json")
            return response.status_code == 200
        except httpx.HTTPError:
            return False
