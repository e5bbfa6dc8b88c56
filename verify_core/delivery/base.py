"""
Delivery Adapter Base
=====================
Base class for out-of-band code delivery channels.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


class MessageStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    REJECTED = "rejected"


@dataclass
class SendResult:
    """Result of a message send operation."""
    success: bool
    provider_message_id: Optional[str] = None
    status: MessageStatus = MessageStatus.PENDING
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


class BaseSMSSender(ABC):
    """
    Abstract base class for SMS senders.

    Senders report failures through ``SendResult``; raising is reserved for
    programming errors such as sending before ``initialize``.
    """

    name: str = "base"

    def __init__(self):
        self._is_initialized = False

    async def initialize(self) -> None:
        """Initialize the sender (e.g., create HTTP clients)."""
        self._is_initialized = True
        logger.info("SMS sender initialized", provider=self.name)

    async def close(self) -> None:
        """Clean up resources (e.g., close HTTP clients)."""
        self._is_initialized = False
        logger.info("SMS sender closed", provider=self.name)

    @abstractmethod
    async def send_sms(self, to: str, body: str) -> SendResult:
        """
        Send an SMS message.

        Args:
            to: Recipient phone number (E.164 format)
            body: Message content

        Returns:
            SendResult with provider response
        """

    async def health_check(self) -> bool:
        """Check if the provider is reachable."""
        return self._is_initialized
