"""
Code Delivery
=============
SMS senders used to deliver verification codes.
"""

from .base import BaseSMSSender, SendResult, MessageStatus
from .twilio import TwilioSender
from .log_sender import LogSender

__all__ = [
    "BaseSMSSender",
    "SendResult",
    "MessageStatus",
    "TwilioSender",
    "LogSender",
]
