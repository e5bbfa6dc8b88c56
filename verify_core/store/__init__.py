"""
Verification Record Store
=========================
Durable, phone-keyed storage of outstanding codes.
"""

from .base import VerificationRecordStore
from .memory import InMemoryRecordStore
from .database import Base, Database
from .models import OTPRequest
from .sqlalchemy_store import SQLAlchemyRecordStore

__all__ = [
    "VerificationRecordStore",
    "InMemoryRecordStore",
    "SQLAlchemyRecordStore",
    "Database",
    "Base",
    "OTPRequest",
]
