"""
Record Store Interface
======================
Abstract base class for verification record storage.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from verify_core.otp.models import VerificationRecord


class VerificationRecordStore(ABC):
    """
    Phone-keyed storage of the current outstanding code.

    Implementations key every operation by the normalized phone number,
    replace records wholesale on upsert, and increment attempts atomically.
    """

    name: str = "base"

    @abstractmethod
    async def upsert(self, record: VerificationRecord) -> None:
        """Store ``record``, fully replacing any existing one for the phone number."""

    @abstractmethod
    async def find(self, phone_number: str) -> Optional[VerificationRecord]:
        """Return the record for ``phone_number`` or None."""

    @abstractmethod
    async def increment_attempt(
        self, phone_number: str, hashed_code: Optional[str] = None
    ) -> Optional[int]:
        """
        Atomically increment the failed-attempt count.

        Args:
            phone_number: Record key
            hashed_code: Only touch the record if it still holds this digest

        Returns:
            The new count, or None if no matching record exists
        """

    @abstractmethod
    async def delete(self, phone_number: str, hashed_code: Optional[str] = None) -> bool:
        """
        Delete the record, optionally only if it still holds ``hashed_code``.

        Returns:
            True if a record was removed
        """

    async def purge_expired(self, now: datetime) -> int:
        """Remove records past expiry. Returns the number removed."""
        return 0

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        """Release resources."""
