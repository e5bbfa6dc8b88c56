"""
In-Memory Record Store
======================
Process-local record store for development and testing.
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, Optional

from verify_core.otp.models import VerificationRecord
from verify_core.schemas import normalize_phone_key

from .base import VerificationRecordStore


class InMemoryRecordStore(VerificationRecordStore):
    """
    Dict-backed record store.

    Operations never await, so each is atomic within one event loop.
    Records are copied in and out so callers cannot mutate stored state.
    """

    name = "memory"

    def __init__(self):
        self._records: Dict[str, VerificationRecord] = {}

    async def upsert(self, record: VerificationRecord) -> None:
        key = normalize_phone_key(record.phone_number)
        self._records[key] = replace(record, phone_number=key)

    async def find(self, phone_number: str) -> Optional[VerificationRecord]:
        record = self._records.get(normalize_phone_key(phone_number))
        return replace(record) if record else None

    def _matching(self, key: str, hashed_code: Optional[str]) -> Optional[VerificationRecord]:
        record = self._records.get(key)
        if record is None or (hashed_code is not None and record.hashed_code != hashed_code):
            return None
        return record

    async def increment_attempt(
        self, phone_number: str, hashed_code: Optional[str] = None
    ) -> Optional[int]:
        record = self._matching(normalize_phone_key(phone_number), hashed_code)
        if record is None:
            return None
        record.attempt_count += 1
        return record.attempt_count

    async def delete(self, phone_number: str, hashed_code: Optional[str] = None) -> bool:
        key = normalize_phone_key(phone_number)
        if self._matching(key, hashed_code) is None:
            return False
        del self._records[key]
        return True

    async def purge_expired(self, now: datetime) -> int:
        expired = [key for key, record in self._records.items() if record.is_expired(now)]
        for key in expired:
            del self._records[key]
        return len(expired)

    async def close(self) -> None:
        self._records.clear()
