"""
SQLAlchemy Record Store
=======================
Durable verification records on PostgreSQL (or SQLite for development).
"""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, TypeVar

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from verify_core.exceptions import StorageError
from verify_core.logging_config import mask_phone
from verify_core.otp.models import VerificationRecord
from verify_core.schemas import normalize_phone_key

from .base import VerificationRecordStore
from .database import Database
from .models import OTPRequest

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo; every stored timestamp is UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _match(key: str, hashed_code: Optional[str]) -> list:
    clauses = [OTPRequest.phone_number == key]
    if hashed_code is not None:
        clauses.append(OTPRequest.hashed_code == hashed_code)
    return clauses


def _to_record(row: OTPRequest) -> VerificationRecord:
    return VerificationRecord(
        phone_number=row.phone_number,
        hashed_code=row.hashed_code,
        expires_at=_aware(row.expires_at),
        attempt_count=row.attempt_count,
        last_issued_at=_aware(row.last_issued_at),
    )


class SQLAlchemyRecordStore(VerificationRecordStore):
    """
    Record store backed by the ``otp_requests`` table.

    Upsert is a single ``INSERT .. ON CONFLICT DO UPDATE`` and the attempt
    increment a single ``UPDATE .. RETURNING``, so concurrent requests for
    the same phone number never observe a half-written record.
    """

    name = "sqlalchemy"

    def __init__(self, database: Database, timeout: float = 2.0):
        """
        Args:
            database: Engine/session owner
            timeout: Per-operation timeout in seconds
        """
        if database.dialect not in _INSERTS:
            raise ValueError(f"Unsupported database dialect: {database.dialect}")
        self.db = database
        self.timeout = timeout
        self._insert = _INSERTS[database.dialect]

    async def _run(self, operation: str, phone: str, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def _in_session() -> T:
            async with self.db.session() as session:
                return await fn(session)

        try:
            return await asyncio.wait_for(_in_session(), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error("Record store timed out", operation=operation, phone=mask_phone(phone))
            raise StorageError(f"Record store {operation} timed out", cause=e) from e
        except SQLAlchemyError as e:
            logger.error(
                "Record store failed",
                operation=operation,
                phone=mask_phone(phone),
                error=str(e),
            )
            raise StorageError(f"Record store {operation} failed", cause=e) from e

    async def upsert(self, record: VerificationRecord) -> None:
        key = normalize_phone_key(record.phone_number)
        issued_at = record.last_issued_at or datetime.now(timezone.utc)

        stmt = self._insert(OTPRequest).values(
            phone_number=key,
            hashed_code=record.hashed_code,
            expires_at=record.expires_at,
            attempt_count=record.attempt_count,
            last_issued_at=issued_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[OTPRequest.phone_number],
            set_={
                "hashed_code": stmt.excluded.hashed_code,
                "expires_at": stmt.excluded.expires_at,
                "attempt_count": stmt.excluded.attempt_count,
                "last_issued_at": stmt.excluded.last_issued_at,
            },
        )

        async def _op(session: AsyncSession) -> None:
            await session.execute(stmt)

        await self._run("upsert", key, _op)

    async def find(self, phone_number: str) -> Optional[VerificationRecord]:
        key = normalize_phone_key(phone_number)

        async def _op(session: AsyncSession) -> Optional[VerificationRecord]:
            result = await session.execute(
                select(OTPRequest).where(OTPRequest.phone_number == key)
            )
            row = result.scalar_one_or_none()
            return _to_record(row) if row else None

        return await self._run("find", key, _op)

    async def increment_attempt(
        self, phone_number: str, hashed_code: Optional[str] = None
    ) -> Optional[int]:
        key = normalize_phone_key(phone_number)

        async def _op(session: AsyncSession) -> Optional[int]:
            result = await session.execute(
                update(OTPRequest)
                .where(*_match(key, hashed_code))
                .values(attempt_count=OTPRequest.attempt_count + 1)
                .returning(OTPRequest.attempt_count)
            )
            return result.scalar_one_or_none()

        return await self._run("increment_attempt", key, _op)

    async def delete(self, phone_number: str, hashed_code: Optional[str] = None) -> bool:
        key = normalize_phone_key(phone_number)

        async def _op(session: AsyncSession) -> bool:
            result = await session.execute(
                delete(OTPRequest).where(*_match(key, hashed_code))
            )
            return result.rowcount > 0

        return await self._run("delete", key, _op)

    async def purge_expired(self, now: datetime) -> int:
        async def _op(session: AsyncSession) -> int:
            result = await session.execute(
                delete(OTPRequest).where(OTPRequest.expires_at < now)
            )
            return result.rowcount

        removed = await self._run("purge_expired", "", _op)
        if removed:
            logger.info("Expired verification records purged", count=removed)
        return removed

    async def ping(self) -> bool:
        return await asyncio.wait_for(self.db.ping(), self.timeout)

    async def close(self) -> None:
        await self.db.close()
