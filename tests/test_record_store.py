"""
Tests for the verification record stores.

Every contract test runs against both the in-memory store and the
SQLAlchemy store on SQLite.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from verify_core.exceptions import StorageError
from verify_core.otp.models import VerificationRecord
from verify_core.store import Database, InMemoryRecordStore, SQLAlchemyRecordStore

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _record(phone="+14155551234", digest="a" * 64, attempts=0, ttl=120, issued=NOW):
    return VerificationRecord(
        phone_number=phone,
        hashed_code=digest,
        expires_at=issued + timedelta(seconds=ttl),
        attempt_count=attempts,
        last_issued_at=issued,
    )


@pytest_asyncio.fixture(params=["memory", "sqlalchemy"])
async def store(request, tmp_path):
    if request.param == "memory":
        store = InMemoryRecordStore()
        yield store
        await store.close()
    else:
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'otp.db'}")
        await db.create_tables()
        store = SQLAlchemyRecordStore(db)
        yield store
        await store.close()


class TestRecordStoreContract:
    """Behavior shared by every record store."""

    @pytest.mark.asyncio
    async def test_find_missing(self, store):
        assert await store.find("+14155551234") is None

    @pytest.mark.asyncio
    async def test_upsert_and_find(self, store):
        await store.upsert(_record())

        found = await store.find("+14155551234")

        assert found is not None
        assert found.hashed_code == "a" * 64
        assert found.attempt_count == 0
        assert found.expires_at == NOW + timedelta(seconds=120)
        assert found.last_issued_at == NOW

    @pytest.mark.asyncio
    async def test_upsert_replaces_entirely(self, store):
        await store.upsert(_record(digest="a" * 64))
        await store.increment_attempt("+14155551234")
        await store.increment_attempt("+14155551234")

        later = NOW + timedelta(seconds=30)
        await store.upsert(_record(digest="b" * 64, issued=later))

        found = await store.find("+14155551234")
        assert found.hashed_code == "b" * 64
        assert found.attempt_count == 0
        assert found.last_issued_at == later
        assert found.expires_at == later + timedelta(seconds=120)

    @pytest.mark.asyncio
    async def test_increment_attempt(self, store):
        await store.upsert(_record())

        assert await store.increment_attempt("+14155551234") == 1
        assert await store.increment_attempt("+14155551234") == 2
        assert (await store.find("+14155551234")).attempt_count == 2

    @pytest.mark.asyncio
    async def test_increment_missing(self, store):
        assert await store.increment_attempt("+14155551234") is None

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.upsert(_record())

        assert await store.delete("+14155551234") is True
        assert await store.find("+14155551234") is None
        assert await store.delete("+14155551234") is False

    @pytest.mark.asyncio
    async def test_guarded_writes_skip_replaced_record(self, store):
        await store.upsert(_record(digest="b" * 64))

        assert await store.increment_attempt("+14155551234", hashed_code="a" * 64) is None
        assert await store.delete("+14155551234", hashed_code="a" * 64) is False

        found = await store.find("+14155551234")
        assert found.hashed_code == "b" * 64
        assert found.attempt_count == 0

    @pytest.mark.asyncio
    async def test_guarded_writes_apply_to_matching_record(self, store):
        await store.upsert(_record(digest="a" * 64))

        assert await store.increment_attempt("+14155551234", hashed_code="a" * 64) == 1
        assert await store.delete("+14155551234", hashed_code="a" * 64) is True
        assert await store.find("+14155551234") is None

    @pytest.mark.asyncio
    async def test_keys_are_normalized(self, store):
        await store.upsert(_record(phone="+1 (415) 555-1234"))

        found = await store.find("+14155551234")

        assert found is not None
        assert found.phone_number == "+14155551234"

    @pytest.mark.asyncio
    async def test_records_are_per_phone(self, store):
        await store.upsert(_record(phone="+14155551234", digest="a" * 64))
        await store.upsert(_record(phone="+14155550000", digest="b" * 64))

        await store.delete("+14155551234")

        assert (await store.find("+14155550000")).hashed_code == "b" * 64

    @pytest.mark.asyncio
    async def test_purge_expired(self, store):
        await store.upsert(_record(phone="+14155551234", ttl=60))
        await store.upsert(_record(phone="+14155550000", ttl=600))

        removed = await store.purge_expired(NOW + timedelta(seconds=120))

        assert removed == 1
        assert await store.find("+14155551234") is None
        assert await store.find("+14155550000") is not None


class TestSQLAlchemyRecordStore:
    """SQLAlchemy-specific failure handling."""

    @pytest.mark.asyncio
    async def test_missing_table_raises_storage_error(self, tmp_path):
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        store = SQLAlchemyRecordStore(db)

        try:
            with pytest.raises(StorageError):
                await store.upsert(_record())
            with pytest.raises(StorageError):
                await store.find("+14155551234")
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_ping(self, tmp_path):
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'otp.db'}")
        store = SQLAlchemyRecordStore(db)

        try:
            assert await store.ping() is True
        finally:
            await store.close()
