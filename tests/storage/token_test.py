"""Tests for the token storage layer."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from passwordless_sqlstore.models import TokenRecord
from passwordless_sqlstore.schema import build_token_table
from passwordless_sqlstore.storage.token import TokenDatabaseStore

from ..support.database import open_engine


@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncIterator[AsyncEngine]:
    async with open_engine(database_url) as engine:
        yield engine


@pytest.mark.asyncio
async def test_token_store(engine: AsyncEngine) -> None:
    table = build_token_table("passwordless", MetaData())
    async with engine.begin() as connection:
        await connection.run_sync(table.create)
    sessionmaker = async_sessionmaker(engine)
    first = TokenRecord(uid="u1", token="digest-1", origin=None, ttl=1000)
    second = TokenRecord(uid="u2", token="digest-2", origin="/a", ttl=2000)

    async with sessionmaker() as session, session.begin():
        storage = TokenDatabaseStore(session, table, "sqlite")
        assert await storage.count() == 0
        assert await storage.get_for_user("u1") == []
        await storage.upsert(first)
        await storage.upsert(second)
        assert await storage.count() == 2
        assert await storage.get_for_user("u1") == [first]
        assert await storage.get_for_user("u2") == [second]

    replacement = TokenRecord(uid="u1", token="digest-3", origin="/b", ttl=3)
    async with sessionmaker() as session, session.begin():
        storage = TokenDatabaseStore(session, table, "sqlite")
        await storage.upsert(replacement)
        assert await storage.count() == 2
        assert await storage.get_for_user("u1") == [replacement]

    async with sessionmaker() as session, session.begin():
        storage = TokenDatabaseStore(session, table, "sqlite")
        assert await storage.delete("u1")
        assert not await storage.delete("u1")
        assert await storage.count() == 1
        assert await storage.delete_all() == 1
        assert await storage.count() == 0
        assert await storage.delete_all() == 0


def test_record_expiration() -> None:
    record = TokenRecord(uid="u1", token="digest", ttl=1000)
    assert not record.is_expired(999)
    assert not record.is_expired(1000)
    assert record.is_expired(1001)
