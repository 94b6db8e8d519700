"""Support code for inspecting and corrupting the token table directly."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import (
    BigInteger,
    Column,
    MetaData,
    String,
    Table,
    Text,
    insert,
    select,
    update,
)
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from passwordless_sqlstore.schema import build_token_table

__all__ = [
    "create_unkeyed_table",
    "get_rows",
    "insert_rows",
    "open_engine",
    "set_digest",
]


@asynccontextmanager
async def open_engine(url: str) -> AsyncIterator[AsyncEngine]:
    """Create a database engine separate from the one used by the store."""
    engine = create_async_engine(url)
    try:
        yield engine
    finally:
        await engine.dispose()


async def create_unkeyed_table(url: str, name: str) -> Table:
    """Create a token table without a primary key.

    This allows storing more than one row for a user, which the real schema
    forbids, to test handling of that broken state.
    """
    table = Table(
        name,
        MetaData(),
        Column("uid", String(255), nullable=False),
        Column("token", String(128), nullable=False),
        Column("origin", Text, nullable=True),
        Column("ttl", BigInteger, nullable=False),
    )
    async with open_engine(url) as engine:
        async with engine.begin() as connection:
            await connection.run_sync(table.create)
    return table


async def get_rows(url: str, name: str, uid: str) -> list[dict[str, object]]:
    """Return the raw rows stored for a user."""
    table = build_token_table(name)
    async with open_engine(url) as engine:
        async with engine.begin() as connection:
            stmt = select(table).where(table.c.uid == uid)
            result = await connection.execute(stmt)
            return [dict(r._mapping) for r in result.all()]


async def insert_rows(
    url: str, table: Table, rows: list[dict[str, object]]
) -> None:
    """Insert raw rows into a token table."""
    async with open_engine(url) as engine:
        async with engine.begin() as connection:
            await connection.execute(insert(table), rows)


async def set_digest(url: str, name: str, uid: str, digest: str) -> None:
    """Overwrite the stored digest for a user."""
    table = build_token_table(name)
    async with open_engine(url) as engine:
        async with engine.begin() as connection:
            stmt = update(table).where(table.c.uid == uid).values(token=digest)
            await connection.execute(stmt)
