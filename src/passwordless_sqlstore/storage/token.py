"""Storage for tokens in the database."""

from __future__ import annotations

from sqlalchemy import Table, delete, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TokenRecord

__all__ = ["UPSERT_DIALECTS", "TokenDatabaseStore"]

UPSERT_DIALECTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}
"""Insert constructs, by dialect name, that support ``ON CONFLICT``."""


class TokenDatabaseStore:
    """Stores and manipulates tokens in the database.

    This is the lowest-level storage layer. It does no hashing and no
    expiration checks, and the caller is responsible for managing the
    transaction.

    Parameters
    ----------
    session
        The database session.
    table
        The table holding tokens.
    dialect
        Name of the database dialect, used to choose the upsert construct.
        Must be one of the keys of `UPSERT_DIALECTS`.
    """

    def __init__(
        self, session: AsyncSession, table: Table, dialect: str
    ) -> None:
        self._session = session
        self._table = table
        self._insert = UPSERT_DIALECTS[dialect]

    async def count(self) -> int:
        """Count the stored tokens, including expired ones.

        Returns
        -------
        int
            Number of rows in the token table.
        """
        stmt = select(func.count()).select_from(self._table)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete(self, uid: str) -> bool:
        """Delete the token for a user.

        Parameters
        ----------
        uid
            Identifier of the user.

        Returns
        -------
        bool
            Whether a token was found to be deleted.
        """
        stmt = delete(self._table).where(self._table.c.uid == uid)
        result = await self._session.execute(stmt)
        return result.rowcount >= 1

    async def delete_all(self) -> int:
        """Delete all tokens.

        Returns
        -------
        int
            Number of deleted tokens.
        """
        result = await self._session.execute(delete(self._table))
        return result.rowcount

    async def get_for_user(self, uid: str) -> list[TokenRecord]:
        """Retrieve the stored tokens for a user.

        The primary key guarantees at most one row per user, but at most two
        rows are returned so that the caller can detect a violation of that
        invariant.

        Parameters
        ----------
        uid
            Identifier of the user.

        Returns
        -------
        list of TokenRecord
            The stored tokens, normally either empty or of length one.
        """
        stmt = select(self._table).where(self._table.c.uid == uid).limit(2)
        result = await self._session.execute(stmt)
        return [TokenRecord.model_validate(r) for r in result.all()]

    async def upsert(self, record: TokenRecord) -> None:
        """Store a token, replacing any existing token for the same user.

        This is a single atomic statement, so concurrent writers for the same
        user leave exactly one of their rows behind.

        Parameters
        ----------
        record
            Token to store.
        """
        stmt = self._insert(self._table).values(
            uid=record.uid,
            token=record.token,
            origin=record.origin,
            ttl=record.ttl,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._table.c.uid],
            set_={
                "token": stmt.excluded.token,
                "origin": stmt.excluded.origin,
                "ttl": stmt.excluded.ttl,
            },
        )
        await self._session.execute(stmt)
