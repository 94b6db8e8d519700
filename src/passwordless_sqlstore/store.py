"""Token store for passwordless authentication backed by a SQL database."""

from __future__ import annotations

import math
from collections.abc import AsyncIterator, Awaitable, Mapping
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Any, Self

import structlog
from pydantic import ValidationError
from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from structlog.stdlib import BoundLogger

from .config import StoreOptions
from .constants import LOGGER_NAME
from .database import create_token_engine, initialize_token_database
from .exceptions import DatabaseError, InvalidParametersError
from .hashing import BcryptHasher, TokenHasher
from .models import AuthenticationResult, TokenRecord
from .schema import build_token_table
from .storage.token import TokenDatabaseStore
from .util import current_timestamp_ms, require_duration, require_string

__all__ = ["SQLTokenStore"]


class SQLTokenStore:
    """Stores one hashed, expiring token per user in a SQL database.

    Only a bcrypt hash of each token is stored. A user has at most one token
    at a time: storing a new token replaces the old one. Expired tokens are
    kept until replaced or invalidated but never authenticate.

    Every public data method checks its arguments synchronously, raising
    `~passwordless_sqlstore.exceptions.InvalidParametersError` for invalid
    ones, and otherwise returns an awaitable. Database and hashing failures
    are raised when that awaitable is awaited, as subclasses of
    `~passwordless_sqlstore.exceptions.TokenStoreError`.

    Parameters
    ----------
    connection
        SQLAlchemy URL of the database.
    options
        Store options, either as a `~passwordless_sqlstore.config.StoreOptions`
        or as a mapping using camel-case or snake-case keys. Unknown keys are
        ignored.
    hasher
        One-way hasher for tokens. Defaults to bcrypt.
    logger
        Logger to use. Defaults to the ``passwordless_sqlstore`` logger.

    Raises
    ------
    InvalidParametersError
        Raised if the connection URL is missing or unusable or if the options
        are invalid.
    """

    def __init__(
        self,
        connection: str | None,
        options: StoreOptions | Mapping[str, Any] | None = None,
        *,
        hasher: TokenHasher | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        if not connection:
            raise InvalidParametersError("Connection string is missing")
        if not isinstance(options, StoreOptions):
            try:
                options = StoreOptions.model_validate(dict(options or {}))
            except ValidationError as e:
                msg = f"Invalid token store options: {e!s}"
                raise InvalidParametersError(msg) from e

        self._options = options
        self._table = build_token_table(options.table, MetaData())
        self._engine = create_token_engine(connection, options)
        self._dialect = self._engine.dialect.name
        self._sessionmaker = async_sessionmaker(self._engine)
        self._hasher = hasher or BcryptHasher()
        if not logger:
            logger = structlog.get_logger(LOGGER_NAME)
        self._logger = logger.bind(table=options.table)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    @property
    def options(self) -> StoreOptions:
        """Options the store was created with."""
        return self._options

    def authenticate(
        self, token: str, uid: str
    ) -> Awaitable[AuthenticationResult]:
        """Check whether a token is valid for a user.

        Parameters
        ----------
        token
            Token presented by the user.
        uid
            Identifier of the user.

        Returns
        -------
        AuthenticationResult
            Valid with the stored origin URL (or the empty string if none was
            stored) if the token matches the unexpired token of that user.
            Otherwise invalid with an empty origin, without distinguishing
            between unknown users, expired tokens, and wrong tokens.

        Raises
        ------
        DatabaseError
            Raised if the database query fails.
        HashError
            Raised if the stored digest could not be checked.
        InvalidParametersError
            Raised immediately if ``token`` or ``uid`` is missing.
        """
        require_string("authenticate", token, uid)
        return self._authenticate(token, uid)

    def store_or_update(
        self,
        token: str,
        uid: str,
        ms_to_live: float,
        origin_url: str | None = None,
    ) -> Awaitable[None]:
        """Store the token for a user, replacing any existing token.

        Parameters
        ----------
        token
            Token to store. Only its hash is stored.
        uid
            Identifier of the user.
        ms_to_live
            Lifetime of the token in milliseconds.
        origin_url
            URL originally requested by the user, if any.

        Raises
        ------
        DatabaseError
            Raised if the token could not be stored.
        HashError
            Raised if the token could not be hashed.
        InvalidParametersError
            Raised immediately if ``token`` or ``uid`` is missing or
            ``ms_to_live`` is not a positive number.
        """
        require_string("store_or_update", token, uid)
        require_duration("store_or_update", ms_to_live)
        if origin_url is not None and not isinstance(origin_url, str):
            msg = "TokenStore:store_or_update called with invalid parameters"
            raise InvalidParametersError(msg)
        return self._store_or_update(token, uid, ms_to_live, origin_url)

    def invalidate_user(self, uid: str) -> Awaitable[None]:
        """Remove the token for a user.

        Removing the token of a user who has none is not an error.

        Parameters
        ----------
        uid
            Identifier of the user.

        Raises
        ------
        DatabaseError
            Raised if the token could not be deleted.
        InvalidParametersError
            Raised immediately if ``uid`` is missing.
        """
        require_string("invalidate_user", uid)
        return self._invalidate_user(uid)

    def clear(self) -> Awaitable[None]:
        """Remove all tokens.

        Raises
        ------
        DatabaseError
            Raised if the tokens could not be deleted.
        """
        return self._clear()

    def length(self) -> Awaitable[int]:
        """Count stored tokens, including expired ones.

        Returns
        -------
        int
            Number of stored tokens.

        Raises
        ------
        DatabaseError
            Raised if the tokens could not be counted.
        """
        return self._length()

    async def initialize(self, *, reset: bool = False) -> None:
        """Create the token table if it doesn't exist.

        Parameters
        ----------
        reset
            If set to `True`, drop the table first, deleting all tokens.

        Raises
        ------
        DatabaseError
            Raised if the table could not be created.
        """
        self._logger.debug("Initializing token table", reset=reset)
        try:
            await initialize_token_database(
                self._engine, self._table, self._logger, reset=reset
            )
        except (SQLAlchemyError, OSError) as e:
            msg = f"Cannot initialize token table: {e!s}"
            raise DatabaseError(msg) from e

    async def disconnect(self) -> None:
        """Close all connections to the database.

        The store must not be used afterwards.
        """
        await self._engine.dispose()

    async def _authenticate(
        self, token: str, uid: str
    ) -> AuthenticationResult:
        async with self._storage("retrieve token") as storage:
            records = await storage.get_for_user(uid)
        if len(records) != 1:
            if records:
                self._logger.warning("Multiple tokens found for user", uid=uid)
            return AuthenticationResult.invalid()
        record = records[0]
        if record.is_expired(current_timestamp_ms()):
            return AuthenticationResult.invalid()
        if not await self._hasher.verify(token, record.token):
            return AuthenticationResult.invalid()
        return AuthenticationResult(valid=True, origin=record.origin or "")

    async def _clear(self) -> None:
        async with self._storage("delete tokens") as storage:
            count = await storage.delete_all()
        self._logger.debug("Deleted all tokens", count=count)

    async def _invalidate_user(self, uid: str) -> None:
        async with self._storage("delete token") as storage:
            found = await storage.delete(uid)
        if found:
            self._logger.debug("Invalidated token", uid=uid)

    async def _length(self) -> int:
        async with self._storage("count tokens") as storage:
            return await storage.count()

    async def _store_or_update(
        self,
        token: str,
        uid: str,
        ms_to_live: float,
        origin_url: str | None,
    ) -> None:
        digest = await self._hasher.hash(token)
        record = TokenRecord(
            uid=uid,
            token=digest,
            origin=origin_url,
            ttl=current_timestamp_ms() + math.ceil(ms_to_live),
        )
        async with self._storage("store token") as storage:
            await storage.upsert(record)
        self._logger.debug("Stored token", uid=uid, expires=record.ttl)

    @asynccontextmanager
    async def _storage(
        self, action: str
    ) -> AsyncIterator[TokenDatabaseStore]:
        """Run storage operations in a transaction.

        Parameters
        ----------
        action
            Description of the operation, for the error message.

        Yields
        ------
        TokenDatabaseStore
            Storage bound to a new session inside a transaction, committed
            when the context manager exits.

        Raises
        ------
        DatabaseError
            Raised if the database fails during the transaction.
        """
        try:
            async with self._sessionmaker() as session, session.begin():
                yield TokenDatabaseStore(session, self._table, self._dialect)
        except (SQLAlchemyError, OSError, OverflowError) as e:
            raise DatabaseError(f"Cannot {action}: {e!s}") from e
