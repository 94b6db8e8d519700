"""Database utility functions for the token store."""

from __future__ import annotations

from safir.database import create_database_engine, initialize_database
from sqlalchemy import Table
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool
from structlog.stdlib import BoundLogger

from .config import StoreOptions
from .exceptions import InvalidParametersError
from .storage.token import UPSERT_DIALECTS

__all__ = [
    "create_token_engine",
    "initialize_token_database",
]


def create_token_engine(url: str, options: StoreOptions) -> AsyncEngine:
    """Create the database engine for a token store.

    PostgreSQL engines are created through Safir so that plain
    ``postgresql://`` URLs use the asyncpg driver and a separately configured
    password is merged into the URL. SQLite engines must name an async
    driver (``sqlite+aiosqlite://``) and a file, since every pooled
    connection to an in-memory database would see a different database.

    Parameters
    ----------
    url
        SQLAlchemy URL of the database.
    options
        Store options, providing the pool size and optional password.

    Returns
    -------
    sqlalchemy.ext.asyncio.AsyncEngine
        Engine with a connection pool of the configured size.

    Raises
    ------
    InvalidParametersError
        Raised if the URL cannot be parsed or names an unsupported database.
    """
    try:
        backend = make_url(url).get_backend_name()
    except ArgumentError as e:
        raise InvalidParametersError(f"Invalid database URL: {e!s}") from e
    if backend not in UPSERT_DIALECTS:
        msg = f"Unsupported database {backend}, must be one of " + ", ".join(
            sorted(UPSERT_DIALECTS)
        )
        raise InvalidParametersError(msg)
    if backend == "postgresql":
        return create_database_engine(
            url, options.database_password, pool_size=options.pool_size
        )
    return create_async_engine(
        url, poolclass=AsyncAdaptedQueuePool, pool_size=options.pool_size
    )


async def initialize_token_database(
    engine: AsyncEngine,
    table: Table,
    logger: BoundLogger,
    *,
    reset: bool = False,
) -> None:
    """Create the token table if it does not already exist.

    Parameters
    ----------
    engine
        Database engine to use.
    table
        Token table to create.
    logger
        Logger to use for status reporting.
    reset
        If set to `True`, drop the token table first, deleting all tokens.
    """
    await initialize_database(
        engine, logger, schema=table.metadata, reset=reset
    )
