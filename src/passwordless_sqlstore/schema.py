"""The token database table.

The name of the table is configurable, so unlike a declarative mapping the
table is built on demand for a given name.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, MetaData, String, Table, Text

from .constants import UID_MAX_LENGTH

__all__ = ["build_token_table"]


def build_token_table(name: str, metadata: MetaData | None = None) -> Table:
    """Build the table holding tokens.

    Parameters
    ----------
    name
        Name of the table.
    metadata
        Metadata collection to attach the table to. A new one is created if
        not given.

    Returns
    -------
    sqlalchemy.Table
        The table, with one row per user holding the hashed token, the
        origin URL if any, and the expiration in milliseconds since the
        epoch.
    """
    if metadata is None:
        metadata = MetaData()
    return Table(
        name,
        metadata,
        Column("uid", String(UID_MAX_LENGTH), primary_key=True),
        Column("token", String(128), nullable=False),
        Column("origin", Text, nullable=True),
        Column("ttl", BigInteger, nullable=False),
    )
