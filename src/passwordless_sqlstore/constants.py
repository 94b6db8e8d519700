"""Constants for the passwordless token store."""

__all__ = [
    "BCRYPT_ROUNDS",
    "CONFIG_PATH",
    "DEFAULT_POOL_SIZE",
    "DEFAULT_TABLE",
    "LOGGER_NAME",
    "MAX_TIMESTAMP_MS",
    "TABLE_NAME_REGEX",
    "UID_MAX_LENGTH",
]

BCRYPT_ROUNDS = 10
"""Cost factor used when hashing tokens with bcrypt."""

CONFIG_PATH = "/etc/passwordless/passwordless.yaml"
"""Default configuration path for the administrative command-line tool."""

DEFAULT_POOL_SIZE = 10
"""Default maximum number of pooled database connections."""

DEFAULT_TABLE = "passwordless"
"""Default name of the table holding tokens."""

LOGGER_NAME = "passwordless_sqlstore"
"""Name of the structlog logger used by the store."""

MAX_TIMESTAMP_MS = 2**63 - 1
"""Latest expiration time that fits in the 64-bit ttl column."""

TABLE_NAME_REGEX = "^[A-Za-z_][A-Za-z0-9_]{0,62}$"
"""Regex matching valid table names.

The table name is supplied by configuration and becomes part of generated
SQL, so restrict it to plain identifiers that never need quoting.
"""

UID_MAX_LENGTH = 255
"""Maximum length of a user identifier."""
