"""Exceptions for the passwordless token store."""

from __future__ import annotations

__all__ = [
    "DatabaseError",
    "HashError",
    "InvalidParametersError",
    "TokenStoreError",
]


class InvalidParametersError(ValueError):
    """A store operation was called with missing or invalid arguments.

    This indicates a programming error in the caller, so it is raised as soon
    as the method is called rather than when the returned awaitable is
    awaited.
    """


class TokenStoreError(Exception):
    """Base class for runtime failures of a token store operation."""


class DatabaseError(TokenStoreError):
    """The underlying database failed to execute a query."""


class HashError(TokenStoreError):
    """Hashing or verifying a token failed.

    A token that simply doesn't match the stored digest is not an error. This
    is raised only when the hashing library itself reports a failure, such as
    a stored digest that isn't a valid hash.
    """
