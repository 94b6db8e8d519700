"""One-way hashing of tokens before storage."""

from __future__ import annotations

import asyncio
import base64
import hashlib
from typing import Protocol

import bcrypt

from .constants import BCRYPT_ROUNDS
from .exceptions import HashError

__all__ = [
    "BcryptHasher",
    "TokenHasher",
]


class TokenHasher(Protocol):
    """Interface for one-way token hashing.

    Implementations must salt every hash with fresh randomness, so hashing
    the same token twice must produce two different digests that both
    verify.
    """

    async def hash(self, token: str) -> str:
        """Hash a token for storage."""

    async def verify(self, token: str, digest: str) -> bool:
        """Check whether a token matches a stored digest."""


class BcryptHasher:
    """Hash tokens with bcrypt.

    bcrypt only looks at the first 72 bytes of its input, and recent versions
    refuse anything longer, so tokens are first reduced to the base64 encoding
    of their SHA-256 digest. bcrypt is deliberately slow, so the work is done
    in a worker thread to avoid blocking the event loop.

    Parameters
    ----------
    rounds
        bcrypt cost factor (log2 of the number of rounds).
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    async def hash(self, token: str) -> str:
        """Hash a token with a freshly generated salt.

        Parameters
        ----------
        token
            Plaintext token.

        Returns
        -------
        str
            bcrypt digest, including the salt and cost factor.

        Raises
        ------
        HashError
            Raised if bcrypt rejects the token.
        """
        try:
            digest = await asyncio.to_thread(
                bcrypt.hashpw, _prehash(token), bcrypt.gensalt(self._rounds)
            )
        except ValueError as e:
            raise HashError(f"Cannot hash token: {e!s}") from e
        return digest.decode()

    async def verify(self, token: str, digest: str) -> bool:
        """Check a token against a stored digest.

        Parameters
        ----------
        token
            Plaintext token to check.
        digest
            Stored bcrypt digest.

        Returns
        -------
        bool
            `True` if the token matches the digest, `False` otherwise.

        Raises
        ------
        HashError
            Raised if the stored digest is not a valid bcrypt hash or bcrypt
            otherwise cannot perform the comparison.
        """
        try:
            return await asyncio.to_thread(
                bcrypt.checkpw, _prehash(token), digest.encode()
            )
        except ValueError as e:
            raise HashError(f"Cannot verify token: {e!s}") from e


def _prehash(token: str) -> bytes:
    """Reduce a token of any length to 44 bytes of bcrypt input."""
    return base64.b64encode(hashlib.sha256(token.encode()).digest())
