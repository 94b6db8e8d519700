"""Interface shared by token stores for passwordless authentication."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from .models import AuthenticationResult

__all__ = ["TokenStore"]


@runtime_checkable
class TokenStore(Protocol):
    """Operations a token store provides to passwordless authentication.

    Each method checks its arguments when called and raises
    `~passwordless_sqlstore.exceptions.InvalidParametersError` immediately
    if they are invalid. Otherwise it returns an awaitable that completes
    once with the result or raises a subclass of
    `~passwordless_sqlstore.exceptions.TokenStoreError`.
    """

    def authenticate(
        self, token: str, uid: str
    ) -> Awaitable[AuthenticationResult]:
        """Check whether a token is valid for a user."""

    def store_or_update(
        self,
        token: str,
        uid: str,
        ms_to_live: float,
        origin_url: str | None = None,
    ) -> Awaitable[None]:
        """Store the token for a user, replacing any existing token."""

    def invalidate_user(self, uid: str) -> Awaitable[None]:
        """Remove the token for a user, if any."""

    def clear(self) -> Awaitable[None]:
        """Remove all tokens."""

    def length(self) -> Awaitable[int]:
        """Count stored tokens, whether or not they have expired."""
