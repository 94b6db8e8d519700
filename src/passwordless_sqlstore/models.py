"""Representation of stored tokens and authentication results."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "AuthenticationResult",
    "TokenRecord",
]


@dataclass(frozen=True)
class AuthenticationResult:
    """Result of checking a token for a user.

    Absent, expired, and mismatched tokens all produce the same invalid
    result so that callers cannot tell them apart.
    """

    valid: bool
    """Whether the token is valid for that user."""

    origin: str = ""
    """URL originally requested when the token was issued.

    Always the empty string if the token is not valid or if no URL was
    recorded.
    """

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def invalid(cls) -> AuthenticationResult:
        """Construct the result for a token that doesn't authenticate."""
        return cls(valid=False, origin="")


class TokenRecord(BaseModel):
    """A stored token for a user, as held in the database."""

    model_config = ConfigDict(from_attributes=True)

    uid: str = Field(
        ..., title="User identifier", description="Unique ID of the user"
    )

    token: str = Field(
        ...,
        title="Token digest",
        description="One-way hash of the token, never the token itself",
    )

    origin: str | None = Field(
        None,
        title="Origin URL",
        description="URL originally requested when the token was issued",
    )

    ttl: int = Field(
        ...,
        title="Expiration",
        description="Expiration time in milliseconds since the epoch",
    )

    def is_expired(self, now: int) -> bool:
        """Whether the token has expired.

        Parameters
        ----------
        now
            Current time in milliseconds since the epoch.
        """
        return now > self.ttl
