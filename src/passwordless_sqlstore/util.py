"""General utility functions."""

from __future__ import annotations

import math
from typing import Any

from safir.datetime import current_datetime

from .constants import MAX_TIMESTAMP_MS
from .exceptions import InvalidParametersError

__all__ = [
    "current_timestamp_ms",
    "require_duration",
    "require_string",
]


def current_timestamp_ms() -> int:
    """Return the current time in milliseconds since the epoch.

    Token expiration times are stored in this form, so every comparison
    against a stored expiration must use this clock.
    """
    return int(current_datetime(microseconds=True).timestamp() * 1000)


def require_duration(method: str, value: Any) -> None:
    """Check that a lifetime in milliseconds is a positive number.

    Parameters
    ----------
    method
        Name of the calling method, for the error message.
    value
        Lifetime to check.

    Raises
    ------
    InvalidParametersError
        Raised if the value is not a positive finite `int` or `float`, or
        is so large that the resulting expiration time would not fit in the
        database. `bool` is rejected even though it is a subclass of `int`.
    """
    if (
        isinstance(value, bool)
        or not isinstance(value, int | float)
        or not math.isfinite(value)
        or value <= 0
        or value > MAX_TIMESTAMP_MS - current_timestamp_ms()
    ):
        msg = f"TokenStore:{method} called with invalid parameters"
        raise InvalidParametersError(msg)


def require_string(method: str, *values: Any) -> None:
    """Check that all values are non-empty strings.

    Parameters
    ----------
    method
        Name of the calling method, for the error message.
    *values
        Values to check.

    Raises
    ------
    InvalidParametersError
        Raised if any value is not a string or is empty.
    """
    for value in values:
        if not isinstance(value, str) or not value:
            msg = f"TokenStore:{method} called with invalid parameters"
            raise InvalidParametersError(msg)

