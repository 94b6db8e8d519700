"""Tests for the passwordless_sqlstore.util package."""

from __future__ import annotations

import time

import pytest

from passwordless_sqlstore.exceptions import InvalidParametersError
from passwordless_sqlstore.util import (
    current_timestamp_ms,
    require_duration,
    require_string,
)


def test_current_timestamp_ms() -> None:
    before = int(time.time() * 1000)
    now = current_timestamp_ms()
    after = int(time.time() * 1000)
    assert before - 1 <= now <= after + 1


def test_require_duration() -> None:
    require_duration("test", 1)
    require_duration("test", 60000)
    require_duration("test", 0.5)
    for value in (0, -1, -0.5, True, False, None, "1000", float("inf")):
        with pytest.raises(InvalidParametersError) as excinfo:
            require_duration("test", value)
        assert "TokenStore:test" in str(excinfo.value)


def test_require_string() -> None:
    require_string("test", "a")
    require_string("test", "a", "b")
    for values in (("",), (None,), ("a", ""), ("a", 1), (b"a",)):
        with pytest.raises(InvalidParametersError):
            require_string("test", *values)
