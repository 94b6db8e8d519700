"""Test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
import yaml

from passwordless_sqlstore.hashing import BcryptHasher
from passwordless_sqlstore.store import SQLTokenStore

_HASHER = BcryptHasher(rounds=4)
"""Hasher for tests.

Uses the minimum bcrypt cost factor, since hashing at the production cost
factor for every stored token noticeably slows down the test suite.
"""


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Return the URL of an empty SQLite database for testing."""
    return f"sqlite+aiosqlite:///{tmp_path / 'tokens.sqlite3'}"


@pytest.fixture
def config_path(tmp_path: Path, database_url: str) -> Path:
    """Write a configuration file for the command-line interface."""
    path = tmp_path / "passwordless.yaml"
    config = {"databaseUrl": database_url, "logLevel": "INFO"}
    with path.open("w") as f:
        yaml.safe_dump(config, f)
    return path


@pytest_asyncio.fixture
async def store(database_url: str) -> AsyncIterator[SQLTokenStore]:
    """Return a token store with an initialized, empty token table."""
    store = SQLTokenStore(database_url, hasher=_HASHER)
    await store.initialize(reset=True)
    yield store
    await store.disconnect()
