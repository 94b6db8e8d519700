"""Token store for passwordless authentication backed by a SQL database."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .config import StoreOptions
from .exceptions import (
    DatabaseError,
    HashError,
    InvalidParametersError,
    TokenStoreError,
)
from .interface import TokenStore
from .models import AuthenticationResult
from .store import SQLTokenStore

__all__ = [
    "AuthenticationResult",
    "DatabaseError",
    "HashError",
    "InvalidParametersError",
    "SQLTokenStore",
    "StoreOptions",
    "TokenStore",
    "TokenStoreError",
    "__version__",
]

__version__: str
"""The version string of passwordless-sqlstore."""

try:
    __version__ = version("passwordless-sqlstore")
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0"
