"""Tests for configuration parsing."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError
from safir.logging import LogLevel

from passwordless_sqlstore.config import Config, StoreOptions


def test_store_options() -> None:
    options = StoreOptions()
    assert options.table == "passwordless"
    assert options.pool_size == 10
    assert options.database_password is None

    options = StoreOptions.model_validate(
        {"table": "tokens", "poolSize": 5, "databasePassword": "secret"}
    )
    assert options.table == "tokens"
    assert options.pool_size == 5
    assert options.database_password
    assert options.database_password.get_secret_value() == "secret"

    options = StoreOptions.model_validate({"pool_size": 2, "unknown": "x"})
    assert options.pool_size == 2

    with pytest.raises(ValidationError):
        StoreOptions.model_validate({"table": "1tokens"})
    with pytest.raises(ValidationError):
        StoreOptions.model_validate({"poolSize": -1})


def test_config_file(config_path: Path, database_url: str) -> None:
    config = Config.from_file(config_path)
    assert config.database_url == database_url
    assert config.log_level == LogLevel.INFO
    assert config.table == "passwordless"

    options = config.to_options()
    assert options.table == "passwordless"
    assert options.pool_size == 10


def test_config_env(
    config_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PASSWORDLESS_TABLE", "tokens")
    monkeypatch.setenv("PASSWORDLESS_POOL_SIZE", "4")
    monkeypatch.setenv("PASSWORDLESS_DATABASE_PASSWORD", "secret")
    config = Config.from_file(config_path)
    assert config.table == "tokens"
    assert config.pool_size == 4

    options = config.to_options()
    assert options.table == "tokens"
    assert options.pool_size == 4
    assert options.database_password
    assert options.database_password.get_secret_value() == "secret"


def test_config_invalid(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("databaseUrl: sqlite+aiosqlite:///x\nunknownSetting: 1\n")
    with pytest.raises(ValidationError):
        Config.from_file(path)
