"""Configuration for the passwordless token store.

The store itself takes a connection URL and a small set of options, which
mirror the options of the other token store backends for passwordless
authentication. The administrative command-line tool additionally reads a
YAML configuration file, with any setting overridable by an environment
variable starting with ``PASSWORDLESS_``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Self

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, configure_logging
from typing_extensions import override

from .constants import (
    DEFAULT_POOL_SIZE,
    DEFAULT_TABLE,
    LOGGER_NAME,
    TABLE_NAME_REGEX,
)

__all__ = [
    "Config",
    "StoreOptions",
]


class StoreOptions(BaseModel):
    """Options understood by `~passwordless_sqlstore.store.SQLTokenStore`.

    Options may be given in either camel case or snake case. Unknown options
    are ignored so that a single options dictionary can be shared with other
    components.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    table: str = Field(
        DEFAULT_TABLE,
        title="Table name",
        description="Name of the table holding tokens",
        pattern=TABLE_NAME_REGEX,
    )

    pool_size: int = Field(
        DEFAULT_POOL_SIZE,
        title="Connection pool size",
        description="Maximum number of concurrent database connections",
        ge=1,
    )

    database_password: SecretStr | None = Field(
        None,
        title="Database password",
        description=(
            "Password for the PostgreSQL database, if not included in the"
            " connection URL"
        ),
    )


class Config(BaseSettings):
    """Configuration for the administrative command-line tool."""

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    database_url: str = Field(
        ...,
        title="Database URL",
        description="SQLAlchemy URL for the database holding tokens",
        validation_alias=AliasChoices(
            "PASSWORDLESS_DATABASE_URL", "databaseUrl"
        ),
    )

    database_password: SecretStr | None = Field(
        None,
        title="Database password",
        description="Password for the PostgreSQL database",
        validation_alias=AliasChoices(
            "PASSWORDLESS_DATABASE_PASSWORD", "databasePassword"
        ),
    )

    table: str = Field(
        DEFAULT_TABLE,
        title="Table name",
        description="Name of the table holding tokens",
        pattern=TABLE_NAME_REGEX,
        validation_alias=AliasChoices("PASSWORDLESS_TABLE", "table"),
    )

    pool_size: int = Field(
        DEFAULT_POOL_SIZE,
        title="Connection pool size",
        description="Maximum number of concurrent database connections",
        ge=1,
        validation_alias=AliasChoices("PASSWORDLESS_POOL_SIZE", "poolSize"),
    )

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Logging level",
        description="Python logging level",
        validation_alias=AliasChoices("PASSWORDLESS_LOG_LEVEL", "logLevel"),
    )

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Override the sources of settings.

        Deactivate :file:`.env` and secret file support and let environment
        variables take precedence over the contents of the configuration
        file, which are passed as init parameters.
        """
        return (env_settings, init_settings)

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        with path.open("r") as f:
            return cls(**(yaml.safe_load(f) or {}))

    def configure_logging(self) -> None:
        """Configure logging based on the configuration."""
        configure_logging(name=LOGGER_NAME, log_level=self.log_level)

    def to_options(self) -> StoreOptions:
        """Convert the configuration to options for the token store."""
        return StoreOptions(
            table=self.table,
            pool_size=self.pool_size,
            database_password=self.database_password,
        )
