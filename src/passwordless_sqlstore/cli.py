"""Administrative command-line interface."""

from __future__ import annotations

from pathlib import Path

import click
import structlog
from safir.asyncio import run_with_asyncio
from safir.click import display_help

from .config import Config
from .constants import CONFIG_PATH, LOGGER_NAME
from .exceptions import TokenStoreError
from .store import SQLTokenStore

__all__ = [
    "clear",
    "count",
    "help",
    "init",
    "invalidate",
    "main",
]

_config_path_option = click.option(
    "--config-path",
    envvar="PASSWORDLESS_CONFIG_PATH",
    type=click.Path(path_type=Path),
    default=CONFIG_PATH,
    help="Application configuration file.",
)


def _create_store(config_path: Path) -> SQLTokenStore:
    """Load the configuration and create a token store from it."""
    config = Config.from_file(config_path)
    config.configure_logging()
    logger = structlog.get_logger(LOGGER_NAME)
    return SQLTokenStore(
        config.database_url, config.to_options(), logger=logger
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s")
def main() -> None:
    """Administrative command-line interface for passwordless-sqlstore."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic)


@main.command()
@_config_path_option
@run_with_asyncio
async def clear(*, config_path: Path) -> None:
    """Delete all stored tokens."""
    async with _create_store(config_path) as store:
        try:
            await store.clear()
        except TokenStoreError as e:
            raise click.ClickException(str(e)) from e


@main.command()
@_config_path_option
@run_with_asyncio
async def count(*, config_path: Path) -> None:
    """Print the number of stored tokens, including expired ones."""
    async with _create_store(config_path) as store:
        try:
            length = await store.length()
        except TokenStoreError as e:
            raise click.ClickException(str(e)) from e
    click.echo(length)


@main.command()
@click.option(
    "--reset",
    default=False,
    is_flag=True,
    help="Drop the token table first, deleting all tokens.",
)
@_config_path_option
@run_with_asyncio
async def init(*, reset: bool, config_path: Path) -> None:
    """Initialize the database storage."""
    async with _create_store(config_path) as store:
        try:
            await store.initialize(reset=reset)
        except TokenStoreError as e:
            raise click.ClickException(str(e)) from e


@main.command()
@click.argument("uid")
@_config_path_option
@run_with_asyncio
async def invalidate(*, uid: str, config_path: Path) -> None:
    """Delete the token for the user UID, if any."""
    async with _create_store(config_path) as store:
        try:
            await store.invalidate_user(uid)
        except TokenStoreError as e:
            raise click.ClickException(str(e)) from e
