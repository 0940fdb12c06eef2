"""Command-line interface for worktodo using Click command groups."""

from __future__ import annotations

from typing import NoReturn
import logging

import click

from worktodo import __version__


@click.group()
@click.version_option(version=__version__)
@click.option(
    "log_level",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging threshold for skip reasons and loaded entries",
)
def cli(log_level: str) -> None:
    """worktodo: inspect and consume primality/factoring work queues."""
    logging.basicConfig(level=getattr(logging, log_level.upper()), format="%(levelname)s %(name)s: %(message)s")


# Register subcommands
from worktodo.commands.next import next_job  # noqa: E402
from worktodo.commands.archive import archive  # noqa: E402
from worktodo.commands.check import check  # noqa: E402

cli.add_command(next_job)
cli.add_command(archive)
cli.add_command(check)


def main() -> NoReturn:
    """Entry point for the CLI."""
    cli()
