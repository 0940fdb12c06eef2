"""CLI command reporting how every line of a queue file decodes."""

from __future__ import annotations

from pathlib import Path

import click

from worktodo.config import Config
from worktodo.decoder import Skip
from worktodo.workfile import scan_worktodo


@click.command(name="check")
@click.option(
    "file",
    "--file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(Config.DEFAULT_WORKTODO_FILE),
    show_default=True,
    help="Queue file to check",
)
def check(file: Path) -> None:
    """List each assignment line with its decoded entry or skip reason.

    Blank and comment lines are not listed. Exits with status 1 when no line
    is accepted.
    """

    accepted = 0
    try:
        for lineno, _raw, result in scan_worktodo(file):
            if isinstance(result, Skip):
                if not result.ignorable:
                    click.secho(f"{lineno}: SKIP {result.reason}", fg="yellow")
                continue
            accepted += 1
            click.secho(f"{lineno}: OK {result.describe()}", fg="green")
    except OSError as e:
        click.secho(f"Cannot open {file}: {e}", fg="red", err=True)
        raise SystemExit(1)

    click.echo(f"{accepted} valid entries in {file}")
    if not accepted:
        raise SystemExit(1)
