"""CLI command printing the next acceptable job of a queue file.

Examples
--------
  worktodo next
  worktodo next --file worktodo.txt --json
"""

from __future__ import annotations

from pathlib import Path
import json

import click

from worktodo.config import Config
from worktodo.workfile import find_next_job


@click.command(name="next")
@click.option(
    "file",
    "--file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(Config.DEFAULT_WORKTODO_FILE),
    show_default=True,
    help="Queue file to read",
)
@click.option("as_json", "--json", is_flag=True, help="Print the entry as JSON")
def next_job(file: Path, as_json: bool) -> None:
    """Print the first valid assignment in the queue file."""

    try:
        entry = find_next_job(file)
    except OSError as e:
        click.secho(f"Cannot open {file}: {e}", fg="red", err=True)
        raise SystemExit(1)

    if entry is None:
        click.secho(f"No valid entry found in {file}", fg="yellow", err=True)
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(entry.as_dict(), indent=2))
    else:
        click.echo(entry.describe())
