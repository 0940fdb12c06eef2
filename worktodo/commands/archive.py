from __future__ import annotations

from pathlib import Path

import click

from worktodo.config import Config
from worktodo.workfile import archive_first_processed


@click.command(name="archive")
@click.option(
    "file",
    "--file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(Config.DEFAULT_WORKTODO_FILE),
    show_default=True,
    help="Queue file to rewrite",
)
@click.option(
    "archive_file",
    "--archive",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(Config.DEFAULT_ARCHIVE_FILE),
    show_default=True,
    help="File receiving the processed line",
)
def archive(file: Path, archive_file: Path) -> None:
    """Move the first non-empty line of the queue file to the archive file.

    Examples:
      worktodo archive
      worktodo archive --file worktodo.txt --archive worktodo_save.txt
    """

    if archive_first_processed(file, archive_file):
        click.secho(f"Archived first entry of {file} to {archive_file}", fg="green")
    else:
        click.secho(f"Nothing archived from {file}", fg="yellow", err=True)
        raise SystemExit(1)
