"""Queue file access: find the next job, archive processed lines.

The queue file is re-read from the top on every call; no position is kept
between calls. Access is not locked, so callers serialize use of a queue file
(one worker polling one file).
"""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Iterator, Optional
import logging
import os
import tempfile

from worktodo.cofactor import FactorValidator, validate_known_factors
from worktodo.config import Config, get_config
from worktodo.decoder import DecodeResult, Skip, decode_line
from worktodo.entry import WorktodoEntry
from worktodo.utils import discard_file, strip_line_ending


_LOGGER = logging.getLogger(__name__)


def scan_worktodo(
    path: Path | str,
    *,
    validate_factors: FactorValidator = validate_known_factors,
) -> Iterator[tuple[int, str, DecodeResult]]:
    """Yield ``(line_number, raw_line, result)`` for each line of ``path``.

    Line numbers start at 1 and ``raw_line`` has no line terminator. Raises
    `OSError` if the file cannot be opened.
    """

    cfg = get_config()
    path = Path(path)
    # undecodable bytes survive as surrogates and fail decoding as ordinary skips
    with path.open("r", encoding=cfg.ENCODING, errors=cfg.ENCODING_ERRORS) as f:
        for lineno, line in enumerate(f, start=1):
            raw = strip_line_ending(line)
            yield lineno, raw, decode_line(raw, validate_factors=validate_factors)


def find_next_job(
    path: Path | str,
    *,
    validate_factors: FactorValidator = validate_known_factors,
) -> Optional[WorktodoEntry]:
    """Return the first acceptable entry in ``path``, or None.

    Every rejected line is logged with its reason. The file is not modified
    and is read only up to the accepted line.
    """

    for lineno, _raw, result in scan_worktodo(path, validate_factors=validate_factors):
        if isinstance(result, Skip):
            if result.ignorable:
                _LOGGER.debug("Ignore line %d of %s", lineno, path)
            else:
                _LOGGER.warning("Skip line %d of %s: %s", lineno, path, result.reason)
            continue
        _LOGGER.info("Loaded %s", result.describe())
        return result

    _LOGGER.warning("No valid entry found in %s", path)
    return None


def _first_nonempty(lines: list[str]) -> Optional[int]:
    for i, line in enumerate(lines):
        if strip_line_ending(line):
            return i
    return None


def _restore_archive(archive_path: Path, size: int, created: bool) -> None:
    """Undo an append to ``archive_path``."""

    if created:
        discard_file(archive_path)
    elif archive_path.exists() and archive_path.stat().st_size > size:
        os.truncate(archive_path, size)


def archive_first_processed(
    path: Path | str,
    archive_path: Path | str = Config.DEFAULT_ARCHIVE_FILE,
) -> bool:
    """Move the first non-empty line of ``path`` to the end of ``archive_path``.

    The line is appended and flushed to the archive first; the remaining lines
    are written unchanged to a temporary file beside ``path`` which then
    replaces it. Returns False, leaving both files as they were, when ``path``
    has no non-empty line or when any file cannot be opened, written or
    replaced. A crash between the archive append and the replace leaves the
    line in both files.
    """

    cfg = get_config()
    path = Path(path)
    archive_path = Path(archive_path)

    try:
        # newline="" keeps original line endings for lines copied through
        with path.open("r", encoding=cfg.ENCODING, errors=cfg.ENCODING_ERRORS, newline="") as src:
            lines = src.readlines()
    except OSError as e:
        _LOGGER.error("Cannot open %s: %s", path, e)
        return False

    index = _first_nonempty(lines)
    if index is None:
        _LOGGER.info("Nothing to archive in %s", path)
        return False
    processed = strip_line_ending(lines[index])

    archive_created = not archive_path.exists()
    archive_size = 0 if archive_created else archive_path.stat().st_size
    tmp_path: Optional[Path] = None
    try:
        with ExitStack() as stack:
            archive = stack.enter_context(
                archive_path.open("a", encoding=cfg.ENCODING, errors=cfg.ENCODING_ERRORS)
            )
            tmp = stack.enter_context(
                tempfile.NamedTemporaryFile(
                    "w",
                    encoding=cfg.ENCODING,
                    errors=cfg.ENCODING_ERRORS,
                    newline="",
                    dir=path.parent,
                    prefix=f"{path.name}.",
                    suffix=cfg.TEMP_SUFFIX,
                    delete=False,
                )
            )
            tmp_path = Path(tmp.name)
            tmp.writelines(lines[:index])
            tmp.writelines(lines[index + 1 :])
            tmp.close()
            archive.write(processed + "\n")
            archive.flush()
            os.fsync(archive.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
    except OSError as e:
        if tmp_path is not None:
            discard_file(tmp_path)
        _restore_archive(archive_path, archive_size, archive_created)
        _LOGGER.error("Cannot archive first line of %s to %s: %s", path, archive_path, e)
        return False

    _LOGGER.info("Archived %r from %s to %s", processed, path, archive_path)
    return True


class WorktodoParser:
    """Queue file bound to a filename.

    Parameters
    ----------
    filename:
        Queue file to read.
    archive_filename:
        File receiving processed lines.
    validate_factors:
        Known-factor predicate passed to the decoder.
    """

    def __init__(
        self,
        filename: Path | str = Config.DEFAULT_WORKTODO_FILE,
        archive_filename: Path | str = Config.DEFAULT_ARCHIVE_FILE,
        *,
        validate_factors: FactorValidator = validate_known_factors,
    ) -> None:
        self.filename: Path = Path(filename)
        self.archive_filename: Path = Path(archive_filename)
        self._validate_factors: FactorValidator = validate_factors

    def parse(self) -> Optional[WorktodoEntry]:
        """Return the next job in the queue file, or None."""

        return find_next_job(self.filename, validate_factors=self._validate_factors)

    def remove_first_processed(self) -> bool:
        return archive_first_processed(self.filename, self.archive_filename)

    def __iter__(self) -> Iterator[tuple[int, str, DecodeResult]]:
        return scan_worktodo(self.filename, validate_factors=self._validate_factors)
