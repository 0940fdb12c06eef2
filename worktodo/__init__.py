"""
worktodo: Parse work-queue files of primality and factoring assignments.

Decodes Test/DoubleCheck, PRP/PRPDC, PFactor and Pminus1 lines for numbers of
the form k*b^n+c, and archives processed lines out of the queue.
"""

__all__ = [
    "Config",
    "get_config",
    "__version__",
    # Data model
    "WorkKind",
    "WorktodoEntry",
    "FactoringOptions",
    "PrimalityOptions",
    # Decoding
    "decode_line",
    "Skip",
    "LineRejected",
    "validate_known_factors",
    # Queue files
    "scan_worktodo",
    "find_next_job",
    "archive_first_processed",
    "WorktodoParser",
]

__version__ = "0.1.0"

from worktodo.config import Config, get_config
from worktodo.entry import FactoringOptions, PrimalityOptions, WorkKind, WorktodoEntry
from worktodo.cofactor import validate_known_factors
from worktodo.decoder import LineRejected, Skip, decode_line
from worktodo.workfile import (
    WorktodoParser,
    archive_first_processed,
    find_next_job,
    scan_worktodo,
)
