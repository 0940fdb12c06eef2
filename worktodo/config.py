"""Centralized configuration for work-queue parsing.

Defines immutable defaults for file names, assignment identifiers, PRP
options and the numeric limits applied while decoding assignment lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Config:
    """Immutable configuration defaults for the project."""

    # Queue files
    DEFAULT_WORKTODO_FILE: str = "worktodo.txt"
    DEFAULT_ARCHIVE_FILE: str = "worktodo_save.txt"
    TEMP_SUFFIX: str = ".tmp"
    ENCODING: str = "utf-8"
    ENCODING_ERRORS: str = "surrogateescape"

    # Assignment identifiers
    ASSIGNMENT_ID_LENGTH: int = 32
    AID_PLACEHOLDERS: tuple[str, ...] = ("", "N/A")
    AID_LITERAL: str = "AID"

    # PRP options
    SUPPORTED_PRP_BASE: int = 3
    DEFAULT_RESIDUE_TYPE: int = 1
    COFACTOR_RESIDUE_TYPE: int = 5

    # Numeric limits (widths of the fields in the queue format)
    MAX_UINT32: int = 2**32 - 1
    MAX_INT32: int = 2**31 - 1
    MAX_UINT64: int = 2**64 - 1


# Work-type keyword -> kind name (see worktodo.entry.WorkKind)
KEYWORD_KINDS: dict[str, str] = {
    "Test": "LL",
    "DoubleCheck": "LL",
    "PRP": "PRP",
    "PRPDC": "PRP",
    "PFactor": "PM1",
    "Pminus1": "PM1",
}

FACTORING_KEYWORDS: frozenset[str] = frozenset({"PFactor", "Pminus1"})


_CONFIG_SINGLETON: Optional[Config] = None


def get_config() -> Config:
    """Return a singleton `Config` instance."""

    global _CONFIG_SINGLETON
    if _CONFIG_SINGLETON is None:
        _CONFIG_SINGLETON = Config()
    return _CONFIG_SINGLETON
