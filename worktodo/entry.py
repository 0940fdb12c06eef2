"""Decoded work-queue assignments.

A `WorktodoEntry` describes one job on a number of the form k*b^n+c. It is
built once by the line decoder and never modified afterwards; the options
carried with it depend on the kind of test:

- `FactoringOptions` (bounds B1, B2) for P-1 factoring assignments;
- `PrimalityOptions` (residue type) for PRP and Lucas-Lehmer assignments.

Examples
--------
>>> entry = WorktodoEntry(
...     kind=WorkKind.PRP, exponent=89, k=1, b=2, c=-1,
...     known_factors=("3",), options=PrimalityOptions(residue_type=5),
... )
>>> entry.is_mersenne
True
>>> str(entry)
'PRP on 1*2^89-1 (Mersenne) with 1 known factors, residueType=5'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from worktodo.config import Config


class WorkKind(str, Enum):
    UNSUPPORTED = "UNSUPPORTED"
    PRP = "PRP"
    LL = "LL"
    PM1 = "PM1"

    @property
    def label(self) -> str:
        """Short human-readable name used in log lines."""

        return _KIND_LABELS[self]


_KIND_LABELS: dict[WorkKind, str] = {
    WorkKind.UNSUPPORTED: "Unsupported op",
    WorkKind.PRP: "PRP",
    WorkKind.LL: "LL",
    WorkKind.PM1: "P-1",
}


@dataclass(frozen=True)
class FactoringOptions:
    """P-1 bounds. ``b2`` may be fractional."""

    b1: int
    b2: float

    def __post_init__(self) -> None:
        if self.b1 < 1:
            raise ValueError(f"B1 must be >= 1, got {self.b1}")
        if self.b2 < self.b1:
            raise ValueError(f"B2 must be >= B1, got B1={self.b1}, B2={self.b2}")


@dataclass(frozen=True)
class PrimalityOptions:
    residue_type: int = Config.DEFAULT_RESIDUE_TYPE


Options = Union[FactoringOptions, PrimalityOptions]


@dataclass(frozen=True)
class WorktodoEntry:
    """One accepted assignment line.

    Fields
    ------
    kind:
        Test family selected by the line's keyword.
    exponent:
        The ``n`` of k*b^n+c.
    k, b, c:
        Remaining terms of the candidate number.
    aid:
        32-hex-digit assignment ID (or the literal ``AID`` on factoring
        lines), None when the line carries none.
    raw_line:
        Source text of the line, without its line terminator.
    known_factors:
        Decimal strings of factors already known to divide the candidate.
    options:
        `FactoringOptions` for P-1 kinds, `PrimalityOptions` otherwise.
    keyword:
        Work-type keyword as written in the line (e.g. ``DoubleCheck``).
    """

    kind: WorkKind
    exponent: int
    k: int = 1
    b: int = 2
    c: int = -1
    aid: Optional[str] = None
    raw_line: str = ""
    known_factors: tuple[str, ...] = ()
    options: Options = field(default_factory=PrimalityOptions)
    keyword: str = ""

    def __post_init__(self) -> None:
        if self.exponent < 1:
            raise ValueError(f"exponent must be >= 1, got {self.exponent}")
        if self.k < 1:
            raise ValueError(f"k must be >= 1, got {self.k}")
        if self.b < 2:
            raise ValueError(f"b must be >= 2, got {self.b}")
        for factor in self.known_factors:
            if not factor or not factor.isdecimal() or not factor.isascii():
                raise ValueError(f"Invalid known factor: {factor!r}")
        expected = FactoringOptions if self.kind is WorkKind.PM1 else PrimalityOptions
        if not isinstance(self.options, expected):
            raise ValueError(
                f"{self.kind.value} entries carry {expected.__name__}, got {type(self.options).__name__}"
            )

    @property
    def is_mersenne(self) -> bool:
        return self.k == 1 and self.b == 2 and self.c == -1

    @property
    def is_wagstaff(self) -> bool:
        return (
            self.k == 1
            and self.b == 2
            and self.c == 1
            and len(self.known_factors) > 0
            and self.known_factors[0] == "3"
        )

    @property
    def factoring(self) -> FactoringOptions:
        """P-1 bounds; raises `TypeError` for PRP/LL entries."""

        if not isinstance(self.options, FactoringOptions):
            raise TypeError(f"{self.kind.value} entry has no factoring bounds")
        return self.options

    @property
    def primality(self) -> PrimalityOptions:
        """Residue options; raises `TypeError` for P-1 entries."""

        if not isinstance(self.options, PrimalityOptions):
            raise TypeError(f"{self.kind.value} entry has no residue type")
        return self.options

    def number_str(self) -> str:
        """Return the candidate as ``k*b^n+c``."""

        return f"{self.k}*{self.b}^{self.exponent}{self.c:+d}"

    def describe(self) -> str:
        parts = [f"{self.kind.label} on {self.number_str()}"]
        if self.is_mersenne:
            parts.append(" (Mersenne)")
        if self.is_wagstaff:
            parts.append(" (Wagstaff)")
        if self.known_factors:
            parts.append(f" with {len(self.known_factors)} known factors")
        if isinstance(self.options, FactoringOptions):
            parts.append(f", B1={self.options.b1}, B2={self.options.b2:g}")
        else:
            parts.append(f", residueType={self.options.residue_type}")
        if self.aid:
            parts.append(f", AID={self.aid}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.describe()

    def as_dict(self) -> dict[str, Any]:
        """JSON-serializable view handed to the compute engine."""

        data: dict[str, Any] = {
            "kind": self.kind.value,
            "keyword": self.keyword,
            "k": self.k,
            "b": self.b,
            "n": self.exponent,
            "c": self.c,
            "aid": self.aid,
            "known_factors": list(self.known_factors),
            "is_mersenne": self.is_mersenne,
            "is_wagstaff": self.is_wagstaff,
            "raw_line": self.raw_line,
        }
        if isinstance(self.options, FactoringOptions):
            data["B1"] = self.options.b1
            data["B2"] = self.options.b2
        else:
            data["residue_type"] = self.options.residue_type
        return data
