"""Line grammar decoder for work-queue assignment lines.

Each accepted line has the shape ``<keyword>=<payload>`` where the payload is a
comma-separated list whose layout depends on the keyword::

    Test=<exp>,<hff>,<p1ed>
    DoubleCheck=<exp>,<hff>,<p1ed>
    PRP=[AID,]<k>,<b>,<n>,<c>[,<hff>,<saved>[,<base>,<residueType>]][,"<f1,f2,...>"]
    PRPDC=...                                           (same as PRP)
    PFactor=[AID,]<exp-or-1>,[<k>,<b>,<n>,<c>,]<hff>,<saved>,<B1>,<B2>[,"<factors>"]
    Pminus1=[AID,]<k>,<b>,<n>,<c>,<B1>,<B2>,<hff>[,"<factors>"]

`decode_line` is a pure function: it returns a `WorktodoEntry` for an
accepted line and a `Skip` carrying the rejection reason otherwise. Field
extraction works on a `TokenCursor` that consumes tokens from the front of
the payload; every malformed or missing field raises `LineRejected`, which
`decode_line` turns into a `Skip`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import re
from typing import Optional

from worktodo.cofactor import FactorValidator, validate_known_factors
from worktodo.config import Config, FACTORING_KEYWORDS, KEYWORD_KINDS
from worktodo.entry import FactoringOptions, PrimalityOptions, WorkKind, WorktodoEntry
from worktodo.utils import is_blank, split, split_respecting_quotes, strip_line_ending


_LOGGER = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DIGITS_RE = re.compile(r"[0-9]+")
_REAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class LineRejected(ValueError):
    """Raised while decoding a line that cannot become an entry."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class Skip:
    """A line that produced no entry.

    ``ignorable`` marks blank and comment lines, which are skipped without
    being reported as problems.
    """

    reason: str
    ignorable: bool = False

    def __bool__(self) -> bool:
        return False


DecodeResult = WorktodoEntry | Skip


def is_assignment_id(token: str) -> bool:
    """Return True if ``token`` is exactly 32 hexadecimal digits."""

    return len(token) == Config.ASSIGNMENT_ID_LENGTH and all(
        ch in "0123456789abcdefABCDEF" for ch in token
    )


def is_factor_list(token: str) -> bool:
    """Return True if ``token`` is shaped like a quoted factor list."""

    trimmed = token.rstrip()
    return len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"')


def parse_known_factors(token: str) -> tuple[str, ...]:
    """Parse ``"f1,f2,..."`` into a tuple of decimal strings.

    Raises `LineRejected` when the token is not quoted or when any element is
    empty or not a decimal number.
    """

    if not is_factor_list(token):
        raise LineRejected("bad known factors: not a quoted list")
    content = token.rstrip()[1:-1]
    factors = tuple(part.strip() for part in split(content, ","))
    if not factors:
        raise LineRejected("bad known factors: empty list")
    for factor in factors:
        if not _DIGITS_RE.fullmatch(factor):
            raise LineRejected(f"bad known factors: {factor!r} is not a decimal number")
    return factors


class TokenCursor:
    """Front-consuming view over a line's payload tokens.

    Parameters
    ----------
    tokens:
        Payload tokens, already split respecting quotes.
    label:
        Line type used in rejection messages (e.g. ``"PRP"``).
    """

    def __init__(self, tokens: list[str], label: str) -> None:
        self._tokens: list[str] = list(tokens)
        self._pos: int = 0
        self.label: str = label

    def __len__(self) -> int:
        return len(self._tokens) - self._pos

    @property
    def remaining(self) -> list[str]:
        return self._tokens[self._pos :]

    def peek(self) -> Optional[str]:
        return self._tokens[self._pos] if len(self) else None

    def take(self, field_name: str) -> str:
        """Consume and return the next token, rejecting when none is left."""

        if not len(self):
            raise LineRejected(f"Bad {self.label} line (missing {field_name})")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def skip(self, field_name: str) -> None:
        """Consume an advisory token whose value is not retained."""

        self.take(field_name)

    def take_int(self, field_name: str, *, minimum: int, maximum: int) -> int:
        token = self.take(field_name)
        return _parse_int(token, field_name, minimum=minimum, maximum=maximum)

    def take_last(self) -> str:
        """Consume and return the final token."""

        if not len(self):
            raise LineRejected(f"Bad {self.label} line (no trailing token)")
        return self._tokens.pop()

    def drop(self, count: int) -> None:
        self._pos = min(len(self._tokens), self._pos + count)


def _parse_int(token: str, field_name: str, *, minimum: int, maximum: int) -> int:
    text = token.strip()
    if not _INT_RE.fullmatch(text):
        raise LineRejected(f"Skip: malformed {field_name} {token!r}")
    value = int(text)
    if value > maximum or value < -maximum - 1:
        raise LineRejected(f"Skip: {field_name} out of range ({text})")
    if value < minimum:
        raise LineRejected(f"Skip: invalid {field_name} {value}")
    return value


def _parse_real(token: str, field_name: str) -> float:
    text = token.strip()
    if text.lower().lstrip("+-") in ("inf", "infinity", "nan"):
        raise LineRejected(f"Skip: {field_name} out of range ({text})")
    # plain decimal notation only; float() alone also takes "1_000"
    if not _REAL_RE.fullmatch(text):
        raise LineRejected(f"Skip: malformed {field_name} {token!r}")
    value = float(text)
    if not math.isfinite(value):
        raise LineRejected(f"Skip: {field_name} out of range ({text})")
    return value


@dataclass(frozen=True)
class _Target:
    """k*b^n+c as read from the line."""

    k: int
    b: int
    n: int
    c: int

    @property
    def is_mersenne(self) -> bool:
        return self.k == 1 and self.b == 2 and self.c == -1


def _take_kbnc(cursor: TokenCursor) -> _Target:
    if len(cursor) < 4:
        raise LineRejected("Skip: not enough parts for k,b,n,c")
    k = cursor.take_int("k", minimum=0, maximum=Config.MAX_UINT32)
    b = cursor.take_int("b", minimum=0, maximum=Config.MAX_UINT32)
    n = cursor.take_int("n", minimum=0, maximum=Config.MAX_UINT32)
    c = cursor.take_int("c", minimum=-Config.MAX_INT32 - 1, maximum=Config.MAX_INT32)
    if k == 0 or b < 2 or n == 0:
        raise LineRejected("Skip: invalid k,b,n,c values")
    return _Target(k, b, n, c)


def _take_exponent(cursor: TokenCursor) -> _Target:
    if not len(cursor):
        raise LineRejected(f"Bad {cursor.label} line (missing exponent)")
    n = cursor.take_int("exponent", minimum=0, maximum=Config.MAX_UINT32)
    if n == 0:
        raise LineRejected("Skip: invalid exponent 0")
    return _Target(k=1, b=2, n=n, c=-1)


def _take_exponent_or_kbnc(cursor: TokenCursor) -> _Target:
    # literal "1" selects the k,b,n,c form
    if cursor.peek() == "1":
        return _take_kbnc(cursor)
    return _take_exponent(cursor)


def _take_factoring_options(cursor: TokenCursor) -> FactoringOptions:
    if len(cursor) < 2:
        raise LineRejected("Skip: not enough parts for B1,B2")
    b1 = cursor.take_int("B1", minimum=0, maximum=Config.MAX_UINT64)
    b2 = _parse_real(cursor.take("B2"), "B2")
    if b1 == 0 or b2 < b1:
        raise LineRejected("Skip: invalid B1,B2 values")
    return FactoringOptions(b1=b1, b2=b2)


def _take_optional_factors(cursor: TokenCursor) -> tuple[str, ...]:
    """Trailing quoted factor list on factoring lines; absence is not an error."""

    if len(cursor) and is_factor_list(cursor.remaining[-1]):
        return parse_known_factors(cursor.take_last())
    return ()


def _require_mersenne(target: _Target, keyword: str) -> None:
    if not target.is_mersenne:
        raise LineRejected(f"Skip unsupported {keyword} line (only Mersenne supported)")


def _decode_pfactor(cursor: TokenCursor, keyword: str) -> tuple[_Target, FactoringOptions, tuple[str, ...]]:
    # PFactor=exponent,how_far_factored,ll_tests_saved,B1,B2[,known_factors]
    # PFactor=1,b,n,c,how_far_factored,ll_tests_saved,B1,B2[,known_factors]
    target = _take_exponent_or_kbnc(cursor)
    _require_mersenne(target, keyword)
    cursor.skip("how_far_factored")
    cursor.skip("ll_tests_saved_if_factor_found")
    options = _take_factoring_options(cursor)
    factors = _take_optional_factors(cursor)
    return target, options, factors


def _decode_pminus1(cursor: TokenCursor, keyword: str) -> tuple[_Target, FactoringOptions, tuple[str, ...]]:
    # Pminus1=k,b,n,c,B1,B2,how_far_factored[,known_factors]
    target = _take_kbnc(cursor)
    _require_mersenne(target, keyword)
    options = _take_factoring_options(cursor)
    cursor.skip("how_far_factored")
    factors = _take_optional_factors(cursor)
    return target, options, factors


def _decode_ll(cursor: TokenCursor) -> _Target:
    # Test|DoubleCheck=exponent,how_far_factored,has_been_pminus1ed
    target = _take_exponent(cursor)
    cursor.skip("how_far_factored")
    cursor.skip("has_been_pminus1ed")
    return target


def _decode_prp(
    cursor: TokenCursor,
    validate_factors: FactorValidator,
) -> tuple[_Target, PrimalityOptions, tuple[str, ...]]:
    # PRP[DC]=k,b,n,c[,how_far_factored,tests_saved[,base,residue_type]][,known_factors]
    target = _take_kbnc(cursor)
    residue_type = Config.DEFAULT_RESIDUE_TYPE
    factors: tuple[str, ...] = ()

    if len(cursor) in (1, 3, 5):
        try:
            factors = parse_known_factors(cursor.take_last())
        except LineRejected as e:
            raise LineRejected(f"Bad PRP line ({e.reason})") from None
        if target.is_mersenne:
            if not validate_factors(target.n, factors):
                raise LineRejected("Skip PRP line: invalid known factors for exponent")
            residue_type = Config.COFACTOR_RESIDUE_TYPE

    is_wagstaff = (target.k, target.b, target.c) == (1, 2, 1) and factors[:1] == ("3",)
    if not target.is_mersenne and not is_wagstaff:
        raise LineRejected("Skip unsupported PRP line (only Mersenne and Wagstaff supported)")

    if len(cursor) >= 2:
        cursor.drop(2)  # how_far_factored, tests_saved

    if len(cursor) >= 2:
        base = cursor.take_int("base", minimum=0, maximum=Config.MAX_UINT32)
        line_residue_type = cursor.take_int("residue_type", minimum=0, maximum=Config.MAX_UINT32)
        if base < 2:
            raise LineRejected("Skip PRP line: invalid base < 2")
        if base != Config.SUPPORTED_PRP_BASE:
            raise LineRejected(f"Skip PRP line: only base {Config.SUPPORTED_PRP_BASE} implemented")
        if line_residue_type != residue_type:
            _LOGGER.warning(
                "PRP line residue type %d does not match expected %d", line_residue_type, residue_type
            )

    return target, PrimalityOptions(residue_type=residue_type), factors


def _decode(line: str, validate_factors: FactorValidator) -> DecodeResult:
    text = strip_line_ending(line)
    if is_blank(text) or text.startswith("#"):
        return Skip("blank or comment line", ignorable=True)

    keyword, sep, payload = text.partition("=")
    if not sep:
        raise LineRejected("Skip: missing '=' in line")
    if not keyword or not payload:
        raise LineRejected("Skip: line needs a test type and a payload")

    kind_name = KEYWORD_KINDS.get(keyword)
    if kind_name is None:
        raise LineRejected(f"Skip unsupported test type: {keyword}")
    kind = WorkKind(kind_name)
    is_factoring = keyword in FACTORING_KEYWORDS

    tokens = split_respecting_quotes(payload, ",")
    if tokens and tokens[0] in Config.AID_PLACEHOLDERS:
        tokens = tokens[1:]

    aid: Optional[str] = None
    if tokens and (is_assignment_id(tokens[0]) or (is_factoring and tokens[0] == Config.AID_LITERAL)):
        aid = tokens[0]
        tokens = tokens[1:]

    cursor = TokenCursor(tokens, keyword)
    factors: tuple[str, ...] = ()
    if keyword == "PFactor":
        target, options, factors = _decode_pfactor(cursor, keyword)
    elif keyword == "Pminus1":
        target, options, factors = _decode_pminus1(cursor, keyword)
    elif kind is WorkKind.LL:
        target = _decode_ll(cursor)
        options = PrimalityOptions()
    else:
        target, options, factors = _decode_prp(cursor, validate_factors)

    return WorktodoEntry(
        kind=kind,
        exponent=target.n,
        k=target.k,
        b=target.b,
        c=target.c,
        aid=aid,
        raw_line=text,
        known_factors=factors,
        options=options,
        keyword=keyword,
    )


def decode_line(
    line: str,
    *,
    validate_factors: FactorValidator = validate_known_factors,
) -> DecodeResult:
    """Decode one queue line into a `WorktodoEntry` or a `Skip`.

    Parameters
    ----------
    line:
        Raw line text; a trailing line terminator is ignored.
    validate_factors:
        Predicate checking a Mersenne PRP line's known factors against its
        exponent.
    """

    try:
        return _decode(line, validate_factors)
    except LineRejected as e:
        return Skip(e.reason)
