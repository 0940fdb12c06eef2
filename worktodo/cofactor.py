"""Consistency checks for known factors of Mersenne numbers."""

from __future__ import annotations

from typing import Callable, Sequence

FactorValidator = Callable[[int, Sequence[str]], bool]


def validate_known_factors(exponent: int, factors: Sequence[str]) -> bool:
    """Return True if every factor divides 2^exponent - 1.

    Factors are decimal strings. An empty sequence, a factor below 2 or a
    malformed entry makes the list invalid. Primality of the factors is not
    checked.
    """

    if exponent < 1 or not factors:
        return False
    for text in factors:
        try:
            factor = int(text)
        except ValueError:
            return False
        if factor < 2:
            return False
        # f | 2^p - 1  <=>  2^p == 1 (mod f)
        if pow(2, exponent, factor) != 1:
            return False
    return True
