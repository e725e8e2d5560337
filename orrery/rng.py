#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Deterministic Random Source

Seeded pseudo-random stream used for star system generation.

A string seed is hashed into a 32-bit state (xmur3-style avalanche mixing)
which then drives a fast 32-bit mixing generator (mulberry32-style). All
arithmetic is explicit unsigned 32-bit integer arithmetic, so a given seed
yields the same sequence on every platform.
"""

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a * b."""
    return (a * b) & MASK_32


def _code_units(seed: str):
    """UTF-16 code units of the seed (one per character for BMP text)."""
    data = seed.encode("utf-16-le", "surrogatepass")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_seed(seed: str) -> int:
    """
    Mix an arbitrary-length string into a single 32-bit integer.

    Parameters
    ----------
    seed : str
        Seed string (may be empty)

    Returns
    -------
    int
        Unsigned 32-bit state
    """
    units = _code_units(seed)

    h = (1779033703 ^ len(units)) & MASK_32
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = ((h << 13) | (h >> 19)) & MASK_32

    h = _imul(h ^ (h >> 16), 2246822507)
    h = _imul(h ^ (h >> 13), 3266489909)
    h ^= h >> 16
    return h & MASK_32


class RNG:
    """
    Repeatable random number generator seeded from a string.

    Parameters
    ----------
    seed : str
        Seed string; identical seeds produce identical sequences

    Examples
    --------
    >>> rng = RNG("demo-seed-001")
    >>> 0.0 <= rng.next() < 1.0
    True
    >>> rng.int(3, 9) in range(3, 10)
    True
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._state = hash_seed(seed)

    def next(self) -> float:
        """Next float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / TWO_POW_32

    def range(self, min_value: float, max_value: float) -> float:
        """Float in [min_value, max_value)."""
        return min_value + (max_value - min_value) * self.next()

    def int(self, min_inclusive: int, max_inclusive: int) -> int:
        """Integer in [min_inclusive, max_inclusive]."""
        return math.floor(self.range(min_inclusive, max_inclusive + 1))

    def pick(self, sequence: Sequence[T]) -> T:
        """Uniformly chosen element of a non-empty sequence."""
        if len(sequence) == 0:
            raise IndexError("Cannot pick from an empty sequence")
        return sequence[self.int(0, len(sequence) - 1)]

    def __repr__(self) -> str:
        return f"RNG(seed={self.seed!r})"
