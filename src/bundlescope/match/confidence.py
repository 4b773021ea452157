"""Jaccard-style confidence values and the set helpers behind them."""

from __future__ import annotations

from collections.abc import Collection, Hashable, Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Confidence:
    """A ratio ``num / den`` in [0, 1], with its parts kept for aggregation.

    ``den`` is never 0: comparisons with nothing on either side are
    reported as ``Confidence(0.0, 0, 1)``.
    """

    val: float
    num: int
    den: int

    @classmethod
    def of(cls, num: int, den: int) -> Confidence:
        if den <= 0:
            return cls.empty()
        return cls(val=num / den, num=num, den=den)

    @classmethod
    def empty(cls) -> Confidence:
        return cls(val=0.0, num=0, den=1)

    @classmethod
    def aggregate(cls, parts: Iterable[tuple[int, int]]) -> Confidence:
        """Sum numerators and denominators, then divide."""
        num = den = 0
        for part_num, part_den in parts:
            num += part_num
            den += part_den
        return cls.of(num, den)

    def to_dict(self) -> dict[str, Any]:
        return {"val": self.val, "num": self.num, "den": self.den}


def jaccard(a: Collection[Hashable], b: Collection[Hashable]) -> Confidence:
    """|A ∩ B| / |A ∪ B|; 0 when both sides are empty."""
    a_set = a if isinstance(a, (set, frozenset)) else set(a)
    b_set = b if isinstance(b, (set, frozenset)) else set(b)
    num = len(a_set & b_set)
    return Confidence.of(num, len(a_set) + len(b_set) - num)


def coverage(unknown: Collection[Hashable], lib: Collection[Hashable]) -> Confidence:
    """|U ∩ L| / |U|: how much of the unknown side the library explains."""
    unknown_set = unknown if isinstance(unknown, (set, frozenset)) else set(unknown)
    lib_set = lib if isinstance(lib, (set, frozenset)) else set(lib)
    return Confidence.of(len(unknown_set & lib_set), len(unknown_set))
