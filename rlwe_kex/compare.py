# rlwe_kex/compare.py

from __future__ import annotations

from typing import Sequence


def constant_time_compare(a: Sequence[int], b: Sequence[int]) -> bool:
    """
    Equality check that visits every index no matter where a and b differ.

    Only the length check exits early, so unequal lengths are distinguishable
    by timing.
    """
    if len(a) != len(b):
        return False
    result = 0
    for x, y in zip(a, b):
        result |= int(x) ^ int(y)
    return result == 0
