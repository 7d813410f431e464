# rlwe_kex/modular.py
# ------------------------------------------------------------
# Scalar modular arithmetic used by the reference butterflies and
# the key exchange, plus the two parameter predicates.
#
# Every function returns a representative in [0, m) for any integer
# input, including negatives and values >= m. Python ints are the
# widened intermediate here, so a product never wraps.
# ------------------------------------------------------------

from __future__ import annotations


def reduce(x: int, m: int) -> int:
    return int(x) % m


def add(a: int, b: int, m: int) -> int:
    return (int(a) + int(b)) % m


def sub(a: int, b: int, m: int) -> int:
    # % with a positive modulus already gives the non-negative representative
    return (int(a) - int(b)) % m


def mul(a: int, b: int, m: int) -> int:
    return (int(a) % m) * (int(b) % m) % m


def is_prime(x: int) -> bool:
    if x < 2:
        return False
    if x % 2 == 0:
        return x == 2
    d = 3
    while d * d <= x:
        if x % d == 0:
            return False
        d += 2
    return True


def is_power_of_two(x: int) -> bool:
    return x > 0 and x & (x - 1) == 0
