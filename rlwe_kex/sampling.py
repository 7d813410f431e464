# rlwe_kex/sampling.py
# ------------------------------------------------------------
# Random sources: "one uniform integer in [0, q) per call".
#
# The key exchange only ever calls source() with no arguments, so any
# zero-argument callable works. These three cover the usual cases:
#   - NumpyUniformSource: seeded, reproducible (tests, benchmarks)
#   - SystemUniformSource: OS entropy via `secrets`
#   - ConstantSource: fixed value, for regression fixtures
# Whether a source is cryptographically strong is the caller's choice.
# ------------------------------------------------------------

from __future__ import annotations

import numbers
import secrets
from typing import Callable, Optional

import numpy as np

RandomSource = Callable[[], int]


class NumpyUniformSource:
    """Uniform draws from np.random.default_rng(seed)."""

    def __init__(self, q: int, seed: Optional[int] = None):
        self.q = int(q)
        self.rng = np.random.default_rng(seed)

    def __call__(self) -> int:
        return int(self.rng.integers(0, self.q))


class SystemUniformSource:
    def __init__(self, q: int):
        self.q = int(q)

    def __call__(self) -> int:
        return secrets.randbelow(self.q)


class ConstantSource:
    def __init__(self, value: int):
        self.value = int(value)

    def __call__(self) -> int:
        return self.value


def sample_poly(source: RandomSource, n: int, q: int) -> np.ndarray:
    """Draw n coefficients, one source call each."""
    poly = np.empty(n, dtype=np.int64)
    for i in range(n):
        v = source()
        if not isinstance(v, numbers.Integral):
            raise ValueError(f"random source returned non-integer {v!r}")
        if not 0 <= v < q:
            raise ValueError(f"random source returned {v}, outside [0, {q})")
        poly[i] = v
    return poly
