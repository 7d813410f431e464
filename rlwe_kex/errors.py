# rlwe_kex/errors.py
# Exceptions raised by the ring engine and the key exchange.

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union


class ParameterError(Enum):
    """Why a (n, q) pair was rejected."""

    N_NOT_POWER_OF_TWO = "n must be a power of 2 for FFT compatibility."
    Q_NOT_PRIME = "q must be a prime number."
    MODULUS_TOO_WIDE = "q must be below 2**31 so products fit in int64."


class ConfigurationError(ValueError):
    """Invalid (n, q). Fatal: nothing may be built from these parameters."""

    def __init__(self, message: str, kind: Optional[ParameterError] = None):
        super().__init__(message)
        self.kind = kind


class ShapeError(ValueError):
    """An array whose length does not match the ring dimension n."""

    def __init__(self, what: str, expected: int, got: Union[int, Tuple[int, ...]]):
        # got is a length for 1-D input, otherwise the full shape
        super().__init__(f"{what} length mismatch: expected n={expected}, got {got}")
        self.expected = expected
        self.got = got
