# rlwe_kex/codec.py
# Fixed-width wire form for polynomials: n little-endian uint32 words.

from __future__ import annotations

import numpy as np

from .errors import ShapeError

WORD_BYTES = 4
_WIRE_DTYPE = np.dtype("<u4")


def encode_poly(poly, q: int) -> bytes:
    arr = np.asarray(poly, dtype=np.int64)
    if arr.ndim != 1:
        raise ValueError("encode_poly expects a 1-D polynomial")
    if arr.size and (arr.min() < 0 or arr.max() >= q):
        raise ValueError(f"coefficients must lie in [0, {q})")
    return arr.astype(_WIRE_DTYPE).tobytes()


def decode_poly(data: bytes, n: int, q: int) -> np.ndarray:
    if len(data) != n * WORD_BYTES:
        raise ShapeError("encoded polynomial", n, len(data) // WORD_BYTES)
    arr = np.frombuffer(data, dtype=_WIRE_DTYPE).astype(np.int64)
    if n and arr.max() >= q:
        raise ValueError(f"decoded coefficient outside [0, {q})")
    return arr
