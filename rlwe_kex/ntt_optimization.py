# rlwe_kex/ntt_optimization.py
# ------------------------------------------------------------
# Vectorised butterflies + the engine wrapper used by the key exchange.
#
# Within one sub-block j of a stage every butterfly shares the same
# twiddle W[index], and the pairs are (i, i+m) for i = j, j+2m, ...
# So a sub-block is just two strided slices:
#
#     top = x[j     :: 2m]
#     bot = x[j + m :: 2m]
#
# and the whole sub-block is one NumPy expression. Outputs are
# identical to the scalar reference in ntt.py.
#
# int64 is the widened intermediate: operands are reduced to [0, q)
# first and q < 2**31 (enforced by RingParams), so q*q < 2**62.
# ------------------------------------------------------------

from __future__ import annotations

from typing import Optional

import numpy as np

from . import ntt as reference
from .errors import ShapeError
from .params import RingParams
from .twiddle import TwiddleTable, get_twiddle_table


def _as_residues(x: np.ndarray, n: int, q: int) -> np.ndarray:
    if not isinstance(x, np.ndarray):
        raise TypeError(f"expected a NumPy array, got {type(x).__name__}")
    if x.shape != (n,):
        raise ShapeError("transform input", n, x.shape[0] if x.ndim == 1 else x.shape)
    if x.dtype != np.int64:
        raise TypeError(f"expected an int64 array, got dtype={x.dtype}")
    np.remainder(x, q, out=x)
    return x


def ntt_forward_inplace(x: np.ndarray, table: TwiddleTable) -> None:
    """In-place forward transform over an int64 array of length n."""
    n, q = table.n, table.q
    _as_residues(x, n, q)
    w = table.forward

    step = 1
    m = n >> 1
    while m >= 1:
        stride = m << 1
        index = 0
        for j in range(m):
            top = x[j::stride]
            bot = x[j + m::stride]
            t0 = (top + bot) % q
            t1 = ((top - bot) % q) * w[index] % q
            top[:] = t0
            bot[:] = t1
            index = (index + (n - step)) % n
        step <<= 1
        m >>= 1


def ntt_backward_inplace(x: np.ndarray, table: TwiddleTable) -> None:
    """In-place backward transform over an int64 array of length n (no 1/n scaling)."""
    n, q = table.n, table.q
    _as_residues(x, n, q)
    w_rev = table.backward

    step = n >> 1
    m = 1
    while m < n:
        stride = m << 1
        index = 0
        for j in range(m):
            top = x[j::stride]
            bot = x[j + m::stride]
            t1 = bot * w_rev[index] % q
            t0 = top.copy()
            top[:] = (t0 + t1) % q
            bot[:] = (t0 - t1) % q
            index = (index + (n - step)) % n
        step >>= 1
        m <<= 1


BACKENDS = ("numpy", "reference")


class NTTEngine:
    """
    Forward/backward transforms bound to one (n, q).

    backend="numpy" uses the vectorised butterflies above (arrays must be
    int64 NumPy arrays); backend="reference" runs the scalar loops in
    ntt.py and accepts any mutable sequence, NumPy arrays included.
    Both mutate their argument and return None.
    """

    def __init__(self, params: Optional[RingParams] = None, backend: str = "numpy"):
        self.params = params if params is not None else RingParams()
        backend = (backend or "numpy").lower()
        if backend not in BACKENDS:
            raise ValueError(f"Invalid backend={backend!r}. Use one of {BACKENDS}.")
        self.backend = backend
        self.table = get_twiddle_table(self.params)

    @property
    def n(self) -> int:
        return self.params.n

    @property
    def q(self) -> int:
        return self.params.q

    def forward(self, x) -> None:
        if self.backend == "numpy":
            ntt_forward_inplace(x, self.table)
        else:
            reference.forward_inplace(x, self.table)

    def backward(self, x) -> None:
        if self.backend == "numpy":
            ntt_backward_inplace(x, self.table)
        else:
            reference.backward_inplace(x, self.table)
