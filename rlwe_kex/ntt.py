# rlwe_kex/ntt.py
# Scalar reference butterflies, written directly on top of modular.py.
# Slow, but every step reads like the definition; the vectorised engine
# in ntt_optimization.py is checked against it.

from __future__ import annotations

from typing import MutableSequence

from .errors import ShapeError
from .modular import add, mul, reduce, sub
from .twiddle import TwiddleTable


def _check_length(x, n: int) -> None:
    if len(x) != n:
        raise ShapeError("transform input", n, len(x))


def forward_inplace(x: MutableSequence[int], table: TwiddleTable) -> None:
    """
    Forward transform, in place.

    Stage size m runs n/2, n/4, ..., 1. Inside a stage the twiddle
    cursor starts at 0 and, after each of the m sub-blocks, moves by
    (n - step) mod n; step starts at 1 and doubles per stage.
    Butterfly: (x[i], x[i+m]) -> (x[i] + x[i+m], (x[i] - x[i+m]) * W[index]).
    """
    n, q = table.n, table.q
    _check_length(x, n)
    w = table.forward

    for i in range(n):
        x[i] = reduce(x[i], q)

    step = 1
    m = n >> 1
    while m >= 1:
        index = 0
        for j in range(m):
            for i in range(j, n, m << 1):
                t0 = add(x[i], x[i + m], q)
                t1 = mul(sub(x[i], x[i + m], q), w[index], q)
                x[i] = t0
                x[i + m] = t1
            index = reduce(index + (n - step), n)
        step <<= 1
        m >>= 1


def backward_inplace(x: MutableSequence[int], table: TwiddleTable) -> None:
    """
    Backward transform, in place.

    Stage size m runs 1, 2, ..., n/2 with step starting at n/2 and
    halving per stage; twiddles come from the backward table.
    Butterfly: t = x[i+m] * W_rev[index]; (x[i], x[i+m]) -> (x[i] + t, x[i] - t).
    No 1/n scaling is applied.
    """
    n, q = table.n, table.q
    _check_length(x, n)
    w_rev = table.backward

    for i in range(n):
        x[i] = reduce(x[i], q)

    step = n >> 1
    m = 1
    while m < n:
        index = 0
        for j in range(m):
            for i in range(j, n, m << 1):
                t0 = x[i]
                t1 = mul(x[i + m], w_rev[index], q)
                x[i] = add(t0, t1, q)
                x[i + m] = sub(t0, t1, q)
            index = reduce(index + (n - step), n)
        step >>= 1
        m <<= 1
