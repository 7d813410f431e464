# rlwe_kex/twiddle.py
# ------------------------------------------------------------
# Twiddle factor tables for the butterfly network.
#
#   forward[i]  = (i + 1)     mod q
#   backward[i] = (q - i - 1) mod q        for i in [0, n)
#
# These are NOT powers of a primitive n-th root of unity, so the
# forward/backward pair built on them is not an exact NTT/inverse-NTT
# pair and the outputs are whatever these tables produce.
#
# Tables are built once per (n, q), frozen (write flag cleared) and
# shared by every engine in the process.
# ------------------------------------------------------------

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from .params import RingParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwiddleTable:
    n: int
    q: int
    forward: np.ndarray
    backward: np.ndarray

    @classmethod
    def build(cls, n: int, q: int) -> "TwiddleTable":
        """Pure constructor: the same (n, q) always gives equal arrays."""
        idx = np.arange(n, dtype=np.int64)
        forward = (idx + 1) % q
        backward = (q - idx - 1) % q
        forward.setflags(write=False)
        backward.setflags(write=False)
        return cls(n=n, q=q, forward=forward, backward=backward)


_tables: Dict[Tuple[int, int], TwiddleTable] = {}
_tables_lock = threading.Lock()


def get_twiddle_table(params: RingParams) -> TwiddleTable:
    """Return the process-wide table for params, building it on first use."""
    key = (params.n, params.q)
    table = _tables.get(key)
    if table is not None:
        return table
    with _tables_lock:
        table = _tables.get(key)
        if table is None:
            table = TwiddleTable.build(params.n, params.q)
            _tables[key] = table
            logger.debug("built twiddle tables for n=%d q=%d", params.n, params.q)
    return table
