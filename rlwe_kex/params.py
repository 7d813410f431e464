# rlwe_kex/params.py
# ------------------------------------------------------------
# Ring parameters (n, q) and their one-time validation.
#
# validate_parameters() reports a failure as a value so a caller can
# check it before any table or key material exists; constructing a
# RingParams raises ConfigurationError on the same conditions.
#
# No check that q = 1 (mod 2n) is made: the twiddle tables are linear
# sequences, not roots of unity, whatever q is.
# ------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError, ParameterError
from .modular import is_power_of_two, is_prime

logger = logging.getLogger(__name__)

DEFAULT_N = 1024
DEFAULT_Q = 40961

# q * q must stay below 2**63 for the int64 butterflies
MAX_MODULUS = 1 << 31


def validate_parameters(n: int, q: int) -> Optional[ParameterError]:
    """Return None when (n, q) is usable, otherwise the reason it is not."""
    if not is_power_of_two(n):
        return ParameterError.N_NOT_POWER_OF_TWO
    if q >= MAX_MODULUS:
        return ParameterError.MODULUS_TOO_WIDE
    if not is_prime(q):
        return ParameterError.Q_NOT_PRIME
    return None


@dataclass(frozen=True)
class RingParams:
    n: int = DEFAULT_N
    q: int = DEFAULT_Q

    def __post_init__(self):
        err = validate_parameters(self.n, self.q)
        if err is not None:
            raise ConfigurationError(
                f"Invalid parameters (n,q)=({self.n},{self.q}): {err.value}", kind=err
            )

    @classmethod
    def create(cls, n: int = DEFAULT_N, q: int = DEFAULT_Q) -> "RingParams":
        """Validate and build; accepts anything int() accepts (e.g. argparse strings)."""
        params = cls(n=int(n), q=int(q))
        logger.debug("ring parameters accepted: n=%d q=%d", params.n, params.q)
        return params

    @property
    def log_n(self) -> int:
        return self.n.bit_length() - 1
