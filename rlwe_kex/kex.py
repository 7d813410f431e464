# rlwe_kex/kex.py
# ------------------------------------------------------------
# Toy key exchange over the butterfly network. This is not a
# production cryptosystem and makes no security claim.
#
#   generate_keypair():  sk = uniform poly,     pk = F(sk)
#   encapsulate(pk):     r  = uniform poly,     ct = F(r),  ss = r * pk
#   decapsulate(ct, sk): ss' = B(ct * sk)
#
# F / B are the forward / backward transforms, * is element-wise mod q.
# Note that encapsulate multiplies the *untransformed* r with the
# transformed pk, and F/B are not inverses, so ss and ss' generally
# differ.
# ------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ShapeError
from .ntt_optimization import NTTEngine
from .params import RingParams
from .sampling import NumpyUniformSource, RandomSource, sample_poly

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    private_key: np.ndarray  # coefficient form
    public_key: np.ndarray  # transform form


@dataclass(frozen=True)
class EncapsulationResult:
    ciphertext: np.ndarray  # transform form
    shared_secret: np.ndarray


class KeyExchange:
    def __init__(
        self,
        params: Optional[RingParams] = None,
        random_source: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        backend: str = "numpy",
    ):
        self.params = params if params is not None else RingParams()
        self.n = self.params.n
        self.q = self.params.q
        self.engine = NTTEngine(self.params, backend=backend)

        if random_source is None:
            random_source = NumpyUniformSource(self.q, seed=seed)
        self.random_source = random_source

    # -------------------------
    # Helpers
    # -------------------------

    def _poly(self, x, what: str) -> np.ndarray:
        """Copy x into a fresh int64 array, checking its length."""
        arr = np.array(x, dtype=np.int64, copy=True)
        if arr.ndim != 1 or arr.shape[0] != self.n:
            raise ShapeError(what, self.n, arr.shape[0] if arr.ndim == 1 else arr.shape)
        return arr % self.q

    def _pointwise_mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return (a % self.q) * (b % self.q) % self.q

    def sample_uniform(self) -> np.ndarray:
        return sample_poly(self.random_source, self.n, self.q)

    # -------------------------
    # Protocol
    # -------------------------

    def generate_keypair(self) -> KeyPair:
        private_key = self.sample_uniform()
        public_key = private_key.copy()
        self.engine.forward(public_key)
        logger.debug("generated key pair (n=%d, q=%d)", self.n, self.q)
        return KeyPair(private_key=private_key, public_key=public_key)

    def encapsulate(self, public_key) -> EncapsulationResult:
        pk = self._poly(public_key, "public key")

        random_poly = self.sample_uniform()
        ciphertext = random_poly.copy()
        self.engine.forward(ciphertext)
        shared_secret = self._pointwise_mul(random_poly, pk)

        logger.debug("encapsulated against public key (n=%d)", self.n)
        return EncapsulationResult(ciphertext=ciphertext, shared_secret=shared_secret)

    def decapsulate(self, ciphertext, private_key) -> np.ndarray:
        ct = self._poly(ciphertext, "ciphertext")
        sk = self._poly(private_key, "private key")

        shared_secret = self._pointwise_mul(ct, sk)
        self.engine.backward(shared_secret)

        logger.debug("decapsulated ciphertext (n=%d)", self.n)
        return shared_secret


# ------------------------------------------------------------
# Minimal self-test (optional)
# ------------------------------------------------------------
if __name__ == "__main__":
    from .compare import constant_time_compare

    kex = KeyExchange(RingParams(), seed=1)
    kp = kex.generate_keypair()
    enc = kex.encapsulate(kp.public_key)
    ss = kex.decapsulate(enc.ciphertext, kp.private_key)

    print("n:", kex.n, "| q:", kex.q, "| secrets match:", constant_time_compare(enc.shared_secret, ss))
