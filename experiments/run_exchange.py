# experiments/run_exchange.py
# One full key exchange: keygen -> encapsulate -> decapsulate -> compare.
#
# Run:
#   python3 -m experiments.run_exchange
#   python3 experiments/run_exchange.py --n 16 --q 97 --seed 1 --verbose
#   python3 experiments/run_exchange.py --constant 1          # regression fixture
#   python3 experiments/run_exchange.py --trials 200          # agreement rate

import os
import sys
import argparse
import logging

import numpy as np


# --- make imports work whether run as module or script ---
_THIS_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_THIS_DIR)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from rlwe_kex.compare import constant_time_compare
from rlwe_kex.errors import ConfigurationError
from rlwe_kex.kex import KeyExchange
from rlwe_kex.params import DEFAULT_N, DEFAULT_Q, RingParams
from rlwe_kex.sampling import ConstantSource, NumpyUniformSource, SystemUniformSource

logger = logging.getLogger("rlwe_kex.run_exchange")


def make_source(args, q):
    if args.constant is not None:
        return ConstantSource(args.constant)
    if args.seed is None:
        return SystemUniformSource(q)
    return NumpyUniformSource(q, seed=args.seed)


def run_once(kex):
    keypair = kex.generate_keypair()
    enc = kex.encapsulate(keypair.public_key)
    receiver_secret = kex.decapsulate(enc.ciphertext, keypair.private_key)
    match = constant_time_compare(enc.shared_secret, receiver_secret)
    return keypair, enc, receiver_secret, match


def evaluate_agreement(kex, trials):
    matches = 0
    equal_coeffs = 0
    for _ in range(trials):
        _, enc, receiver_secret, match = run_once(kex)
        matches += int(match)
        equal_coeffs += int(np.sum(enc.shared_secret == receiver_secret))

    return {
        "trials": int(trials),
        "matches": int(matches),
        "match_rate": matches / trials if trials else 0.0,
        "coeff_agreement": equal_coeffs / (trials * kex.n) if trials else 0.0,
    }


def _short(poly, k=8):
    head = ", ".join(str(int(v)) for v in poly[:k])
    return f"[{head}{', ...' if len(poly) > k else ''}] (n={len(poly)})"


def main(argv=None):
    ap = argparse.ArgumentParser(description="Run the toy ring key exchange once.")
    ap.add_argument("--n", type=int, default=DEFAULT_N)
    ap.add_argument("--q", type=int, default=DEFAULT_Q)
    ap.add_argument("--seed", type=int, default=None, help="seed a NumPy source; default uses OS entropy")
    ap.add_argument("--constant", type=int, default=None, help="every draw returns this value")
    ap.add_argument("--backend", choices=["numpy", "reference"], default="numpy")
    ap.add_argument("--trials", type=int, default=0, help="also measure agreement over this many runs")
    ap.add_argument("--full", action="store_true", help="print whole polynomials")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = RingParams.create(args.n, args.q)
    except ConfigurationError as e:
        logger.error("Error: %s", e)
        return 2

    kex = KeyExchange(params, random_source=make_source(args, params.q), backend=args.backend)
    fmt = (lambda p: p.tolist()) if args.full else _short

    keypair, enc, receiver_secret, match = run_once(kex)

    print(f"n={params.n}, q={params.q}, backend={args.backend}")
    print("Private Key:", fmt(keypair.private_key))
    print("Public Key:", fmt(keypair.public_key))
    print("Ciphertext:", fmt(enc.ciphertext))
    print("Sender's Shared Secret:", fmt(enc.shared_secret))
    print("Receiver's Shared Secret:", fmt(receiver_secret))
    print("Shared secrets match (constant time):", match)

    if args.trials > 0:
        res = evaluate_agreement(kex, args.trials)
        print()
        print("=== Agreement over", res["trials"], "runs ===")
        print("match_rate:", res["match_rate"])
        print("coeff_agreement:", res["coeff_agreement"])

    return 0


if __name__ == "__main__":
    sys.exit(main())
