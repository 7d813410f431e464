# experiments/benchmark_full.py
# Benchmark: scalar reference vs vectorised NumPy butterflies
#
# Measures:
# - Time: forward transform, backward transform
# - Time: keygen, encapsulate, decapsulate
# - Memory: peak tracemalloc (KiB) over a batch of exchanges
# - Consistency: mismatch count between reference and NumPy outputs
# - Scalability: performance vs n (skips invalid (n, q) automatically)
#
# Run:
#   python3 -m experiments.benchmark_full
# or:
#   python3 experiments/benchmark_full.py
#
# Optional:
#   python3 -m experiments.benchmark_full --n 64 128 256 512
#   python3 -m experiments.benchmark_full --repeat 11 --consistency-trials 50
#   python3 -m experiments.benchmark_full --q 12289 --seed 1

import os
import sys
import time
import tracemalloc
import argparse
import logging

import numpy as np


# --- make imports work whether run as module or script ---
_THIS_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_THIS_DIR)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from rlwe_kex.errors import ConfigurationError
from rlwe_kex.kex import KeyExchange
from rlwe_kex.ntt_optimization import NTTEngine
from rlwe_kex.params import DEFAULT_Q, RingParams

logger = logging.getLogger("rlwe_kex.benchmark")


def _now_ns() -> int:
    return time.perf_counter_ns()


def _time_quantiles_s(fn, repeat: int = 21, warmup: int = 5):
    """Return (median, p25, p75) seconds."""
    for _ in range(warmup):
        fn()
    times = []
    for _ in range(repeat):
        t0 = _now_ns()
        fn()
        t1 = _now_ns()
        times.append((t1 - t0) / 1e9)
    times = sorted(times)
    med = times[len(times) // 2]
    p25 = times[int(0.25 * (len(times) - 1))]
    p75 = times[int(0.75 * (len(times) - 1))]
    return med, p25, p75


def _peak_mem_kib_during(fn) -> float:
    tracemalloc.start()
    fn()
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return peak / 1024.0


def _bench_transforms(engine, repeat: int, warmup: int, seed: int):
    n, q = engine.n, engine.q
    rng = np.random.default_rng(seed)
    base = rng.integers(0, q, size=n, dtype=np.int64)

    def fwd():
        x = base.copy()
        engine.forward(x)

    def bwd():
        x = base.copy()
        engine.backward(x)

    f_med, f_p25, f_p75 = _time_quantiles_s(fwd, repeat=repeat, warmup=warmup)
    b_med, b_p25, b_p75 = _time_quantiles_s(bwd, repeat=repeat, warmup=warmup)
    return {
        "fwd_us": (f_med * 1e6, f_p25 * 1e6, f_p75 * 1e6),
        "bwd_us": (b_med * 1e6, b_p25 * 1e6, b_p75 * 1e6),
    }


def _bench_protocol(kex, repeat: int, warmup: int):
    keypair = kex.generate_keypair()
    enc = kex.encapsulate(keypair.public_key)

    kg = _time_quantiles_s(kex.generate_keypair, repeat=repeat, warmup=warmup)
    en = _time_quantiles_s(lambda: kex.encapsulate(keypair.public_key), repeat=repeat, warmup=warmup)
    de = _time_quantiles_s(
        lambda: kex.decapsulate(enc.ciphertext, keypair.private_key), repeat=repeat, warmup=warmup
    )

    def mem_run():
        for _ in range(20):
            kp = kex.generate_keypair()
            e = kex.encapsulate(kp.public_key)
            kex.decapsulate(e.ciphertext, kp.private_key)

    peak_kib = _peak_mem_kib_during(mem_run)

    return {
        "keygen_us": tuple(t * 1e6 for t in kg),
        "encaps_us": tuple(t * 1e6 for t in en),
        "decaps_us": tuple(t * 1e6 for t in de),
        "peak_kib": peak_kib,
    }


def _bench_consistency(params, trials: int, seed: int):
    """Compare reference vs NumPy transforms on random inputs."""
    rng = np.random.default_rng(seed)
    ref = NTTEngine(params, backend="reference")
    vec = NTTEngine(params, backend="numpy")

    mismatches = 0
    first_examples = []
    for i in range(trials):
        x = rng.integers(0, params.q, size=params.n, dtype=np.int64)
        for direction in ("forward", "backward"):
            a = x.copy()
            b = x.copy()
            getattr(ref, direction)(a)
            getattr(vec, direction)(b)
            if np.any(a != b):
                mismatches += 1
                if len(first_examples) < 3:
                    bad = np.where(a != b)[0].tolist()
                    first_examples.append({"trial": i, "direction": direction, "positions": bad[:20]})

    return {
        "trials": trials * 2,
        "mismatch_count": mismatches,
        "examples": first_examples,
    }


def _fmt_iqr(triple) -> str:
    med, p25, p75 = triple
    return f"{med:,.2f} [{p25:,.2f}, {p75:,.2f}]"


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--q", type=int, default=DEFAULT_Q)
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--n", type=int, nargs="*", default=[64, 128, 256, 512, 1024])
    ap.add_argument("--consistency-trials", type=int, default=20)
    ap.add_argument("--repeat", type=int, default=21)
    ap.add_argument("--warmup", type=int, default=5)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    print("Benchmark: reference vs NumPy butterflies")
    print(f"q={args.q}, seed={args.seed}")
    print()

    header = (
        f"{'n':<6}"
        f"{'backend':<11}"
        f"{'fwd_us med[p25,p75]':>26}"
        f"{'bwd_us med[p25,p75]':>26}"
        f"{'keygen_us':>12}"
        f"{'encaps_us':>12}"
        f"{'decaps_us':>12}"
        f"{'peak(KiB)':>11}"
    )
    print(header)
    print("-" * len(header))

    for n in args.n:
        try:
            params = RingParams.create(n, args.q)
        except ConfigurationError as e:
            logger.warning("skipping n=%d: %s", n, e)
            print(f"{n:<6}{'SKIP':<11}  -> {e}")
            continue

        for backend in ("reference", "numpy"):
            engine = NTTEngine(params, backend=backend)
            kex = KeyExchange(params, seed=args.seed + n, backend=backend)

            tr = _bench_transforms(engine, repeat=args.repeat, warmup=args.warmup, seed=args.seed + n)
            pr = _bench_protocol(kex, repeat=args.repeat, warmup=args.warmup)

            print(
                f"{n:<6}{backend:<11}"
                f"{_fmt_iqr(tr['fwd_us']):>26}"
                f"{_fmt_iqr(tr['bwd_us']):>26}"
                f"{pr['keygen_us'][0]:>12,.1f}"
                f"{pr['encaps_us'][0]:>12,.1f}"
                f"{pr['decaps_us'][0]:>12,.1f}"
                f"{pr['peak_kib']:>11.2f}"
            )

        cons = _bench_consistency(params, trials=args.consistency_trials, seed=args.seed + 999)
        print(f"  Consistency (n={n}): mismatches={cons['mismatch_count']}/{cons['trials']}")
        if cons["examples"]:
            print(f"  Examples: {cons['examples']}")
        print()

    print("Notes:")
    print("- Timing uses median with [p25,p75] over repeats; warmup runs are discarded.")
    print("- keygen/encaps/decaps columns show the median only.")
    print("- Peak memory uses tracemalloc (Python allocations) over 20 full exchanges, in KiB.")
    print("- Consistency compares reference vs NumPy transform outputs on random inputs.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
