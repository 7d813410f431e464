"""Tests for parameter validation and the twiddle tables."""

import threading
import time

import numpy as np
import pytest

from rlwe_kex.errors import ConfigurationError, ParameterError
from rlwe_kex.params import DEFAULT_N, DEFAULT_Q, RingParams, validate_parameters
from rlwe_kex.twiddle import TwiddleTable, get_twiddle_table


def test_defaults_are_valid():
    assert validate_parameters(DEFAULT_N, DEFAULT_Q) is None
    p = RingParams()
    assert (p.n, p.q) == (1024, 40961)
    assert p.log_n == 10


@pytest.mark.parametrize(
    "n,q,kind",
    [
        (0, 5, ParameterError.N_NOT_POWER_OF_TWO),
        (3, 5, ParameterError.N_NOT_POWER_OF_TWO),
        (1023, 40961, ParameterError.N_NOT_POWER_OF_TWO),
        (4, 1, ParameterError.Q_NOT_PRIME),
        (4, 40960, ParameterError.Q_NOT_PRIME),
        (4, 2147483659, ParameterError.MODULUS_TOO_WIDE),
    ],
)
def test_validate_reports_kind(n, q, kind):
    assert validate_parameters(n, q) is kind
    with pytest.raises(ConfigurationError) as exc:
        RingParams.create(n, q)
    assert exc.value.kind is kind


def test_create_coerces_strings():
    p = RingParams.create("16", "97")
    assert p == RingParams(16, 97)


def test_twiddle_values():
    t = TwiddleTable.build(4, 5)
    assert t.forward.tolist() == [1, 2, 3, 4]
    assert t.backward.tolist() == [4, 3, 2, 1]


def test_twiddle_wraps_when_n_exceeds_q():
    t = TwiddleTable.build(8, 5)
    assert t.forward.tolist() == [1, 2, 3, 4, 0, 1, 2, 3]
    assert t.backward.tolist() == [4, 3, 2, 1, 0, 4, 3, 2]


def test_twiddle_is_pure_function_of_params():
    a = TwiddleTable.build(DEFAULT_N, DEFAULT_Q)
    b = TwiddleTable.build(DEFAULT_N, DEFAULT_Q)
    assert np.array_equal(a.forward, b.forward)
    assert np.array_equal(a.backward, b.backward)


def test_twiddle_tables_read_only():
    t = get_twiddle_table(RingParams(16, 97))
    with pytest.raises(ValueError):
        t.forward[0] = 7
    with pytest.raises(ValueError):
        t.backward[0] = 7


def test_twiddle_table_built_once():
    params = RingParams(32, 193)
    seen = []

    def worker():
        seen.append(get_twiddle_table(params))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    assert all(t is seen[0] for t in seen)


@pytest.mark.parametrize("q", [(1 << 45) + 59, (1 << 61) - 1])
def test_wide_prime_rejected_without_primality_scan(q):
    t0 = time.perf_counter()
    assert validate_parameters(4, q) is ParameterError.MODULUS_TOO_WIDE
    assert time.perf_counter() - t0 < 0.05


def test_wide_composite_reported_as_too_wide():
    assert validate_parameters(4, 1 << 40) is ParameterError.MODULUS_TOO_WIDE
