"""Tests for scalar modular arithmetic and the parameter predicates."""

import pytest

from rlwe_kex.modular import add, is_power_of_two, is_prime, mul, reduce, sub

Q = 40961


@pytest.mark.parametrize("x", [2, 3, 5, 7, 97, 3329, 12289, 40961, 65537])
def test_is_prime_primes(x):
    assert is_prime(x)


@pytest.mark.parametrize("x", [-7, 0, 1, 4, 9, 40959, 40960, 40962, 40963, 65535])
def test_is_prime_composites(x):
    assert not is_prime(x)


@pytest.mark.parametrize("x", [1, 2, 4, 1024])
def test_power_of_two_accepts(x):
    assert is_power_of_two(x)


@pytest.mark.parametrize("x", [0, 3, 1023, -4])
def test_power_of_two_rejects(x):
    assert not is_power_of_two(x)


def test_reduce_negative_and_large():
    assert reduce(-1, Q) == Q - 1
    assert reduce(Q, Q) == 0
    assert reduce(2 * Q + 5, Q) == 5


def test_sub_wraps():
    assert sub(0, 1, Q) == Q - 1
    assert sub(3, 10, 5) == 3


def test_add_wrap():
    assert add(Q - 1, 2, Q) == 1


def test_mul_large_operands():
    # product exceeds 2**64 before reduction
    big = (1 << 40) + 3
    assert mul(big, big, Q) == (big * big) % Q
    assert mul(Q - 1, Q - 1, Q) == 1


def test_add_sub_inverse_and_mul_commutes():
    values = [0, 1, 2, 17, Q // 2, Q - 2, Q - 1]
    for a in values:
        for b in values:
            s = add(a, b, Q)
            d = sub(a, b, Q)
            p = mul(a, b, Q)
            assert sub(s, b, Q) == a
            assert p == mul(b, a, Q)
            for r in (s, d, p):
                assert 0 <= r < Q
