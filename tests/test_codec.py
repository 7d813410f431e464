"""Tests for the fixed-width polynomial encoding."""

import numpy as np
import pytest

from rlwe_kex.codec import WORD_BYTES, decode_poly, encode_poly
from rlwe_kex.errors import ShapeError
from rlwe_kex.kex import KeyExchange
from rlwe_kex.params import RingParams


def test_layout_is_little_endian_u32():
    assert encode_poly([1, 258], 40961) == b"\x01\x00\x00\x00\x02\x01\x00\x00"


def test_public_key_survives_encoding():
    params = RingParams(64, 12289)
    kp = KeyExchange(params, seed=4).generate_keypair()
    data = encode_poly(kp.public_key, params.q)
    assert len(data) == params.n * WORD_BYTES
    assert np.array_equal(decode_poly(data, params.n, params.q), kp.public_key)


def test_encode_rejects_out_of_range():
    with pytest.raises(ValueError):
        encode_poly([0, 5], 5)
    with pytest.raises(ValueError):
        encode_poly([-1, 0], 5)


def test_decode_wrong_length():
    with pytest.raises(ShapeError):
        decode_poly(b"\x00" * 12, 4, 5)


def test_decode_out_of_range():
    with pytest.raises(ValueError):
        decode_poly(b"\x05\x00\x00\x00", 1, 5)
