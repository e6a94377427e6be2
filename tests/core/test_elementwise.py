import numpy as np
import pytest

import mixprec as mp
from mixprec.exceptions import (
    DTypeMismatchError,
    PreconditionError,
    UnsupportedTypePairError,
)


def _buf(pair, values):
    return np.asarray(values, dtype=pair.compute).astype(pair.storage)


def _f32(buf):
    return buf.astype(np.float32)


def _rtol(pair):
    return 1e-2 if pair.reduced else 1e-6


@pytest.mark.parametrize("pair", mp.ALL_PAIRS, ids=str)
def test_set_zero_fills_every_storage_type(pair):
    y = _buf(pair, [7, 7, 7, 7, 7])
    mp.set(pair, 5, 0, y)
    assert np.all(_f32(y) == 0)


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_set_zero_matches_per_element_store(pair):
    bulk = _buf(pair, [3, 3, 3, 3, 3])
    stored = _buf(pair, [3, 3, 3, 3, 3])
    mp.set(pair, 5, 0, bulk)
    mp.set(pair, 5, 1, stored)
    mp.sub(pair, 5, stored, stored, stored)
    assert np.array_equal(_f32(bulk), _f32(stored))


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_set_negative_zero_clears_sign(pair):
    y = _buf(pair, [1, 1, 1])
    mp.set(pair, 3, -0.0, y)
    assert not np.any(np.signbit(_f32(y)))


def test_set_constant_only_first_n():
    y = np.zeros(5, dtype=np.int32)
    mp.set(mp.INT32, 3, 7, y)
    assert y.tolist() == [7, 7, 7, 0, 0]


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_binary_ops(pair):
    a = _buf(pair, [1, 2, 3, 4])
    b = _buf(pair, [4, 3, 2, 1])
    expected = {
        mp.add: [5, 5, 5, 5],
        mp.sub: [-3, -1, 1, 3],
        mp.mul: [4, 6, 6, 4],
        mp.div: [0.25, 2 / 3, 1.5, 4],
    }
    for op, values in expected.items():
        y = _buf(pair, [0, 0, 0, 0])
        op(pair, 4, a, b, y)
        np.testing.assert_allclose(_f32(y), values, rtol=_rtol(pair))


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_div_by_zero_follows_ieee(pair):
    a = _buf(pair, [1, -1, 0])
    b = _buf(pair, [0, 0, 0])
    y = _buf(pair, [0, 0, 0])
    mp.div(pair, 3, a, b, y)
    out = _f32(y)
    assert out[0] == np.inf
    assert out[1] == -np.inf
    assert np.isnan(out[2])


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_binary_op_in_place(pair):
    a = _buf(pair, [1.5, -2, 8])
    mp.add(pair, 3, a, a, a)
    assert _f32(a).tolist() == [3.0, -4.0, 16.0]


@pytest.mark.parametrize("pair", [mp.FLOAT16, mp.BFLOAT16], ids=str)
def test_emulated_result_is_single_rounding_of_compute_result(pair):
    rng = np.random.default_rng(0)
    a = rng.uniform(-4, 4, 64).astype(np.float32).astype(pair.storage)
    b = rng.uniform(-4, 4, 64).astype(np.float32).astype(pair.storage)
    y = np.zeros(64, dtype=pair.storage)
    mp.mul(pair, 64, a, b, y)
    expected = (a.astype(np.float32) * b.astype(np.float32)).astype(pair.storage)
    assert np.array_equal(_f32(y), _f32(expected))


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_powx(pair):
    a = _buf(pair, [1, 2, 3, -2])
    y = _buf(pair, [0, 0, 0, 0])
    mp.powx(pair, 3, a, 2, y)
    np.testing.assert_allclose(_f32(y)[:3], [1, 4, 9], rtol=_rtol(pair))
    mp.powx(pair, 4, a, 0.5, y)
    assert np.isnan(_f32(y)[3])


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_unary_ops(pair):
    a = _buf(pair, [-1.5, 0, 2])
    y = _buf(pair, [0, 0, 0])
    mp.sqr(pair, 3, a, y)
    assert _f32(y).tolist() == [2.25, 0.0, 4.0]
    mp.abs(pair, 3, a, y)
    assert _f32(y).tolist() == [1.5, 0.0, 2.0]
    mp.exp(pair, 3, a, y)
    np.testing.assert_allclose(_f32(y), np.exp([-1.5, 0, 2]), rtol=_rtol(pair))


def test_exp_overflow_in_half_storage():
    a = _buf(mp.FLOAT16, [12])
    y = _buf(mp.FLOAT16, [0])
    mp.exp(mp.FLOAT16, 1, a, y)
    assert np.isinf(y[0])


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_add_scalar(pair):
    y = _buf(pair, [1, 2, 3])
    mp.add_scalar(pair, 2, 0.5, y)
    assert _f32(y).tolist() == [1.5, 2.5, 3.0]


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_axpy_round_trip_restores_y(pair):
    x = _buf(pair, [1, 2, -3, 0.5])
    y = _buf(pair, [4, -1, 2, 8])
    original = y.copy()
    mp.axpy(pair, 4, 0.25, x, y)
    assert _f32(y).tolist() == [4.25, -0.5, 1.25, 8.125]
    mp.axpy(pair, 4, -0.25, x, y)
    assert np.array_equal(_f32(y), _f32(original))


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_axpby(pair):
    x = _buf(pair, [1, 2])
    y = _buf(pair, [3, 4])
    mp.axpby(pair, 2, 2, x, 0.5, y)
    assert _f32(y).tolist() == [3.5, 6.0]


def test_zero_count_leaves_output_untouched():
    y = _buf(mp.FLOAT16, [5, 5])
    mp.add(mp.FLOAT16, 0, y, y, y)
    mp.exp(mp.FLOAT32, 0, np.zeros(0, dtype=np.float32), np.zeros(0, dtype=np.float32))
    assert y.tolist() == [5.0, 5.0]


def test_negative_count_fails():
    y = np.zeros(2, dtype=np.float32)
    with pytest.raises(PreconditionError):
        mp.add(mp.FLOAT32, -1, y, y, y)


def test_short_buffer_fails():
    y = np.zeros(2, dtype=np.float16)
    with pytest.raises(PreconditionError):
        mp.sqr(mp.FLOAT16, 3, y, y)


def test_storage_dtype_must_match_pair():
    a = np.zeros(2, dtype=np.float32)
    y = np.zeros(2, dtype=np.float16)
    with pytest.raises(DTypeMismatchError):
        mp.add(mp.FLOAT16, 2, a, a, y)


def test_none_buffer_fails():
    with pytest.raises(PreconditionError):
        mp.abs(mp.FLOAT32, 1, None, np.zeros(1, dtype=np.float32))


@pytest.mark.parametrize("pair", ["float32", mp.INT32])
def test_powx_checks_pair_before_exponent(pair):
    y = np.zeros(2, dtype=np.float32)
    with pytest.raises(UnsupportedTypePairError):
        mp.powx(pair, 2, np.ones(2, dtype=np.float32), "not a number", y)
