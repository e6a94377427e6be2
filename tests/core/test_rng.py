import jax.numpy as jnp
import numpy as np
import pytest

import mixprec as mp
from mixprec.core.rng import Generator, borrow_key
from mixprec.exceptions import DTypeMismatchError, PreconditionError


def _as64(buf):
    return buf.astype(np.float64)


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_uniform_stays_in_bounds(pair, generator):
    r = np.zeros(2000, dtype=pair.storage)
    mp.uniform(pair, 2000, -2.0, 3.0, r, generator)
    values = _as64(r)
    assert values.min() >= -2.0
    assert values.max() <= 3.0
    assert values.std() > 0.5


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_uniform_can_draw_upper_bound(pair, generator):
    # b is one storage ulp above a, so about half the draws should land on it.
    b = 1.0 + float(jnp.finfo(pair.storage).eps)
    r = np.zeros(1000, dtype=pair.storage)
    mp.uniform(pair, 1000, 1.0, b, r, generator)
    values = _as64(r)
    assert np.all((values >= 1.0) & (values <= b))
    assert np.any(values == b)
    assert np.any(values == 1.0)


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_uniform_degenerate_interval(pair, generator):
    r = np.zeros(16, dtype=pair.storage)
    mp.uniform(pair, 16, 0.5, 0.5, r, generator)
    assert np.all(_as64(r) == 0.5)


@pytest.mark.parametrize("a, b", [(1.0, 0.0), (np.nan, 1.0), (0.0, np.nan)])
def test_uniform_rejects_bad_interval(a, b, generator):
    r = np.zeros(4, dtype=np.float32)
    with pytest.raises(PreconditionError):
        mp.uniform(mp.FLOAT32, 4, a, b, r, generator)


@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_gaussian_moments(pair, generator):
    r = np.zeros(20000, dtype=pair.storage)
    mp.gaussian(pair, 20000, 1.0, 2.0, r, generator)
    values = _as64(r)
    assert abs(values.mean() - 1.0) < 0.1
    assert abs(values.std() - 2.0) < 0.1


@pytest.mark.parametrize("sigma", [0.0, -1.0, np.nan])
def test_gaussian_rejects_non_positive_sigma(sigma, generator):
    r = np.zeros(4, dtype=np.float64)
    with pytest.raises(PreconditionError):
        mp.gaussian(mp.FLOAT64, 4, 0.0, sigma, r, generator)


@pytest.mark.parametrize("dtype", [np.int32, np.uint32])
@pytest.mark.parametrize("pair", mp.FLOAT_PAIRS, ids=str)
def test_bernoulli_extremes(pair, dtype, generator):
    r = np.full(64, 7, dtype=dtype)
    mp.bernoulli(pair, 64, 0.0, r, generator)
    assert np.all(r == 0)
    mp.bernoulli(pair, 64, 1.0, r, generator)
    assert np.all(r == 1)


def test_bernoulli_mean(generator):
    r = np.zeros(20000, dtype=np.int32)
    mp.bernoulli(mp.FLOAT32, 20000, 0.3, r, generator)
    assert set(np.unique(r).tolist()) <= {0, 1}
    assert abs(r.mean() - 0.3) < 0.02


@pytest.mark.parametrize("p", [-0.1, 1.5, np.nan])
def test_bernoulli_rejects_bad_probability(p, generator):
    r = np.zeros(4, dtype=np.int32)
    with pytest.raises(PreconditionError):
        mp.bernoulli(mp.FLOAT64, 4, p, r, generator)


def test_bernoulli_requires_integer_output(generator):
    with pytest.raises(DTypeMismatchError):
        mp.bernoulli(mp.FLOAT32, 4, 0.5, np.zeros(4, dtype=np.float32), generator)


def test_same_seed_reproduces_samples():
    first = np.zeros(32, dtype=np.float16)
    second = np.zeros(32, dtype=np.float16)
    mp.uniform(mp.FLOAT16, 32, 0, 1, first, Generator(seed=42))
    mp.uniform(mp.FLOAT16, 32, 0, 1, second, Generator(seed=42))
    assert np.array_equal(first.view(np.uint16), second.view(np.uint16))

    other = np.zeros(32, dtype=np.float16)
    mp.uniform(mp.FLOAT16, 32, 0, 1, other, Generator(seed=43))
    assert not np.array_equal(first.view(np.uint16), other.view(np.uint16))


def test_consecutive_draws_differ(generator):
    first = np.zeros(8, dtype=np.float64)
    second = np.zeros(8, dtype=np.float64)
    mp.gaussian(mp.FLOAT64, 8, 0, 1, first, generator)
    mp.gaussian(mp.FLOAT64, 8, 0, 1, second, generator)
    assert not np.array_equal(first, second)


def test_sampling_borrows_the_handle(generator):
    seed = generator.seed
    r = np.zeros(8, dtype=np.float32)
    mp.uniform(mp.FLOAT32, 8, 0, 1, r, generator)
    mp.gaussian(mp.FLOAT32, 8, 0, 1, r, generator)
    assert generator.seed == seed


def test_zero_count_does_not_advance_generator(generator):
    _, key = generator.snapshot()
    mp.uniform(mp.FLOAT32, 0, 0, 1, np.zeros(0, dtype=np.float32), generator)
    mp.bernoulli(mp.FLOAT32, 0, 0.5, np.zeros(0, dtype=np.int32), generator)
    _, after = generator.snapshot()
    assert np.array_equal(np.asarray(key), np.asarray(after))


def test_missing_generator_is_rejected():
    with pytest.raises(PreconditionError):
        borrow_key(None)
    with pytest.raises(PreconditionError):
        mp.uniform(mp.FLOAT32, 2, 0, 1, np.zeros(2, dtype=np.float32), None)


def test_rng_rand_range(generator):
    draws = [mp.rng_rand(generator) for _ in range(16)]
    assert all(0 <= d < 2**32 for d in draws)
    assert len(set(draws)) > 1


def test_config_generator_is_shared():
    with mp.Session(seed=5) as cfg:
        r = np.zeros(4, dtype=np.float32)
        mp.uniform(mp.FLOAT32, 4, 0, 1, r, cfg.generator)
        assert cfg.random_seed == 5
