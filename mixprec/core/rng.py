"""
Random sampling into typed buffers.

The process-wide generator is a `Generator` handle owned by `mixprec.Config`.
Samplers borrow it: each call takes one fresh key from the handle, draws all
of its samples in the compute type and narrows them on write. Samplers never
reseed or replace the handle.

The handle is not thread-safe; concurrent sampling needs external locking.
"""

from __future__ import annotations

import random
from typing import Any, Optional, Tuple

import jax
import jax.numpy as jnp
import numpy as np

from mixprec.core.auxiliary import nextafter
from mixprec.core.buffers import as_output, check_count, storage_output
from mixprec.core.convert import from_compute, get
from mixprec.core.dtypes import (
    FLOAT_PAIRS,
    INT32_DTYPE,
    UINT32_DTYPE,
    TypePair,
    require_pair,
)
from mixprec.exceptions import DTypeMismatchError, PreconditionError


class Generator:
    """
    Seedable PRNG handle built on a JAX key.

    Attributes
    ----------
    seed: int
        Seed the handle was last (re)seeded with
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = random.randint(0, 2**32 - 1)
        self._seed = int(seed)
        self._key = jax.random.PRNGKey(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def next_key(self) -> jnp.ndarray:
        """
        Split the internal key and return a key suitable for one draw.
        """
        key, self._key = jax.random.split(self._key)
        return key

    def reseed(self, seed: int) -> None:
        self._seed = int(seed)
        self._key = jax.random.PRNGKey(self._seed)

    def snapshot(self) -> Tuple[int, jnp.ndarray]:
        return self._seed, self._key

    def restore(self, state: Tuple[int, jnp.ndarray]) -> None:
        self._seed, self._key = state


def borrow_key(generator: Optional[Generator]) -> jnp.ndarray:
    """
    Take one key from the shared generator.

    Raises
    ------
    PreconditionError
        If `generator` is None.
    """
    if generator is None:
        raise PreconditionError("A Generator is required; got None")
    return generator.next_key()


def rng_rand(generator: Generator) -> int:
    """Draw one uniformly distributed unsigned 32-bit integer."""
    return int(jax.random.bits(borrow_key(generator), (), dtype=jnp.uint32))


def uniform(
    pair: TypePair, n: int, a: Any, b: Any, r: np.ndarray, generator: Generator
) -> None:
    """
    Fill `r` with samples from the closed interval `[a, b]`.

    The half-open JAX primitive is given `nextafter(b)` as its upper bound so
    that `b` itself can be drawn.
    """
    require_pair("uniform", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    out = storage_output(pair, "r", r, n)
    lower = get(pair.compute, a)
    upper = get(pair.compute, b)
    if not lower <= upper:
        raise PreconditionError(f"uniform requires a <= b, got a={a}, b={b}")
    if n == 0:
        return
    samples = jax.random.uniform(
        borrow_key(generator),
        (n,),
        dtype=pair.compute,
        minval=lower,
        maxval=nextafter(pair.compute, upper),
    )
    # Rounding in the affine map can land on the nudged bound itself.
    samples = np.minimum(np.asarray(samples), upper)
    from_compute(pair, n, samples, out)


def gaussian(
    pair: TypePair,
    n: int,
    mean: Any,
    sigma: Any,
    r: np.ndarray,
    generator: Generator,
) -> None:
    """Fill `r` with normal samples of the given mean and standard deviation."""
    require_pair("gaussian", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    out = storage_output(pair, "r", r, n)
    mu = get(pair.compute, mean)
    scale = get(pair.compute, sigma)
    if not scale > 0:
        raise PreconditionError(f"gaussian requires sigma > 0, got {sigma}")
    if n == 0:
        return
    draws = np.asarray(jax.random.normal(borrow_key(generator), (n,), dtype=pair.compute))
    with np.errstate(all="ignore"):
        samples = mu + scale * draws
    from_compute(pair, n, samples, out)


def bernoulli(
    pair: TypePair, n: int, p: Any, r: np.ndarray, generator: Generator
) -> None:
    """
    Fill `r` with Bernoulli(p) draws.

    `r` is an int32 buffer (signed variant) or a uint32 buffer (unsigned
    variant); sampling is identical for both.
    """
    require_pair("bernoulli", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    out = as_output("r", r, n)
    if out.dtype not in (INT32_DTYPE, UINT32_DTYPE):
        raise DTypeMismatchError(f"bernoulli writes int32 or uint32, got {out.dtype}")
    prob = get(pair.compute, p)
    if not 0 <= prob <= 1:
        raise PreconditionError(f"bernoulli requires 0 <= p <= 1, got {p}")
    if n == 0:
        return
    draws = jax.random.bernoulli(borrow_key(generator), p=prob, shape=(n,))
    out[:n] = np.asarray(draws).astype(out.dtype)
