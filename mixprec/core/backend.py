"""
Vendor math backend for native float32/float64 pairs.

Routines run through `jax.numpy` on the default JAX device and hand back host
NumPy arrays; callers store the result into their own buffers. Contractions go
through `opt_einsum` with the JAX backend. Matrix products run at the
highest matmul precision.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np
import opt_einsum as oe

jax.config.update("jax_enable_x64", True)

MATMUL_PRECISION = "highest"


def _host(value: jax.Array) -> np.ndarray:
    return np.asarray(jax.device_get(value))


def _scalar(value: jax.Array) -> np.generic:
    return _host(value)[()]


def gemm(
    trans_a: bool,
    trans_b: bool,
    m: int,
    n: int,
    k: int,
    alpha: np.generic,
    a: np.ndarray,
    b: np.ndarray,
    beta: np.generic,
    c: np.ndarray,
) -> np.ndarray:
    """
    Row-major general matrix multiply, `alpha * op(A) @ op(B) + beta * C`.

    `a`, `b` and `c` are flat buffers holding exactly `m*k`, `k*n` and `m*n`
    elements. With `beta == 0` the contents of `c` are not read, so NaNs left
    in an uninitialised output do not leak into the result.

    Returns
    -------
    np.ndarray
        Flat result of `m*n` elements
    """
    op_a = a.reshape((k, m)).T if trans_a else a.reshape((m, k))
    op_b = b.reshape((n, k)).T if trans_b else b.reshape((k, n))
    with jax.default_matmul_precision(MATMUL_PRECISION):
        out = alpha * oe.contract(
            "ik,kj->ij", jnp.asarray(op_a), jnp.asarray(op_b), backend="jax"
        )
    if beta != 0:
        out = out + beta * jnp.asarray(c.reshape((m, n)))
    return _host(out).reshape(-1)


def gemv(
    trans_a: bool,
    m: int,
    n: int,
    alpha: np.generic,
    a: np.ndarray,
    x: np.ndarray,
    beta: np.generic,
    y: np.ndarray,
) -> np.ndarray:
    """
    Row-major matrix-vector product, `alpha * op(A) @ x + beta * y`, where
    `A` is `m x n`.
    """
    expr = "ji,j->i" if trans_a else "ij,j->i"
    with jax.default_matmul_precision(MATMUL_PRECISION):
        out = alpha * oe.contract(
            expr, jnp.asarray(a.reshape((m, n))), jnp.asarray(x), backend="jax"
        )
    if beta != 0:
        out = out + beta * jnp.asarray(y)
    return _host(out)


def axpy(alpha: np.generic, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return _host(alpha * jnp.asarray(x) + jnp.asarray(y))


def axpby(
    alpha: np.generic, x: np.ndarray, beta: np.generic, y: np.ndarray
) -> np.ndarray:
    return _host(alpha * jnp.asarray(x) + beta * jnp.asarray(y))


def scal(alpha: np.generic, x: np.ndarray) -> np.ndarray:
    return _host(alpha * jnp.asarray(x))


def copy(x: np.ndarray) -> np.ndarray:
    return _host(jnp.array(x, copy=True))


def dot(x: np.ndarray, y: np.ndarray) -> np.generic:
    return _scalar(
        jnp.dot(jnp.asarray(x), jnp.asarray(y), precision=jax.lax.Precision.HIGHEST)
    )


def asum(x: np.ndarray) -> np.generic:
    return _scalar(jnp.sum(jnp.abs(jnp.asarray(x))))


def add_scalar(alpha: np.generic, y: np.ndarray) -> np.ndarray:
    return _host(jnp.asarray(y) + alpha)


def add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return _host(jnp.add(a, b))


def sub(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return _host(jnp.subtract(a, b))


def mul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return _host(jnp.multiply(a, b))


def div(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return _host(jnp.divide(a, b))


def powx(a: np.ndarray, b: np.generic) -> np.ndarray:
    return _host(jnp.power(a, b))


def sqr(a: np.ndarray) -> np.ndarray:
    return _host(jnp.square(a))


def exp(a: np.ndarray) -> np.ndarray:
    return _host(jnp.exp(a))


def abs(a: np.ndarray) -> np.ndarray:
    return _host(jnp.abs(a))
