"""
Dense linear algebra over typed buffers.

Matrices are flat row-major buffers. Leading dimensions follow from the
transpose flags: `lda = k` (or `m` when `A` is transposed), `ldb = n` (or `k`)
and the output always has leading dimension `n`.

The reduced-precision paths widen every operand into float32 temporaries,
run the backend routine on those and narrow the output once. For `gemm` and
`gemv` the existing contents of the output are widened as well, since a
nonzero `beta` accumulates into them.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from mixprec.core import backend, kernels
from mixprec.core.buffers import (
    check_count,
    check_stride,
    span,
    storage_input,
    storage_output,
)
from mixprec.core.convert import from_compute, get, to_compute
from mixprec.core.dtypes import FLOAT_PAIRS, TypePair, require_pair
from mixprec.core.elementwise import axpby, axpy

logger = logging.getLogger(__name__)


def gemm(
    pair: TypePair,
    trans_a: bool,
    trans_b: bool,
    m: int,
    n: int,
    k: int,
    alpha: Any,
    a: Any,
    b: Any,
    beta: Any,
    c: np.ndarray,
) -> None:
    """
    General matrix multiply, `C := alpha * op(A) @ op(B) + beta * C`.

    Parameters
    ----------
    pair: TypePair
        Storage/compute pair of the call
    trans_a, trans_b: bool
        Whether `A` (stored `k x m`) and `B` (stored `n x k`) are transposed
    m, n, k: int
        `op(A)` is `m x k`, `op(B)` is `k x n`, `C` is `m x n`
    alpha, beta: Any
        Combination factors, taken in the compute type
    a, b: Any
        Input buffers
    c: np.ndarray
        Output buffer, read when `beta` is nonzero

    Notes
    -----
    Any dimension `<= 0` makes the call a no-op on every pair; `C` is left
    untouched even when `beta != 1`.
    """
    require_pair("gemm", pair, FLOAT_PAIRS)
    if m <= 0 or n <= 0 or k <= 0:
        return
    lhs = storage_input(pair, "a", a, m * k)
    rhs = storage_input(pair, "b", b, k * n)
    out = storage_output(pair, "c", c, m * n)
    alpha = get(pair.compute, alpha)
    beta = get(pair.compute, beta)
    if pair.native:
        out[: m * n] = backend.gemm(
            trans_a, trans_b, m, n, k, alpha, lhs[: m * k], rhs[: k * n], beta, out[: m * n]
        )
        return
    logger.debug("gemm emulated in %s for %dx%dx%d", pair.compute, m, n, k)
    af = to_compute(pair, m * k, lhs)
    bf = to_compute(pair, k * n, rhs)
    cf = to_compute(pair, m * n, out)
    result = backend.gemm(trans_a, trans_b, m, n, k, alpha, af, bf, beta, cf)
    from_compute(pair, m * n, result, out)


def gemv(
    pair: TypePair,
    trans_a: bool,
    m: int,
    n: int,
    alpha: Any,
    a: Any,
    x: Any,
    beta: Any,
    y: np.ndarray,
) -> None:
    """
    Matrix-vector product, `y := alpha * op(A) @ x + beta * y`.

    `A` is stored `m x n`. Without transposition `x` has `n` elements and `y`
    has `m`; with it the lengths swap.
    """
    require_pair("gemv", pair, FLOAT_PAIRS)
    if m <= 0 or n <= 0:
        return
    len_x, len_y = (m, n) if trans_a else (n, m)
    mat = storage_input(pair, "a", a, m * n)
    vec = storage_input(pair, "x", x, len_x)
    out = storage_output(pair, "y", y, len_y)
    alpha = get(pair.compute, alpha)
    beta = get(pair.compute, beta)
    if pair.native:
        out[:len_y] = backend.gemv(
            trans_a, m, n, alpha, mat[: m * n], vec[:len_x], beta, out[:len_y]
        )
        return
    logger.debug("gemv emulated in %s for %dx%d", pair.compute, m, n)
    af = to_compute(pair, m * n, mat)
    xf = to_compute(pair, len_x, vec)
    yf = to_compute(pair, len_y, out)
    result = backend.gemv(trans_a, m, n, alpha, af, xf, beta, yf)
    from_compute(pair, len_y, result, out)


def scal(pair: TypePair, n: int, alpha: Any, x: np.ndarray) -> None:
    """`x := alpha * x` over the first `n` elements."""
    require_pair("scal", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    out = storage_output(pair, "x", x, n)
    alpha = get(pair.compute, alpha)
    if n == 0:
        return
    if pair.native:
        out[:n] = backend.scal(alpha, out[:n])
        return
    values = to_compute(pair, n, out)
    with np.errstate(all="ignore"):
        values *= alpha
    from_compute(pair, n, values, out)


def cpu_scale(pair: TypePair, n: int, alpha: Any, x: Any, y: np.ndarray) -> None:
    """`y := alpha * x`; the native path copies then scales, as BLAS-1 does."""
    require_pair("cpu_scale", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    src = storage_input(pair, "x", x, n)
    out = storage_output(pair, "y", y, n)
    alpha = get(pair.compute, alpha)
    if n == 0:
        return
    if pair.native:
        out[:n] = backend.scal(alpha, backend.copy(src[:n]))
        return
    values = to_compute(pair, n, src)
    with np.errstate(all="ignore"):
        values *= alpha
    from_compute(pair, n, values, out)


def strided_dot(
    pair: TypePair, n: int, x: Any, incx: int, y: Any, incy: int
) -> np.floating:
    """
    Dot product of `x[i * incx]` and `y[i * incy]` for `i < n`.

    The reduced-precision path accumulates in the compute type.

    Returns
    -------
    np.floating
        The sum as a compute-type scalar
    """
    require_pair("strided_dot", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    incx = check_stride("incx", incx)
    incy = check_stride("incy", incy)
    len_x = span(n, incx)
    len_y = span(n, incy)
    xs = storage_input(pair, "x", x, len_x)
    ys = storage_input(pair, "y", y, len_y)
    zero = get(pair.compute, 0)
    if n == 0:
        return zero
    if pair.native:
        return get(pair.compute, backend.dot(xs[:len_x:incx], ys[:len_y:incy]))
    xf = to_compute(pair, len_x, xs)
    yf = to_compute(pair, len_y, ys)
    return get(pair.compute, kernels.strided_dot(n, xf, incx, yf, incy, zero))


def dot(pair: TypePair, n: int, x: Any, y: Any) -> np.floating:
    return strided_dot(pair, n, x, 1, y, 1)


def asum(pair: TypePair, n: int, x: Any) -> np.floating:
    """Sum of absolute values of the first `n` elements."""
    require_pair("asum", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    xs = storage_input(pair, "x", x, n)
    zero = get(pair.compute, 0)
    if n == 0:
        return zero
    if pair.native:
        return get(pair.compute, backend.asum(xs[:n]))
    xf = to_compute(pair, n, xs)
    return get(pair.compute, kernels.abs_sum(n, xf, zero))


__all__ = [
    "gemm",
    "gemv",
    "axpy",
    "axpby",
    "scal",
    "cpu_scale",
    "strided_dot",
    "dot",
    "asum",
]
