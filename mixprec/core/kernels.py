"""
Accumulation kernels for the convert-compute-convert paths.

Design notes
------------
- Kernels operate on compute-type buffers only; storage conversion happens
  before and after, in `mixprec.core.convert`.
- The accumulator is passed in by the caller so numba types it as the
  compute dtype.
"""

from __future__ import annotations

import numpy as np
from numba import njit


@njit
def strided_dot(
    n: int, x: np.ndarray, incx: int, y: np.ndarray, incy: int, acc: np.floating
) -> np.floating:
    """
    Dot product of `n` terms taken every `incx`/`incy` elements.

    Parameters
    ----------
    n : int
        Number of terms.
    x, y : np.ndarray
        Compute-type buffers spanning at least `(n - 1) * inc + 1` elements.
    incx, incy : int
        Positive strides.
    acc : np.floating
        Zero of the compute type; fixes the accumulator dtype.

    Returns
    -------
    np.floating
        The accumulated sum.
    """
    for i in range(n):
        acc += x[i * incx] * y[i * incy]
    return acc


@njit
def abs_sum(n: int, x: np.ndarray, acc: np.floating) -> np.floating:
    for i in range(n):
        acc += abs(x[i])
    return acc
