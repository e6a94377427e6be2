"""
Bit-pattern distance and bound helpers.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from mixprec.core.buffers import check_count, storage_input
from mixprec.core.convert import to_compute
from mixprec.core.dtypes import (
    BFLOAT16,
    FLOAT16,
    FLOAT32,
    FLOAT32_DTYPE,
    FLOAT64,
    FLOAT64_DTYPE,
    FLOAT_PAIRS,
    TypePair,
    normalize_dtype,
    require_pair,
)
from mixprec.exceptions import UnsupportedTypePairError

_CODE_DTYPES = {
    FLOAT32: np.dtype(np.uint32),
    FLOAT64: np.dtype(np.uint64),
    FLOAT16: np.dtype(np.uint16),
    BFLOAT16: np.dtype(np.uint16),
}


def _codes(values: np.ndarray, dtype: np.dtype) -> np.ndarray:
    # Truncate toward zero, then wrap into the unsigned width of the storage type.
    with np.errstate(invalid="ignore"):
        return np.trunc(values).astype(np.int64).astype(dtype)


def hamming_distance(pair: TypePair, n: int, x: Any, y: Any) -> int:
    """
    Number of differing bits between the integer codes of `x` and `y`.

    Each element is truncated to an unsigned integer as wide as the storage
    type (reduced-precision values are widened to the compute type first) and
    the XOR of the two codes is population-counted. The result is only
    meaningful for buffers holding small integer codes.
    """
    require_pair("hamming_distance", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    xs = storage_input(pair, "x", x, n)
    ys = storage_input(pair, "y", y, n)
    if n == 0:
        return 0
    if pair.native:
        xv, yv = xs[:n], ys[:n]
    else:
        xv, yv = to_compute(pair, n, xs), to_compute(pair, n, ys)
    code = _CODE_DTYPES[pair]
    return int(np.bitwise_count(_codes(xv, code) ^ _codes(yv, code)).sum())


def nextafter(dtype: Any, value: Any) -> np.floating:
    """
    Smallest `dtype` value strictly greater than `value`.

    Used to turn a half-open `[a, b)` sampling primitive into `[a, b]`.
    `dtype` must be a compute type (float32 or float64).
    """
    target = normalize_dtype(dtype)
    if target not in (FLOAT32_DTYPE, FLOAT64_DTYPE):
        raise UnsupportedTypePairError(f"nextafter is defined for compute types, not {target}")
    return np.nextafter(target.type(value), np.finfo(target).max)
