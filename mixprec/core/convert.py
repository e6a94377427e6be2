"""
Precision conversion between storage and compute types.

Narrowing is silent: values round to nearest even, out-of-range magnitudes
become infinities and NaNs propagate. None of these raise or warn.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from mixprec.core.buffers import as_input, as_output, check_count
from mixprec.core.dtypes import TypePair, normalize_dtype


def get(dtype: Any, value: Any) -> np.generic:
    """
    Convert a single scalar to `dtype`.

    Parameters
    ----------
    dtype: Any
        Target dtype token (see `normalize_dtype`)
    value: Any
        Scalar to convert

    Returns
    -------
    np.generic
        `value` as a NumPy scalar of the requested type
    """
    target = normalize_dtype(dtype)
    with np.errstate(over="ignore", invalid="ignore", under="ignore"):
        return target.type(value)


def convert(count: int, source: Any, dest: np.ndarray) -> None:
    """
    Copy `count` elements from `source` into `dest`, converting each value to
    the dtype of `dest`.

    Overlapping buffers are handled without alias corruption. A zero count
    leaves `dest` untouched.
    """
    count = check_count("count", count)
    src = as_input("source", source, count)
    dst = as_output("dest", dest, count)
    if count == 0:
        return
    with np.errstate(over="ignore", invalid="ignore", under="ignore"):
        np.copyto(dst[:count], src[:count], casting="unsafe")


def to_compute(pair: TypePair, count: int, source: Any) -> np.ndarray:
    """Allocate a compute-type temporary holding the first `count` elements."""
    tmp = np.empty(count, dtype=pair.compute)
    convert(count, source, tmp)
    return tmp


def from_compute(pair: TypePair, count: int, source: np.ndarray, dest: np.ndarray) -> None:
    """Store a compute-type temporary back into a storage-type buffer."""
    convert(count, source, as_output("dest", dest, count, pair.storage))
