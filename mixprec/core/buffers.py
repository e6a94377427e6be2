"""
Argument checks shared by every operation.

Buffers are flat, row-major views of caller-owned memory. Inputs may be any
array-like (including JAX arrays); outputs must be writable C-contiguous
NumPy arrays so results can be stored in place.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from mixprec.core.dtypes import TypePair
from mixprec.exceptions import DTypeMismatchError, PreconditionError


def check_count(name: str, value: int) -> int:
    if value < 0:
        raise PreconditionError(f"{name} must be non-negative, got {value}")
    return int(value)


def check_stride(name: str, value: int) -> int:
    if value < 1:
        raise PreconditionError(f"{name} must be positive, got {value}")
    return int(value)


def span(count: int, inc: int = 1) -> int:
    """Number of elements touched by `count` items taken every `inc`."""
    if count == 0:
        return 0
    return (count - 1) * inc + 1


def as_input(
    name: str, buffer: Any, size: int, dtype: np.dtype | None = None
) -> np.ndarray:
    if buffer is None:
        raise PreconditionError(f"Buffer {name} is required")
    array = np.asarray(buffer)
    if dtype is not None and array.dtype != dtype:
        raise DTypeMismatchError(f"Buffer {name} has dtype {array.dtype}, expected {dtype}")
    array = array.reshape(-1)
    if array.size < size:
        raise PreconditionError(
            f"Buffer {name} holds {array.size} elements, {size} required"
        )
    return array


def as_output(
    name: str, buffer: Any, size: int, dtype: np.dtype | None = None
) -> np.ndarray:
    if buffer is None:
        raise PreconditionError(f"Buffer {name} is required")
    if not isinstance(buffer, np.ndarray):
        raise PreconditionError(
            f"Buffer {name} must be a NumPy array, got {type(buffer).__name__}"
        )
    if not buffer.flags.c_contiguous or not buffer.flags.writeable:
        raise PreconditionError(f"Buffer {name} must be writable and C-contiguous")
    if dtype is not None and buffer.dtype != dtype:
        raise DTypeMismatchError(f"Buffer {name} has dtype {buffer.dtype}, expected {dtype}")
    flat = buffer.reshape(-1)
    if flat.size < size:
        raise PreconditionError(f"Buffer {name} holds {flat.size} elements, {size} required")
    return flat


def storage_input(pair: TypePair, name: str, buffer: Any, size: int) -> np.ndarray:
    return as_input(name, buffer, size, pair.storage)


def storage_output(pair: TypePair, name: str, buffer: Any, size: int) -> np.ndarray:
    return as_output(name, buffer, size, pair.storage)
