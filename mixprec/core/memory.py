"""
Device-aware buffer copies.
"""

from __future__ import annotations

from typing import Any

import jax
import numpy as np

from mixprec.core.buffers import as_input, check_count, storage_input, storage_output
from mixprec.core.context import ExecutionContext, ExecutionMode
from mixprec.core.dtypes import ALL_PAIRS, TypePair, require_pair
from mixprec.exceptions import AcceleratorUnavailableError


def _same_address(x: Any, y: Any) -> bool:
    if x is y:
        return True
    if isinstance(x, np.ndarray) and isinstance(y, np.ndarray):
        return x.__array_interface__["data"][0] == y.__array_interface__["data"][0]
    return False


def copy(
    pair: TypePair,
    n: int,
    x: Any,
    y: np.ndarray,
    context: ExecutionContext | None = None,
) -> None:
    """
    Copy the first `n` elements of `x` into `y`.

    Parameters
    ----------
    pair: TypePair
        Storage/compute pair; only the storage type matters here
    n: int
        Number of elements
    x: Any
        Source buffer; in accelerator mode this may live on a JAX device
    y: np.ndarray
        Destination buffer
    context: ExecutionContext | None
        Selects the host byte copy or the runtime copy; defaults to
        `Config().context()`

    Raises
    ------
    AcceleratorUnavailableError
        When accelerator mode is selected without an accelerator. There is no
        fallback to the host path.
    """
    require_pair("copy", pair, ALL_PAIRS)
    n = check_count("n", n)
    if _same_address(x, y):
        return
    if context is None:
        from mixprec.mixprec import Config

        context = Config().context()
    out = storage_output(pair, "y", y, n)
    if context.mode is ExecutionMode.ACCELERATOR:
        if not context.accelerator_available:
            raise AcceleratorUnavailableError(
                "Accelerator mode selected but no accelerator device is available"
            )
        src = as_input("x", jax.device_get(x), n, pair.storage)
        out[:n] = src[:n]
        return
    src = storage_input(pair, "x", x, n)
    out[:n].view(np.uint8)[...] = np.ascontiguousarray(src[:n]).view(np.uint8)
