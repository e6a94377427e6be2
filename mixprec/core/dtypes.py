"""
Storage/compute type pairs.

A `TypePair` names the dtype buffers are stored in (storage) and the dtype
arithmetic is carried out in (compute). Operations receive the pair
explicitly from the call site and branch on `TypePair.native` once, at the
call boundary; nothing inside the per-element paths inspects types again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import jax.numpy as jnp
import numpy as np

from mixprec.exceptions import UnsupportedTypePairError

FLOAT16_DTYPE = np.dtype(np.float16)
BFLOAT16_DTYPE = np.dtype(jnp.bfloat16)
FLOAT32_DTYPE = np.dtype(np.float32)
FLOAT64_DTYPE = np.dtype(np.float64)
INT32_DTYPE = np.dtype(np.int32)
UINT32_DTYPE = np.dtype(np.uint32)

REDUCED_DTYPES = frozenset({FLOAT16_DTYPE, BFLOAT16_DTYPE})
FLOATING_DTYPES = frozenset({FLOAT32_DTYPE, FLOAT64_DTYPE}) | REDUCED_DTYPES
INTEGER_DTYPES = frozenset({INT32_DTYPE, UINT32_DTYPE})

_ALIASES = {
    "float16": FLOAT16_DTYPE,
    "f16": FLOAT16_DTYPE,
    "half": FLOAT16_DTYPE,
    "bfloat16": BFLOAT16_DTYPE,
    "bf16": BFLOAT16_DTYPE,
    "float32": FLOAT32_DTYPE,
    "f32": FLOAT32_DTYPE,
    "single": FLOAT32_DTYPE,
    "float": FLOAT64_DTYPE,
    "float64": FLOAT64_DTYPE,
    "f64": FLOAT64_DTYPE,
    "double": FLOAT64_DTYPE,
    "int": INT32_DTYPE,
    "int32": INT32_DTYPE,
    "i32": INT32_DTYPE,
    "uint": UINT32_DTYPE,
    "uint32": UINT32_DTYPE,
    "u32": UINT32_DTYPE,
}


def normalize_dtype(dtype: Any) -> np.dtype:
    """
    Resolve a dtype token into one of the supported NumPy dtypes.

    Accepts case-insensitive strings ("half", "f32", "double", ...), the
    Python builtins `float` and `int`, NumPy dtypes and scalar types, and
    `jax.numpy.bfloat16`.

    Tokens follow NumPy naming, not C: `"float"` and `float` resolve to
    float64. Use `"single"`, `"f32"` or `"float32"` for single precision.

    Raises
    ------
    UnsupportedTypePairError
        If the token does not name a supported dtype.
    """
    if dtype is float:
        return FLOAT64_DTYPE
    if dtype is int:
        return INT32_DTYPE
    if isinstance(dtype, str):
        resolved = _ALIASES.get(dtype.strip().lower())
        if resolved is None:
            raise UnsupportedTypePairError(f"Unknown dtype token {dtype!r}")
        return resolved
    try:
        resolved = np.dtype(dtype)
    except TypeError as exc:
        raise UnsupportedTypePairError(f"Unknown dtype {dtype!r}") from exc
    if resolved not in FLOATING_DTYPES | INTEGER_DTYPES:
        raise UnsupportedTypePairError(f"Unsupported dtype {resolved}")
    return resolved


@dataclass(frozen=True)
class TypePair:
    """
    A (storage, compute) dtype pair.

    Reduced-precision storage (float16, bfloat16) always computes in float32;
    every other storage type computes in itself.
    """

    storage: np.dtype
    compute: np.dtype

    def __post_init__(self) -> None:
        storage = normalize_dtype(self.storage)
        compute = normalize_dtype(self.compute)
        object.__setattr__(self, "storage", storage)
        object.__setattr__(self, "compute", compute)
        if storage in REDUCED_DTYPES:
            if compute != FLOAT32_DTYPE:
                raise UnsupportedTypePairError(
                    f"{storage} storage must compute in float32, got {compute}"
                )
        elif storage != compute:
            raise UnsupportedTypePairError(
                f"Native storage {storage} must compute in itself, got {compute}"
            )

    @property
    def native(self) -> bool:
        return self.storage == self.compute

    @property
    def reduced(self) -> bool:
        return self.storage in REDUCED_DTYPES

    @property
    def floating(self) -> bool:
        return self.storage in FLOATING_DTYPES

    @property
    def name(self) -> str:
        return f"{self.storage.name}/{self.compute.name}"

    def __str__(self) -> str:
        return self.name


FLOAT32 = TypePair(FLOAT32_DTYPE, FLOAT32_DTYPE)
FLOAT64 = TypePair(FLOAT64_DTYPE, FLOAT64_DTYPE)
FLOAT16 = TypePair(FLOAT16_DTYPE, FLOAT32_DTYPE)
BFLOAT16 = TypePair(BFLOAT16_DTYPE, FLOAT32_DTYPE)
INT32 = TypePair(INT32_DTYPE, INT32_DTYPE)
UINT32 = TypePair(UINT32_DTYPE, UINT32_DTYPE)

FLOAT_PAIRS = (FLOAT32, FLOAT64, FLOAT16, BFLOAT16)
ALL_PAIRS = FLOAT_PAIRS + (INT32, UINT32)


def type_pair(storage: Any, compute: Any | None = None) -> TypePair:
    """
    Build a `TypePair` from dtype tokens.

    When `compute` is omitted it defaults to float32 for reduced-precision
    storage and to the storage type otherwise.
    """
    storage_dtype = normalize_dtype(storage)
    if compute is None:
        compute = FLOAT32_DTYPE if storage_dtype in REDUCED_DTYPES else storage_dtype
    return TypePair(storage_dtype, compute)


def require_pair(op: str, pair: Any, allowed: Iterable[TypePair]) -> TypePair:
    if not isinstance(pair, TypePair):
        raise UnsupportedTypePairError(
            f"{op} expects a TypePair as its first argument, got {type(pair).__name__}"
        )
    if pair not in tuple(allowed):
        raise UnsupportedTypePairError(f"{op} has no {pair} instantiation")
    return pair
