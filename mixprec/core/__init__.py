"""
Dtype-polymorphic numeric primitives.

Every operation takes a `TypePair` first and forwards to the JAX backend for
native pairs or runs convert-compute-convert for reduced-precision storage.
"""

# backend enables float64 in JAX; import it before anything creates arrays.
from mixprec.core import backend
from mixprec.core import (
    auxiliary,
    buffers,
    context,
    convert,
    dtypes,
    elementwise,
    kernels,
    linear,
    memory,
    rng,
)
from mixprec.core.auxiliary import hamming_distance, nextafter
from mixprec.core.context import ExecutionContext, ExecutionMode
from mixprec.core.convert import get
from mixprec.core.dtypes import (
    ALL_PAIRS,
    BFLOAT16,
    FLOAT16,
    FLOAT32,
    FLOAT64,
    FLOAT_PAIRS,
    INT32,
    UINT32,
    TypePair,
    type_pair,
)
from mixprec.core.elementwise import (
    abs,
    add,
    add_scalar,
    axpby,
    axpy,
    div,
    exp,
    mul,
    powx,
    set,
    sqr,
    sub,
)
from mixprec.core.linear import asum, cpu_scale, dot, gemm, gemv, scal, strided_dot
from mixprec.core.memory import copy
from mixprec.core.rng import Generator, bernoulli, gaussian, rng_rand, uniform

__all__ = [
    "auxiliary",
    "backend",
    "buffers",
    "context",
    "convert",
    "dtypes",
    "elementwise",
    "kernels",
    "linear",
    "memory",
    "rng",
    "TypePair",
    "type_pair",
    "FLOAT32",
    "FLOAT64",
    "FLOAT16",
    "BFLOAT16",
    "INT32",
    "UINT32",
    "FLOAT_PAIRS",
    "ALL_PAIRS",
    "ExecutionContext",
    "ExecutionMode",
    "Generator",
    "get",
    "set",
    "add_scalar",
    "axpy",
    "axpby",
    "add",
    "sub",
    "mul",
    "div",
    "powx",
    "sqr",
    "exp",
    "abs",
    "gemm",
    "gemv",
    "scal",
    "cpu_scale",
    "strided_dot",
    "dot",
    "asum",
    "copy",
    "uniform",
    "gaussian",
    "bernoulli",
    "rng_rand",
    "hamming_distance",
    "nextafter",
]
