"""
Elementwise operations over typed buffers.

Native pairs forward to the backend's vector routines. Reduced-precision
pairs widen their operands into compute-type temporaries, do the arithmetic
there and narrow the result into the output buffer. Scalars (`alpha`, `beta`,
exponents) are always taken in the compute type, so combination factors keep
full precision until the final store.

Domain conditions (division by zero, negative base with a fractional
exponent, overflow in `exp`) produce infinities and NaNs; they are neither
raised nor warned about.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

from mixprec.core import backend
from mixprec.core.buffers import check_count, storage_input, storage_output
from mixprec.core.convert import from_compute, get, to_compute
from mixprec.core.dtypes import ALL_PAIRS, FLOAT_PAIRS, TypePair, require_pair


def set(pair: TypePair, n: int, alpha: Any, y: np.ndarray) -> None:
    """
    Fill the first `n` elements of `y` with `alpha`.

    A zero `alpha` clears the bytes of the span directly, so `-0.0` stores
    `+0.0` exactly as a memset would.
    """
    require_pair("set", pair, ALL_PAIRS)
    n = check_count("n", n)
    out = storage_output(pair, "y", y, n)
    if alpha == 0:
        out[:n].view(np.uint8).fill(0)
        return
    out[:n] = get(pair.storage, get(pair.compute, alpha))


def add_scalar(pair: TypePair, n: int, alpha: Any, y: np.ndarray) -> None:
    require_pair("add_scalar", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    out = storage_output(pair, "y", y, n)
    alpha = get(pair.compute, alpha)
    if n == 0:
        return
    if pair.native:
        out[:n] = backend.add_scalar(alpha, out[:n])
        return
    values = to_compute(pair, n, out)
    with np.errstate(all="ignore"):
        values += alpha
    from_compute(pair, n, values, out)


def axpy(pair: TypePair, n: int, alpha: Any, x: Any, y: np.ndarray) -> None:
    """`y := alpha * x + y` over the first `n` elements."""
    require_pair("axpy", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    src = storage_input(pair, "x", x, n)
    out = storage_output(pair, "y", y, n)
    alpha = get(pair.compute, alpha)
    if n == 0:
        return
    if pair.native:
        out[:n] = backend.axpy(alpha, src[:n], out[:n])
        return
    xf = to_compute(pair, n, src)
    yf = to_compute(pair, n, out)
    with np.errstate(all="ignore"):
        result = alpha * xf + yf
    from_compute(pair, n, result, out)


def axpby(
    pair: TypePair, n: int, alpha: Any, x: Any, beta: Any, y: np.ndarray
) -> None:
    """`y := alpha * x + beta * y` over the first `n` elements."""
    require_pair("axpby", pair, FLOAT_PAIRS)
    n = check_count("n", n)
    src = storage_input(pair, "x", x, n)
    out = storage_output(pair, "y", y, n)
    alpha = get(pair.compute, alpha)
    beta = get(pair.compute, beta)
    if n == 0:
        return
    if pair.native:
        out[:n] = backend.axpby(alpha, src[:n], beta, out[:n])
        return
    xf = to_compute(pair, n, src)
    yf = to_compute(pair, n, out)
    with np.errstate(all="ignore"):
        result = alpha * xf + beta * yf
    from_compute(pair, n, result, out)


def _binary(
    op: str,
    pair: TypePair,
    n: int,
    a: Any,
    b: Any,
    y: np.ndarray,
    native: Callable[[np.ndarray, np.ndarray], np.ndarray],
    emulated: Callable[[np.ndarray, np.ndarray], np.ndarray],
) -> None:
    require_pair(op, pair, FLOAT_PAIRS)
    n = check_count("n", n)
    lhs = storage_input(pair, "a", a, n)
    rhs = storage_input(pair, "b", b, n)
    out = storage_output(pair, "y", y, n)
    if n == 0:
        return
    if pair.native:
        out[:n] = native(lhs[:n], rhs[:n])
        return
    af = to_compute(pair, n, lhs)
    bf = to_compute(pair, n, rhs)
    with np.errstate(all="ignore"):
        result = emulated(af, bf)
    from_compute(pair, n, result, out)


def _unary(
    op: str,
    pair: TypePair,
    n: int,
    a: Any,
    y: np.ndarray,
    native: Callable[[np.ndarray], np.ndarray],
    emulated: Callable[[np.ndarray], np.ndarray],
) -> None:
    require_pair(op, pair, FLOAT_PAIRS)
    n = check_count("n", n)
    src = storage_input(pair, "a", a, n)
    out = storage_output(pair, "y", y, n)
    if n == 0:
        return
    if pair.native:
        out[:n] = native(src[:n])
        return
    af = to_compute(pair, n, src)
    with np.errstate(all="ignore"):
        result = emulated(af)
    from_compute(pair, n, result, out)


def add(pair: TypePair, n: int, a: Any, b: Any, y: np.ndarray) -> None:
    _binary("add", pair, n, a, b, y, backend.add, np.add)


def sub(pair: TypePair, n: int, a: Any, b: Any, y: np.ndarray) -> None:
    _binary("sub", pair, n, a, b, y, backend.sub, np.subtract)


def mul(pair: TypePair, n: int, a: Any, b: Any, y: np.ndarray) -> None:
    _binary("mul", pair, n, a, b, y, backend.mul, np.multiply)


def div(pair: TypePair, n: int, a: Any, b: Any, y: np.ndarray) -> None:
    _binary("div", pair, n, a, b, y, backend.div, np.divide)


def powx(pair: TypePair, n: int, a: Any, b: Any, y: np.ndarray) -> None:
    """
    Raise each element of `a` to the scalar power `b`.

    A negative base with a non-integer exponent yields NaN.
    """
    require_pair("powx", pair, FLOAT_PAIRS)
    exponent = get(pair.compute, b)
    _unary(
        "powx",
        pair,
        n,
        a,
        y,
        lambda values: backend.powx(values, exponent),
        lambda values: np.power(values, exponent),
    )


def sqr(pair: TypePair, n: int, a: Any, y: np.ndarray) -> None:
    _unary("sqr", pair, n, a, y, backend.sqr, np.square)


def exp(pair: TypePair, n: int, a: Any, y: np.ndarray) -> None:
    _unary("exp", pair, n, a, y, backend.exp, np.exp)


def abs(pair: TypePair, n: int, a: Any, y: np.ndarray) -> None:
    _unary("abs", pair, n, a, y, backend.abs, np.abs)
