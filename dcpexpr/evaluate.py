"""Numeric evaluation of expressions once variable values are known."""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Union

import numpy as np

from .array import Array
from .errors import InvalidProblemError
from .expression import Expr, ExprKind, IndexSpec
from .shape import Shape


class Evaluable(abc.ABC):
    """Anything that can supply the value of a variable by its identifier."""

    @abc.abstractmethod
    def get_variable_value(self, var_id: int) -> Array | None:
        """The value of the variable ``var_id``, or ``None`` if it is unknown."""


Context = Union[Evaluable, Mapping]


def _lookup(ctx: Context, var_id: int) -> Array | None:
    if isinstance(ctx, Evaluable):
        found = ctx.get_variable_value(var_id)
    elif isinstance(ctx, Mapping):
        found = ctx.get(var_id)
    else:
        raise TypeError(f"cannot look up variables in {type(ctx).__name__}")
    if found is None:
        return None
    return found if isinstance(found, Array) else Array(found)


def _dense(a: Array) -> np.ndarray:
    return a.to_dense()


def _stored(a: Array) -> np.ndarray:
    value = a.value
    if a.is_scalar():
        return np.array([value])
    if a.is_sparse():
        return value.data
    return value.ravel()


def _same_shape(a: np.ndarray, b: np.ndarray, what: str) -> None:
    if a.shape != b.shape:
        raise InvalidProblemError(f"Shape mismatch in {what}")


def _add(a: Array, b: Array) -> Array:
    if a.is_scalar() and b.is_scalar():
        return Array(a.value + b.value)
    if a.is_scalar():
        return Array(_dense(b) + a.value)
    if b.is_scalar():
        return Array(_dense(a) + b.value)
    am, bm = _dense(a), _dense(b)
    _same_shape(am, bm, "addition")
    return Array(am + bm)


def _neg(a: Array) -> Array:
    if a.is_scalar():
        return Array(-a.value)
    return Array(-_dense(a))


def _mul(a: Array, b: Array) -> Array:
    if a.is_scalar() and b.is_scalar():
        return Array(a.value * b.value)
    if a.is_scalar():
        return Array(_dense(b) * a.value)
    if b.is_scalar():
        return Array(_dense(a) * b.value)
    am, bm = _dense(a), _dense(b)
    _same_shape(am, bm, "element-wise multiply")
    return Array(am * bm)


def _matmul(a: Array, b: Array) -> Array:
    am, bm = _dense(a), _dense(b)
    if am.shape[1] != bm.shape[0]:
        raise InvalidProblemError("Shape mismatch in matrix multiply")
    return Array(am @ bm)


def _sum(a: Array, axis: int | None) -> Array:
    if axis is None:
        return Array(float(np.sum(_stored(a))))
    if axis == 0:
        return Array(_dense(a).sum(axis=0).reshape(-1, 1))
    if axis == 1:
        return Array(_dense(a).sum(axis=1).reshape(-1, 1))
    raise InvalidProblemError(f"Invalid axis {axis} for sum")


def _reshape(a: Array, shape: Shape) -> Array:
    flat = _dense(a).ravel(order="F")
    rows, cols = shape.rows(), shape.cols()
    if flat.size != rows * cols:
        raise InvalidProblemError("Reshape size mismatch")
    if shape.is_scalar():
        return Array(float(flat[0]))
    return Array(flat.reshape((rows, cols), order="F"))


def _indices(spec: tuple[int, int, int] | None, length: int) -> range:
    if spec is None:
        return range(length)
    start, stop, step = spec
    return range(start, stop, step)


def _index(a: Array, spec: IndexSpec) -> Array:
    m = _dense(a)
    nrows, ncols = m.shape
    match spec.ranges:
        case (None,):
            return Array(m)
        case ((start, stop, step),):
            picks = range(start, stop, step)
            if ncols == 1:
                data = [m[i, 0] for i in picks]
            else:
                flat = m.ravel(order="F")
                data = [flat[i] if i < flat.size else 0.0 for i in picks]
            if len(data) == 1:
                return Array(float(data[0]))
            return Array.from_vec(data)
        case (row_spec, col_spec):
            rows = list(_indices(row_spec, nrows))
            cols = list(_indices(col_spec, ncols))
            result = m[np.ix_(rows, cols)]
            if result.shape == (1, 1):
                return Array(float(result[0, 0]))
            return Array(result)
    raise InvalidProblemError("Unsupported index spec in eval")


def _vstack(arrays: list[Array]) -> Array:
    if not arrays:
        return Array(0.0)
    mats = [_dense(a) for a in arrays]
    if any(m.shape[1] != mats[0].shape[1] for m in mats):
        raise InvalidProblemError("Shape mismatch in vstack")
    return Array(np.vstack(mats))


def _hstack(arrays: list[Array]) -> Array:
    if not arrays:
        return Array(0.0)
    mats = [_dense(a) for a in arrays]
    if any(m.shape[0] != mats[0].shape[0] for m in mats):
        raise InvalidProblemError("Shape mismatch in hstack")
    return Array(np.hstack(mats))


def _transpose(a: Array) -> Array:
    if a.is_scalar():
        return Array(a.value)
    return Array(_dense(a).T.copy())


def _diagonal_sum(a: Array) -> Array:
    if a.is_scalar():
        return Array(a.value)
    m = _dense(a)
    if m.shape[0] != m.shape[1]:
        raise InvalidProblemError("Trace of a non-square matrix")
    return Array(float(np.diagonal(m).sum()))


def _norm1(a: Array) -> float:
    return float(np.sum(np.abs(_stored(a))))


def _norm2(a: Array) -> float:
    return float(np.sqrt(np.sum(_stored(a) ** 2)))


def _norm_inf(a: Array) -> float:
    return float(np.max(np.abs(_stored(a)), initial=0.0))


def _elementwise(a: Array, f: Callable[[np.ndarray], np.ndarray]) -> Array:
    with np.errstate(all="ignore"):
        if a.is_scalar():
            return Array(float(f(np.array(a.value))))
        return Array(f(_dense(a)))


def _entropy(x: np.ndarray) -> np.ndarray:
    safe = np.where(x > 0.0, x, 1.0)
    return np.where(x <= 0.0, 0.0, -safe * np.log(safe))


def _extremum(arrays: list[Array], pick: Callable, what: str) -> Array:
    if not arrays:
        raise InvalidProblemError(f"{what} of empty list")
    result = _dense(arrays[0])
    for a in arrays[1:]:
        m = _dense(a)
        _same_shape(result, m, what)
        result = pick(result, m)
    return Array(result)


def _quad_form(x: Array, p: Array) -> Array:
    xm, pm = _dense(x), _dense(p)
    if pm.shape[0] != pm.shape[1] or xm.shape[0] != pm.shape[0]:
        raise InvalidProblemError("Shape mismatch in quad_form")
    return Array(float((xm.T @ pm @ xm)[0, 0]))


def _quad_over_lin(x: Array, y: Array) -> Array:
    y_val = y.as_scalar()
    if y_val is None:
        raise InvalidProblemError("quad_over_lin: denominator must be scalar")
    with np.errstate(all="ignore"):
        return Array(float(np.float64(_norm2(x) ** 2) / np.float64(y_val)))


def _cumsum(a: Array, axis: int | None) -> Array:
    if axis is None or axis == 0:
        return Array(np.cumsum(_dense(a), axis=0))
    if axis == 1:
        return Array(np.cumsum(_dense(a), axis=1))
    raise InvalidProblemError(f"Invalid axis {axis} for cumsum")


def _diag(a: Array) -> Array:
    m = _dense(a)
    rows, cols = m.shape
    if rows == 1 or cols == 1:
        return Array(np.diag(m.ravel()))
    return Array(np.diagonal(m).reshape(-1, 1).copy())


_ELEMENTWISE: dict[ExprKind, Callable[[np.ndarray], np.ndarray]] = {
    ExprKind.ABS: np.abs,
    ExprKind.POS: lambda x: np.maximum(x, 0.0),
    ExprKind.NEG_PART: lambda x: np.maximum(-x, 0.0),
    ExprKind.EXP: np.exp,
    ExprKind.LOG: np.log,
    ExprKind.ENTROPY: _entropy,
}


def evaluate(expr: Expr, ctx: Context) -> Array:
    """The value of ``expr`` given variable values from ``ctx``.

    ``ctx`` is an :class:`Evaluable` or a mapping from variable identifiers
    to values. Raises :class:`InvalidProblemError` when a variable is missing
    or the values do not fit together.
    """
    kind = expr.kind

    def arg(i: int = 0) -> Array:
        return evaluate(expr.args[i], ctx)

    def all_args() -> list[Array]:
        return [evaluate(e, ctx) for e in expr.args]

    if kind is ExprKind.VARIABLE:
        found = _lookup(ctx, expr.data.id)
        if found is None:
            raise InvalidProblemError("Variable not in solution")
        return found
    if kind is ExprKind.CONSTANT:
        return expr.data.value
    if kind is ExprKind.ADD:
        a = arg(0)
        return _add(a, arg(1))
    if kind is ExprKind.NEG:
        return _neg(arg())
    if kind is ExprKind.MUL:
        a = arg(0)
        return _mul(a, arg(1))
    if kind is ExprKind.MATMUL:
        a = arg(0)
        return _matmul(a, arg(1))
    if kind is ExprKind.SUM:
        return _sum(arg(), expr.param)
    if kind is ExprKind.RESHAPE:
        return _reshape(arg(), expr.param)
    if kind is ExprKind.INDEX:
        return _index(arg(), expr.param)
    if kind is ExprKind.VSTACK:
        return _vstack(all_args())
    if kind is ExprKind.HSTACK:
        return _hstack(all_args())
    if kind is ExprKind.TRANSPOSE:
        return _transpose(arg())
    if kind is ExprKind.TRACE:
        return _diagonal_sum(arg())
    if kind is ExprKind.NORM1:
        return Array(_norm1(arg()))
    if kind is ExprKind.NORM2:
        return Array(_norm2(arg()))
    if kind is ExprKind.NORM_INF:
        return Array(_norm_inf(arg()))
    if kind in _ELEMENTWISE:
        return _elementwise(arg(), _ELEMENTWISE[kind])
    if kind is ExprKind.POWER:
        p = float(expr.param)
        return _elementwise(arg(), lambda x: np.power(x, p))
    if kind is ExprKind.MAXIMUM:
        return _extremum(all_args(), np.maximum, "maximum")
    if kind is ExprKind.MINIMUM:
        return _extremum(all_args(), np.minimum, "minimum")
    if kind is ExprKind.QUAD_FORM:
        x = arg(0)
        return _quad_form(x, arg(1))
    if kind is ExprKind.SUM_SQUARES:
        return Array(_norm2(arg()) ** 2)
    if kind is ExprKind.QUAD_OVER_LIN:
        x = arg(0)
        return _quad_over_lin(x, arg(1))
    if kind is ExprKind.CUMSUM:
        return _cumsum(arg(), expr.param)
    if kind is ExprKind.DIAG:
        return _diag(arg())
    raise InvalidProblemError(f"Cannot evaluate expression kind {kind.value}")


def value(expr: Expr, ctx: Context) -> Array:
    """The value of ``expr``; raises like :func:`evaluate` when it cannot be computed."""
    return evaluate(expr, ctx)