"""Sign of expressions: non-negative, non-positive, zero or unknown.

Sign information feeds the composition rules of disciplined convex programming.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable

from .curvature import PsdStatus
from .expression import Expr, ExprKind


class Sign(enum.Enum):
    """Sign of an expression."""

    NONNEGATIVE = "nonnegative"
    NONPOSITIVE = "nonpositive"
    ZERO = "zero"
    UNKNOWN = "unknown"

    def is_nonneg(self) -> bool:
        """True for signs that guarantee a value >= 0."""
        return self in (Sign.NONNEGATIVE, Sign.ZERO)

    def is_nonpos(self) -> bool:
        """True for signs that guarantee a value <= 0."""
        return self in (Sign.NONPOSITIVE, Sign.ZERO)

    def is_zero(self) -> bool:
        return self is Sign.ZERO

    def negate(self) -> Sign:
        """Swap non-negative and non-positive; zero and unknown are unchanged."""
        if self is Sign.NONNEGATIVE:
            return Sign.NONPOSITIVE
        if self is Sign.NONPOSITIVE:
            return Sign.NONNEGATIVE
        return self


def add_sign(a: Sign, b: Sign) -> Sign:
    """Sign of ``a + b``."""
    if a is Sign.ZERO:
        return b
    if b is Sign.ZERO:
        return a
    if a is b and a in (Sign.NONNEGATIVE, Sign.NONPOSITIVE):
        return a
    return Sign.UNKNOWN


def mul_sign(a: Sign, b: Sign) -> Sign:
    """Sign of ``a * b``."""
    if a is Sign.ZERO or b is Sign.ZERO:
        return Sign.ZERO
    if Sign.UNKNOWN in (a, b):
        return Sign.UNKNOWN
    return Sign.NONNEGATIVE if a is b else Sign.NONPOSITIVE


def _variable(expr: Expr) -> Sign:
    data = expr.data
    if data.nonneg:
        return Sign.NONNEGATIVE
    if data.nonpos:
        return Sign.NONPOSITIVE
    return Sign.UNKNOWN


def _constant(expr: Expr) -> Sign:
    value = expr.data.value
    nonneg, nonpos = value.is_nonneg(), value.is_nonpos()
    if nonneg and nonpos:
        return Sign.ZERO
    if nonneg:
        return Sign.NONNEGATIVE
    if nonpos:
        return Sign.NONPOSITIVE
    return Sign.UNKNOWN


def _matmul(expr: Expr) -> Sign:
    a, b = (sign(arg) for arg in expr.args)
    if a.is_zero() or b.is_zero():
        return Sign.ZERO
    if (a.is_nonneg() and b.is_nonneg()) or (a.is_nonpos() and b.is_nonpos()):
        return Sign.NONNEGATIVE
    return Sign.UNKNOWN


def _combine(exprs: Iterable[Expr]) -> Sign:
    signs = [sign(e) for e in exprs]
    if all(s.is_zero() for s in signs):
        return Sign.ZERO
    if all(s.is_nonneg() for s in signs):
        return Sign.NONNEGATIVE
    if all(s.is_nonpos() for s in signs):
        return Sign.NONPOSITIVE
    return Sign.UNKNOWN


def _maximum(expr: Expr) -> Sign:
    signs = [sign(e) for e in expr.args]
    if any(s.is_nonneg() for s in signs):
        return Sign.NONNEGATIVE
    if all(s.is_nonpos() for s in signs):
        return Sign.NONPOSITIVE
    return Sign.UNKNOWN


def _minimum(expr: Expr) -> Sign:
    signs = [sign(e) for e in expr.args]
    if any(s.is_nonpos() for s in signs):
        return Sign.NONPOSITIVE
    if all(s.is_nonneg() for s in signs):
        return Sign.NONNEGATIVE
    return Sign.UNKNOWN


def _quad_form(expr: Expr) -> Sign:
    p_val = expr.args[1].constant_value()
    if p_val is None:
        return Sign.UNKNOWN
    status = PsdStatus.of_array(p_val)
    if status is PsdStatus.PSD:
        return Sign.NONNEGATIVE
    if status is PsdStatus.NSD:
        return Sign.NONPOSITIVE
    return Sign.UNKNOWN


def _power(expr: Expr) -> Sign:
    p = float(expr.param)
    if p > 0.0 or p < 0.0:
        return Sign.NONNEGATIVE if sign(expr.args[0]).is_nonneg() else Sign.UNKNOWN
    # x ** 0 == 1
    return Sign.NONNEGATIVE


def _first_arg(expr: Expr) -> Sign:
    return sign(expr.args[0])


def _nonneg(expr: Expr) -> Sign:
    return Sign.NONNEGATIVE


def _unknown(expr: Expr) -> Sign:
    return Sign.UNKNOWN


_RULES: dict[ExprKind, Callable[[Expr], Sign]] = {
    ExprKind.VARIABLE: _variable,
    ExprKind.CONSTANT: _constant,
    ExprKind.ADD: lambda e: add_sign(sign(e.args[0]), sign(e.args[1])),
    ExprKind.NEG: lambda e: sign(e.args[0]).negate(),
    ExprKind.MUL: lambda e: mul_sign(sign(e.args[0]), sign(e.args[1])),
    ExprKind.MATMUL: _matmul,
    ExprKind.SUM: _first_arg,
    ExprKind.RESHAPE: _first_arg,
    ExprKind.INDEX: _first_arg,
    ExprKind.VSTACK: lambda e: _combine(e.args),
    ExprKind.HSTACK: lambda e: _combine(e.args),
    ExprKind.TRANSPOSE: _first_arg,
    ExprKind.TRACE: _first_arg,
    ExprKind.NORM1: _nonneg,
    ExprKind.NORM2: _nonneg,
    ExprKind.NORM_INF: _nonneg,
    ExprKind.ABS: _nonneg,
    ExprKind.POS: _nonneg,
    ExprKind.NEG_PART: _nonneg,
    ExprKind.MAXIMUM: _maximum,
    ExprKind.MINIMUM: _minimum,
    ExprKind.QUAD_FORM: _quad_form,
    ExprKind.SUM_SQUARES: _nonneg,
    ExprKind.QUAD_OVER_LIN: _nonneg,
    ExprKind.EXP: _nonneg,
    ExprKind.LOG: _unknown,
    ExprKind.ENTROPY: _unknown,
    ExprKind.POWER: _power,
    ExprKind.CUMSUM: _first_arg,
    ExprKind.DIAG: _first_arg,
}


def sign(expr: Expr) -> Sign:
    """The sign of ``expr``, conservatively ``UNKNOWN`` when it cannot be told."""
    try:
        rule = _RULES[expr.kind]
    except KeyError:
        raise ValueError(f"unknown expression kind {expr.kind}") from None
    return rule(expr)


def is_nonneg(expr: Expr) -> bool:
    return sign(expr).is_nonneg()


def is_nonpos(expr: Expr) -> bool:
    return sign(expr).is_nonpos()