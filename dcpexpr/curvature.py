"""Curvature of expressions under the disciplined convex programming rules.

An expression is constant, affine, convex, concave, or of unknown curvature
(not DCP-compliant).
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable

import numpy as np

from .array import Array
from .expression import Expr, ExprKind


class Curvature(enum.Enum):
    """Curvature of an expression."""

    CONSTANT = "constant"
    AFFINE = "affine"
    CONVEX = "convex"
    CONCAVE = "concave"
    UNKNOWN = "unknown"

    def is_convex(self) -> bool:
        """Constant, affine and convex expressions are convex."""
        return self in (Curvature.CONSTANT, Curvature.AFFINE, Curvature.CONVEX)

    def is_concave(self) -> bool:
        """Constant, affine and concave expressions are concave."""
        return self in (Curvature.CONSTANT, Curvature.AFFINE, Curvature.CONCAVE)

    def is_affine(self) -> bool:
        return self in (Curvature.CONSTANT, Curvature.AFFINE)

    def is_constant(self) -> bool:
        return self is Curvature.CONSTANT

    def negate(self) -> Curvature:
        """Swap convex and concave; other curvatures are unchanged."""
        if self is Curvature.CONVEX:
            return Curvature.CONCAVE
        if self is Curvature.CONCAVE:
            return Curvature.CONVEX
        return self


def add_curvature(a: Curvature, b: Curvature) -> Curvature:
    """Curvature of ``a + b``."""
    if a is Curvature.CONSTANT:
        return b
    if b is Curvature.CONSTANT:
        return a
    if a is Curvature.AFFINE:
        return b
    if b is Curvature.AFFINE:
        return a
    if a is b and a in (Curvature.CONVEX, Curvature.CONCAVE):
        return a
    return Curvature.UNKNOWN


def scalar_mul_curvature(scalar: float, expr_curv: Curvature) -> Curvature:
    """Curvature of ``scalar * expr``: kept if positive, negated if negative, constant if zero."""
    if scalar == 0.0:
        return Curvature.CONSTANT
    if scalar > 0.0:
        return expr_curv
    return expr_curv.negate()


class PsdStatus(enum.Enum):
    """Definiteness of a constant matrix."""

    PSD = "psd"
    NSD = "nsd"
    NEITHER = "neither"

    @classmethod
    def of_array(cls, arr: Array) -> PsdStatus:
        """Classify ``arr`` as positive semidefinite, negative semidefinite or neither."""
        psd = arr.is_psd()
        if psd is None:
            return cls.NEITHER
        if psd:
            return cls.PSD
        if arr.is_scalar():
            return cls.NSD if arr.as_scalar() <= 0.0 else cls.NEITHER
        if arr.is_sparse():
            return cls.NEITHER
        try:
            np.linalg.cholesky(-arr.to_dense())
        except np.linalg.LinAlgError:
            return cls.NEITHER
        return cls.NSD


def _when(condition: bool, result: Curvature) -> Curvature:
    return result if condition else Curvature.UNKNOWN


def _combine_all(exprs: Iterable[Expr]) -> Curvature:
    result = Curvature.CONSTANT
    for e in exprs:
        result = add_curvature(result, curvature(e))
    return result


def _scaled_by_constant(const: Expr, other_curv: Curvature) -> Curvature:
    value = const.constant_value()
    if value is not None:
        scalar = value.as_scalar()
        if scalar is not None:
            return scalar_mul_curvature(scalar, other_curv)
    return _when(other_curv.is_affine(), Curvature.AFFINE)


def _mul(expr: Expr) -> Curvature:
    a, b = expr.args
    ac, bc = curvature(a), curvature(b)
    if ac.is_constant() and bc.is_constant():
        return Curvature.CONSTANT
    if ac.is_constant():
        return _scaled_by_constant(a, bc)
    if bc.is_constant():
        return _scaled_by_constant(b, ac)
    return Curvature.UNKNOWN


def _matmul(expr: Expr) -> Curvature:
    a, b = expr.args
    ac, bc = curvature(a), curvature(b)
    if ac.is_constant():
        return bc
    if bc.is_constant():
        return ac
    return Curvature.UNKNOWN


def _convex_of_affine(expr: Expr) -> Curvature:
    return _when(curvature(expr.args[0]).is_affine(), Curvature.CONVEX)


def _quad_form(expr: Expr) -> Curvature:
    x, p = expr.args
    if not curvature(x).is_affine():
        return Curvature.UNKNOWN
    p_val = p.constant_value()
    if p_val is None:
        return Curvature.UNKNOWN
    status = PsdStatus.of_array(p_val)
    if status is PsdStatus.PSD:
        return Curvature.CONVEX
    if status is PsdStatus.NSD:
        return Curvature.CONCAVE
    return Curvature.UNKNOWN


def _quad_over_lin(expr: Expr) -> Curvature:
    x, y = expr.args
    return _when(
        curvature(x).is_affine() and curvature(y).is_concave(), Curvature.CONVEX
    )


def _power(expr: Expr) -> Curvature:
    x = expr.args[0]
    p = float(expr.param)
    xc = curvature(x)
    if p == 0.0:
        return Curvature.CONSTANT
    if p == 1.0:
        return xc
    if p == 2.0 or p > 1.0 or p < 0.0:
        return _when(xc.is_affine(), Curvature.CONVEX)
    if 0.0 < p < 1.0:
        return _when(xc.is_affine(), Curvature.CONCAVE)
    return Curvature.UNKNOWN


def _first_arg(expr: Expr) -> Curvature:
    return curvature(expr.args[0])


_RULES: dict[ExprKind, Callable[[Expr], Curvature]] = {
    ExprKind.VARIABLE: lambda e: Curvature.AFFINE,
    ExprKind.CONSTANT: lambda e: Curvature.CONSTANT,
    ExprKind.ADD: lambda e: add_curvature(curvature(e.args[0]), curvature(e.args[1])),
    ExprKind.NEG: lambda e: curvature(e.args[0]).negate(),
    ExprKind.MUL: _mul,
    ExprKind.MATMUL: _matmul,
    ExprKind.SUM: _first_arg,
    ExprKind.RESHAPE: _first_arg,
    ExprKind.INDEX: _first_arg,
    ExprKind.VSTACK: lambda e: _combine_all(e.args),
    ExprKind.HSTACK: lambda e: _combine_all(e.args),
    ExprKind.TRANSPOSE: _first_arg,
    ExprKind.TRACE: _first_arg,
    ExprKind.NORM1: _convex_of_affine,
    ExprKind.NORM2: _convex_of_affine,
    ExprKind.NORM_INF: _convex_of_affine,
    ExprKind.ABS: _convex_of_affine,
    ExprKind.POS: lambda e: _when(curvature(e.args[0]).is_convex(), Curvature.CONVEX),
    ExprKind.NEG_PART: lambda e: _when(
        curvature(e.args[0]).is_concave(), Curvature.CONVEX
    ),
    ExprKind.MAXIMUM: lambda e: _when(
        all(curvature(a).is_convex() for a in e.args), Curvature.CONVEX
    ),
    ExprKind.MINIMUM: lambda e: _when(
        all(curvature(a).is_concave() for a in e.args), Curvature.CONCAVE
    ),
    ExprKind.QUAD_FORM: _quad_form,
    ExprKind.SUM_SQUARES: _convex_of_affine,
    ExprKind.QUAD_OVER_LIN: _quad_over_lin,
    ExprKind.EXP: _convex_of_affine,
    ExprKind.LOG: lambda e: _when(curvature(e.args[0]).is_concave(), Curvature.CONCAVE),
    ExprKind.ENTROPY: lambda e: _when(
        curvature(e.args[0]).is_affine(), Curvature.CONCAVE
    ),
    ExprKind.POWER: _power,
    ExprKind.CUMSUM: _first_arg,
    ExprKind.DIAG: _first_arg,
}


def curvature(expr: Expr) -> Curvature:
    """The curvature of ``expr`` by the DCP composition rules."""
    try:
        rule = _RULES[expr.kind]
    except KeyError:
        raise ValueError(f"unknown expression kind {expr.kind}") from None
    return rule(expr)


def is_convex(expr: Expr) -> bool:
    return curvature(expr).is_convex()


def is_concave(expr: Expr) -> bool:
    return curvature(expr).is_concave()


def is_affine(expr: Expr) -> bool:
    return curvature(expr).is_affine()