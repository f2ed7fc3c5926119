"""Expression trees for disciplined convex programming.

Every expression is an immutable node holding a kind, its child expressions
and the data that kind needs (variable or constant data, an axis, a shape,
an index specification or an exponent).
"""

from __future__ import annotations

import enum
import numbers
from dataclasses import dataclass, field
from itertools import count
from typing import Any

import numpy as np
import scipy.sparse as sp

from .array import Array
from .shape import Shape

_ids = count()


def new_id() -> int:
    """Return a fresh identifier, unique within the process."""
    return next(_ids)


class ExprKind(enum.Enum):
    """The kinds of node an expression tree is made of."""

    # Leaves
    VARIABLE = "variable"
    CONSTANT = "constant"
    # Affine atoms
    ADD = "add"
    NEG = "neg"
    MUL = "mul"
    SUM = "sum"
    RESHAPE = "reshape"
    INDEX = "index"
    VSTACK = "vstack"
    HSTACK = "hstack"
    TRANSPOSE = "transpose"
    TRACE = "trace"
    MATMUL = "matmul"
    # Nonlinear atoms
    NORM1 = "norm1"
    NORM2 = "norm2"
    NORM_INF = "norm_inf"
    ABS = "abs"
    POS = "pos"
    NEG_PART = "neg_part"
    MAXIMUM = "maximum"
    MINIMUM = "minimum"
    QUAD_FORM = "quad_form"
    SUM_SQUARES = "sum_squares"
    QUAD_OVER_LIN = "quad_over_lin"
    EXP = "exp"
    LOG = "log"
    ENTROPY = "entropy"
    POWER = "power"
    # Further affine atoms
    CUMSUM = "cumsum"
    DIAG = "diag"


_SCALAR_KINDS = frozenset(
    {
        ExprKind.TRACE,
        ExprKind.NORM1,
        ExprKind.NORM2,
        ExprKind.NORM_INF,
        ExprKind.QUAD_FORM,
        ExprKind.SUM_SQUARES,
        ExprKind.QUAD_OVER_LIN,
    }
)

_SHAPE_PRESERVING_KINDS = frozenset(
    {
        ExprKind.NEG,
        ExprKind.ABS,
        ExprKind.POS,
        ExprKind.NEG_PART,
        ExprKind.EXP,
        ExprKind.LOG,
        ExprKind.ENTROPY,
        ExprKind.POWER,
        ExprKind.CUMSUM,
    }
)


@dataclass(frozen=True)
class VariableData:
    """Identity and attributes of a decision variable."""

    id: int
    shape: Shape
    name: str | None = None
    nonneg: bool = False
    nonpos: bool = False


@dataclass(frozen=True, eq=False)
class ConstantData:
    """Identity and value of a constant."""

    id: int
    value: Array

    def shape(self) -> Shape:
        return self.value.shape()


IndexRange = tuple[int, int, int]


@dataclass(frozen=True)
class IndexSpec:
    """Per-dimension ``(start, stop, step)`` ranges; ``None`` takes a whole dimension."""

    ranges: tuple[IndexRange | None, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ranges", tuple(self.ranges))

    @classmethod
    def element(cls, indices: list[int]) -> IndexSpec:
        """Select a single element."""
        return cls(tuple((i, i + 1, 1) for i in indices))

    @classmethod
    def range(cls, start: int, stop: int) -> IndexSpec:
        """Select ``start:stop`` of a single dimension."""
        return cls(((start, stop, 1),))

    @classmethod
    def all(cls) -> IndexSpec:
        """Select everything."""
        return cls((None,))


def _wrap(value: Any) -> Expr | None:
    """Turn an operand into an expression, or ``None`` if it cannot be one."""
    if isinstance(value, Expr):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (numbers.Real, Array, np.ndarray, list, tuple)) or sp.issparse(value):
        return Expr(ExprKind.CONSTANT, data=ConstantData(new_id(), Array(value)))
    return None


@dataclass(frozen=True, eq=False)
class Expr:
    """An immutable node of an expression tree.

    ``args`` holds the child expressions; ``data`` the variable or constant
    data of a leaf; ``param`` the axis, target shape, index specification or
    exponent of the kinds that need one.
    """

    kind: ExprKind
    args: tuple[Expr, ...] = ()
    data: VariableData | ConstantData | None = None
    param: Any = None
    extra: dict = field(default_factory=dict, repr=False)

    # Let NumPy defer to our reflected operators.
    __array_ufunc__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def shape(self) -> Shape:
        """The shape of the value this expression denotes."""
        kind = self.kind
        if kind is ExprKind.VARIABLE:
            return self.data.shape
        if kind is ExprKind.CONSTANT:
            return self.data.shape()
        if kind in (ExprKind.ADD, ExprKind.MUL):
            a, b = self.args
            return a.shape().broadcast(b.shape()) or Shape.scalar()
        if kind in _SHAPE_PRESERVING_KINDS:
            return self.args[0].shape()
        if kind in _SCALAR_KINDS:
            return Shape.scalar()
        if kind is ExprKind.SUM:
            if self.param is None:
                return Shape.scalar()
            dims = self.args[0].shape()
            return Shape.scalar() if dims.ndim() <= 1 else Shape.vector(dims.cols())
        if kind is ExprKind.RESHAPE:
            return self.param
        if kind is ExprKind.INDEX:
            return self._index_shape()
        if kind is ExprKind.VSTACK:
            if not self.args:
                return Shape.scalar()
            total_rows = sum(e.shape().rows() for e in self.args)
            return Shape.matrix(total_rows, self.args[0].shape().cols())
        if kind is ExprKind.HSTACK:
            if not self.args:
                return Shape.scalar()
            total_cols = sum(e.shape().cols() for e in self.args)
            return Shape.matrix(self.args[0].shape().rows(), total_cols)
        if kind is ExprKind.TRANSPOSE:
            return self.args[0].shape().transpose()
        if kind is ExprKind.MATMUL:
            a, b = self.args
            return a.shape().matmul(b.shape()) or Shape.scalar()
        if kind in (ExprKind.MAXIMUM, ExprKind.MINIMUM):
            return self.args[0].shape() if self.args else Shape.scalar()
        if kind is ExprKind.DIAG:
            s = self.args[0].shape()
            if s.is_vector():
                n = s.size()
                return Shape.matrix(n, n)
            return Shape.vector(min(s.rows(), s.cols()))
        raise ValueError(f"unknown expression kind {kind}")

    def _index_shape(self) -> Shape:
        base = self.args[0].shape()
        spec: IndexSpec = self.param
        new_dims = []
        for i, r in enumerate(spec.ranges):
            if r is None:
                if i < base.ndim():
                    new_dims.append(base.dims()[i])
            else:
                start, stop, step = r
                size = max(stop - start + step - 1, 0) // step
                if size > 1:
                    new_dims.append(size)
        return Shape.from_dims(new_dims) if new_dims else Shape.scalar()

    def variable_id(self) -> int | None:
        """The identifier of a variable, ``None`` for any other expression."""
        return self.data.id if self.kind is ExprKind.VARIABLE else None

    def is_constant(self) -> bool:
        return self.kind is ExprKind.CONSTANT

    def is_variable(self) -> bool:
        return self.kind is ExprKind.VARIABLE

    def constant_value(self) -> Array | None:
        """The value of a constant, ``None`` for any other expression."""
        return self.data.value if self.kind is ExprKind.CONSTANT else None

    def _walk(self):
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.args))

    def variables(self) -> list[int]:
        """Sorted identifiers of the distinct variables in this expression."""
        return sorted({node.data.id for node in self._walk() if node.is_variable()})

    def __add__(self, other: Any) -> Expr:
        rhs = _wrap(other)
        if rhs is None:
            return NotImplemented
        return Expr(ExprKind.ADD, (self, rhs))

    def __radd__(self, other: Any) -> Expr:
        lhs = _wrap(other)
        if lhs is None:
            return NotImplemented
        return Expr(ExprKind.ADD, (lhs, self))

    def __neg__(self) -> Expr:
        return Expr(ExprKind.NEG, (self,))

    def __mul__(self, other: Any) -> Expr:
        rhs = _wrap(other)
        if rhs is None:
            return NotImplemented
        return Expr(ExprKind.MUL, (self, rhs))

    def __rmul__(self, other: Any) -> Expr:
        lhs = _wrap(other)
        if lhs is None:
            return NotImplemented
        return Expr(ExprKind.MUL, (lhs, self))

    def __repr__(self) -> str:
        if self.kind is ExprKind.VARIABLE:
            label = self.data.name or f"var{self.data.id}"
            return f"Expr(variable {label}, shape={self.data.shape})"
        if self.kind is ExprKind.CONSTANT:
            return f"Expr(constant {self.data.value!r})"
        return f"Expr({self.kind.value}, {len(self.args)} args)"