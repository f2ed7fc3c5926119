"""Constructors for decision variables."""

from __future__ import annotations

from dataclasses import replace

from .expression import Expr, ExprKind, VariableData, new_id
from .shape import Shape


class VariableBuilder:
    """Fluent builder for variables with a name and a sign restriction."""

    def __init__(self, shape: object = None) -> None:
        self._shape = Shape.of(shape)
        self._name: str | None = None
        self._nonneg = False
        self._nonpos = False

    @classmethod
    def scalar(cls) -> VariableBuilder:
        return cls(Shape.scalar())

    @classmethod
    def vector(cls, n: int) -> VariableBuilder:
        return cls(Shape.vector(n))

    @classmethod
    def matrix(cls, m: int, n: int) -> VariableBuilder:
        return cls(Shape.matrix(m, n))

    def name(self, name: str) -> VariableBuilder:
        self._name = str(name)
        return self

    def nonneg(self) -> VariableBuilder:
        """Restrict the variable to x >= 0 (clears a non-positive restriction)."""
        self._nonneg = True
        self._nonpos = False
        return self

    def nonpos(self) -> VariableBuilder:
        """Restrict the variable to x <= 0 (clears a non-negative restriction)."""
        self._nonpos = True
        self._nonneg = False
        return self

    def build(self) -> Expr:
        """Create the variable expression with a fresh identifier."""
        return Expr(
            ExprKind.VARIABLE,
            data=VariableData(
                id=new_id(),
                shape=self._shape,
                name=self._name,
                nonneg=self._nonneg,
                nonpos=self._nonpos,
            ),
        )


def variable(shape: object = None) -> Expr:
    """A variable of the given shape: ``None``/``()`` scalar, ``n`` vector, ``(m, n)`` matrix."""
    return VariableBuilder(shape).build()


def named_variable(name: str, shape: object = None) -> Expr:
    return VariableBuilder(shape).name(name).build()


def nonneg_variable(shape: object = None) -> Expr:
    return VariableBuilder(shape).nonneg().build()


def nonpos_variable(shape: object = None) -> Expr:
    return VariableBuilder(shape).nonpos().build()


def scalar_var() -> Expr:
    return VariableBuilder.scalar().build()


def vector_var(n: int) -> Expr:
    return VariableBuilder.vector(n).build()


def matrix_var(m: int, n: int) -> Expr:
    return VariableBuilder.matrix(m, n).build()


def _with_data(expr: Expr, **changes: object) -> Expr:
    if not expr.is_variable():
        return expr
    return Expr(ExprKind.VARIABLE, data=replace(expr.data, **changes))


def as_nonneg(expr: Expr) -> Expr:
    """The same variable restricted to x >= 0; other expressions are returned unchanged."""
    return _with_data(expr, nonneg=True, nonpos=False)


def as_nonpos(expr: Expr) -> Expr:
    """The same variable restricted to x <= 0; other expressions are returned unchanged."""
    return _with_data(expr, nonneg=False, nonpos=True)


def with_name(expr: Expr, name: str) -> Expr:
    """The same variable under a new name; other expressions are returned unchanged."""
    return _with_data(expr, name=str(name))