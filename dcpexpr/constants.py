"""Constructors for constant expressions."""

from __future__ import annotations

import numbers
from collections.abc import Iterable

import numpy as np
import scipy.sparse as sp

from .array import Array
from .expression import ConstantData, Expr, ExprKind, new_id
from .shape import Shape


def _from_array(array: Array) -> Expr:
    return Expr(ExprKind.CONSTANT, data=ConstantData(new_id(), array))


def constant(value: float) -> Expr:
    """A scalar constant."""
    return _from_array(Array.from_scalar(value))


def constant_vec(values: Iterable[float]) -> Expr:
    """A column-vector constant of shape (n, 1)."""
    return _from_array(Array.from_vec(values))


def constant_matrix(values: Iterable[float], rows: int, cols: int) -> Expr:
    """A dense matrix constant filled from ``values`` in column-major order."""
    flat = np.asarray(list(values), dtype=float)
    if flat.size != rows * cols:
        raise ValueError(
            f"{flat.size} values cannot fill a {rows} x {cols} matrix"
        )
    return _from_array(Array.from_matrix(flat.reshape((rows, cols), order="F")))


def constant_dense(matrix: object) -> Expr:
    """A constant holding a dense two-dimensional matrix."""
    return _from_array(Array.from_matrix(matrix))


def constant_sparse(matrix: object) -> Expr:
    """A constant holding a sparse matrix (stored as CSC)."""
    return _from_array(Array.from_sparse(matrix))


def zeros(shape: object) -> Expr:
    """A constant of zeros; non-scalar shapes give a dense rows x cols matrix."""
    s = Shape.of(shape)
    if s.is_scalar():
        return _from_array(Array.from_scalar(0.0))
    return _from_array(Array.from_matrix(np.zeros((s.rows(), s.cols()))))


def ones(shape: object) -> Expr:
    """A constant of ones; non-scalar shapes give a dense rows x cols matrix."""
    s = Shape.of(shape)
    if s.is_scalar():
        return _from_array(Array.from_scalar(1.0))
    return _from_array(Array.from_matrix(np.ones((s.rows(), s.cols()))))


def eye(n: int) -> Expr:
    """An n x n identity matrix constant."""
    return _from_array(Array.from_matrix(np.eye(n)))


def into_constant(value: object) -> Expr:
    """Make a constant from a number, a sequence, an ndarray, a sparse matrix or an Array."""
    if isinstance(value, bool):
        raise TypeError("cannot make a constant from a bool")
    if isinstance(value, Array):
        return _from_array(value)
    if isinstance(value, numbers.Real):
        return constant(float(value))
    if sp.issparse(value):
        return constant_sparse(value)
    if isinstance(value, np.ndarray):
        if value.ndim == 2:
            return constant_dense(value)
        if value.ndim == 1:
            return constant_vec(value)
        if value.ndim == 0:
            return constant(float(value))
        raise ValueError("arrays may have at most two dimensions")
    if isinstance(value, (list, tuple)):
        return constant_vec(value)
    raise TypeError(f"cannot make a constant from {type(value).__name__}")