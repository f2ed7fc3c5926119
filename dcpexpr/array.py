"""Numeric values held by constants and solutions: scalar, dense or sparse."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import scipy.sparse as sp

from .shape import Shape

_SYMMETRY_TOL = 1e-10


class Array:
    """A scalar, a dense 2-D matrix or a sparse CSC matrix of floats."""

    __slots__ = ("_value",)

    def __init__(self, value: object) -> None:
        if isinstance(value, Array):
            self._value = value._value
        elif sp.issparse(value):
            self._value = sp.csc_matrix(value, dtype=float)
        elif isinstance(value, (int, float, np.floating, np.integer)) and not isinstance(
            value, bool
        ):
            self._value = float(value)
        else:
            arr = np.array(value, dtype=float)
            if arr.ndim == 0:
                self._value = float(arr)
            elif arr.ndim == 1:
                self._value = arr.reshape(-1, 1)
            elif arr.ndim == 2:
                self._value = arr
            else:
                raise ValueError("arrays may have at most two dimensions")

    @classmethod
    def from_scalar(cls, value: float) -> Array:
        return cls(float(value))

    @classmethod
    def from_vec(cls, values: Iterable[float]) -> Array:
        """Column vector of shape (n, 1)."""
        return cls(np.asarray(list(values), dtype=float).reshape(-1, 1))

    @classmethod
    def from_matrix(cls, matrix: object) -> Array:
        arr = np.array(matrix, dtype=float)
        if arr.ndim != 2:
            raise ValueError("a matrix must be two-dimensional")
        return cls(arr)

    @classmethod
    def from_sparse(cls, matrix: object) -> Array:
        return cls(sp.csc_matrix(matrix, dtype=float))

    @property
    def value(self) -> float | np.ndarray | sp.csc_matrix:
        """The underlying float, ndarray or CSC matrix."""
        return self._value

    def is_scalar(self) -> bool:
        return isinstance(self._value, float)

    def is_sparse(self) -> bool:
        return sp.issparse(self._value)

    def shape(self) -> Shape:
        if self.is_scalar():
            return Shape.scalar()
        rows, cols = self._value.shape
        return Shape.matrix(rows, cols)

    def size(self) -> int:
        if self.is_scalar():
            return 1
        rows, cols = self._value.shape
        return rows * cols

    def as_scalar(self) -> float | None:
        """The single value of a scalar or a 1x1 dense matrix, else ``None``."""
        if self.is_scalar():
            return self._value
        if not self.is_sparse() and self._value.shape == (1, 1):
            return float(self._value[0, 0])
        return None

    def _stored(self) -> np.ndarray:
        if self.is_scalar():
            return np.array([self._value])
        if self.is_sparse():
            return self._value.data
        return self._value.ravel()

    def is_nonneg(self) -> bool:
        return bool(np.all(self._stored() >= 0.0))

    def is_nonpos(self) -> bool:
        # Implicit zeros of a sparse matrix are non-positive too.
        return bool(np.all(self._stored() <= 0.0))

    def is_psd(self) -> bool | None:
        """Whether a symmetric matrix is positive (semi)definite.

        Returns ``None`` when the question cannot be answered: non-square,
        non-symmetric or sparse values.
        """
        if self.is_scalar():
            return self._value >= 0.0
        if self.is_sparse():
            return None
        m = self._value
        rows, cols = m.shape
        if rows != cols:
            return None
        if np.any(np.abs(m - m.T) > _SYMMETRY_TOL):
            return None
        if rows == 0:
            return True
        try:
            np.linalg.cholesky(m)
        except np.linalg.LinAlgError:
            return False
        return True

    def to_dense(self) -> np.ndarray:
        """A fresh 2-D ndarray holding the values."""
        if self.is_scalar():
            return np.full((1, 1), self._value)
        if self.is_sparse():
            return self._value.toarray()
        return self._value.copy()

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        if self.is_scalar():
            if row != 0 or col != 0:
                raise IndexError("scalar index out of bounds")
            return self._value
        if self.is_sparse():
            raise TypeError("use a dense array for indexing")
        return float(self._value[row, col])

    def __repr__(self) -> str:
        if self.is_scalar():
            return f"Array({self._value!r})"
        kind = "sparse" if self.is_sparse() else "dense"
        return f"Array({kind}, shape={self.shape()})"