"""Shapes of expressions, following NumPy conventions.

``()`` is a scalar, ``(n,)`` a vector of length n and ``(m, n)`` an m x n matrix.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from itertools import zip_longest


class Shape:
    """Immutable tuple of dimensions."""

    __slots__ = ("_dims",)

    def __init__(self, dims: Iterable[int] = ()) -> None:
        object.__setattr__(self, "_dims", tuple(int(d) for d in dims))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Shape is immutable")

    @classmethod
    def scalar(cls) -> Shape:
        return cls(())

    @classmethod
    def vector(cls, n: int) -> Shape:
        return cls((n,))

    @classmethod
    def matrix(cls, m: int, n: int) -> Shape:
        return cls((m, n))

    @classmethod
    def from_dims(cls, dims: Iterable[int]) -> Shape:
        return cls(dims)

    @classmethod
    def of(cls, value: object) -> Shape:
        """Convert ``None``, ``()``, an int, a tuple/list of ints or a Shape."""
        if isinstance(value, Shape):
            return value
        if value is None:
            return cls.scalar()
        if isinstance(value, bool):
            raise TypeError("cannot build a Shape from a bool")
        if isinstance(value, int):
            return cls.vector(value)
        if isinstance(value, (tuple, list)):
            return cls(value)
        raise TypeError(f"cannot build a Shape from {type(value).__name__}")

    def size(self) -> int:
        """Total number of elements (at least 1)."""
        return max(math.prod(self._dims), 1)

    def ndim(self) -> int:
        return len(self._dims)

    def dims(self) -> tuple[int, ...]:
        return self._dims

    def is_scalar(self) -> bool:
        return not self._dims

    def is_vector(self) -> bool:
        return len(self._dims) == 1

    def is_matrix(self) -> bool:
        return len(self._dims) == 2

    def rows(self) -> int:
        return self._dims[0] if self._dims else 1

    def cols(self) -> int:
        return self._dims[1] if len(self._dims) >= 2 else 1

    def transpose(self) -> Shape:
        match self._dims:
            case ():
                return Shape.scalar()
            case (n,):
                return Shape.matrix(1, n)
            case (m, n):
                return Shape.matrix(n, m)
            case dims:
                return Shape(reversed(dims))

    def broadcast(self, other: Shape) -> Shape | None:
        """Result shape of broadcasting, or ``None`` if incompatible."""
        result = []
        for a, b in zip_longest(reversed(self._dims), reversed(other._dims), fillvalue=1):
            if a == b or b == 1:
                result.append(a)
            elif a == 1:
                result.append(b)
            else:
                return None
        return Shape(reversed(result))

    def matmul(self, other: Shape) -> Shape | None:
        """Result shape of matrix multiplication, or ``None`` if invalid."""
        match (self.ndim(), other.ndim()):
            case (2, 2) if self.cols() == other.rows():
                return Shape.matrix(self.rows(), other.cols())
            case (2, 1) if self.cols() == other.rows():
                return Shape.vector(self.rows())
            case (1, 2) if self.rows() == other.rows():
                return Shape.vector(other.cols())
            case (1, 1) if self.rows() == other.rows():
                return Shape.scalar()
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._dims == other._dims

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"Shape({list(self._dims)})"

    def __str__(self) -> str:
        if not self._dims:
            return "()"
        if len(self._dims) == 1:
            return f"({self._dims[0]},)"
        return f"({self._dims[0]}, {self._dims[1]})"