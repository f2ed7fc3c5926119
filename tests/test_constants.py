import numpy as np
import pytest
import scipy.sparse as sp

from dcpexpr.array import Array
from dcpexpr.constants import (
    constant,
    constant_dense,
    constant_matrix,
    constant_sparse,
    constant_vec,
    eye,
    into_constant,
    ones,
    zeros,
)
from dcpexpr.shape import Shape


def test_constant_scalar():
    c = constant(5.0)
    assert c.is_constant()
    assert c.constant_value().as_scalar() == 5.0


def test_constant_vec():
    c = constant_vec([1.0, 2.0, 3.0])
    assert c.shape() == Shape.matrix(3, 1)


def test_constant_matrix_is_column_major():
    c = constant_matrix([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 2, 3)
    arr = c.constant_value()
    assert c.shape() == Shape.matrix(2, 3)
    assert arr[(0, 0)] == 1.0
    assert arr[(1, 0)] == 2.0
    assert arr[(0, 1)] == 3.0
    assert arr[(1, 2)] == 6.0


def test_constant_matrix_wrong_length():
    with pytest.raises(ValueError):
        constant_matrix([1.0, 2.0, 3.0], 2, 2)


def test_constant_dense_and_sparse():
    d = constant_dense(np.array([[1.0, 2.0], [3.0, 4.0]]))
    assert d.shape() == Shape.matrix(2, 2)
    assert d.constant_value()[(1, 0)] == 3.0
    s = constant_sparse(sp.eye(3))
    assert s.shape() == Shape.matrix(3, 3)
    assert s.constant_value().is_sparse()


def test_zeros():
    z = zeros((3, 4))
    assert z.shape() == Shape.matrix(3, 4)
    assert z.constant_value().is_nonneg()
    assert z.constant_value().is_nonpos()


def test_zeros_scalar():
    z = zeros(None)
    assert z.shape() == Shape.scalar()
    assert z.constant_value().as_scalar() == 0.0


def test_ones():
    o = ones(5)
    assert o.shape() == Shape.matrix(5, 1)
    assert np.all(o.constant_value().to_dense() == 1.0)


def test_eye():
    e = eye(3)
    assert e.shape() == Shape.matrix(3, 3)
    assert np.array_equal(e.constant_value().to_dense(), np.eye(3))


def test_into_constant():
    assert into_constant(5.0).constant_value().as_scalar() == 5.0
    assert into_constant(3).constant_value().as_scalar() == 3.0
    assert into_constant([1.0, 2.0]).shape() == Shape.matrix(2, 1)
    assert into_constant(np.ones((2, 3))).shape() == Shape.matrix(2, 3)
    assert into_constant(sp.eye(2)).constant_value().is_sparse()
    assert into_constant(Array.from_scalar(7.0)).constant_value().as_scalar() == 7.0


def test_into_constant_rejects_unsupported():
    with pytest.raises(TypeError):
        into_constant("text")
    with pytest.raises(TypeError):
        into_constant(True)


def test_constants_get_distinct_ids():
    ids = {constant(1.0).data.id for _ in range(5)}
    assert len(ids) == 5