import pytest

from dcpexpr.shape import Shape


def test_scalar():
    s = Shape.scalar()
    assert s.is_scalar()
    assert s.size() == 1
    assert s.ndim() == 0
    assert s.rows() == 1
    assert s.cols() == 1


def test_vector():
    s = Shape.vector(5)
    assert s.is_vector()
    assert s.size() == 5
    assert s.ndim() == 1
    assert s.rows() == 5
    assert s.cols() == 1


def test_matrix():
    s = Shape.matrix(3, 4)
    assert s.is_matrix()
    assert s.size() == 12
    assert s.ndim() == 2
    assert s.rows() == 3
    assert s.cols() == 4


def test_transpose():
    assert Shape.scalar().transpose() == Shape.scalar()
    assert Shape.vector(3).transpose() == Shape.matrix(1, 3)
    assert Shape.matrix(3, 4).transpose() == Shape.matrix(4, 3)


def test_transpose_higher_dims_reverses():
    assert Shape.from_dims([2, 3, 4]).transpose() == Shape.from_dims([4, 3, 2])


def test_broadcast():
    assert Shape.vector(3).broadcast(Shape.vector(3)) == Shape.vector(3)
    assert Shape.scalar().broadcast(Shape.matrix(3, 4)) == Shape.matrix(3, 4)
    assert Shape.vector(4).broadcast(Shape.matrix(3, 4)) == Shape.matrix(3, 4)
    assert Shape.vector(3).broadcast(Shape.vector(4)) is None


def test_matmul():
    assert Shape.matrix(3, 4).matmul(Shape.matrix(4, 5)) == Shape.matrix(3, 5)
    assert Shape.matrix(3, 4).matmul(Shape.vector(4)) == Shape.vector(3)
    assert Shape.vector(3).matmul(Shape.vector(3)) == Shape.scalar()
    assert Shape.matrix(3, 4).matmul(Shape.vector(3)) is None


def test_conversions():
    assert Shape.of(()) == Shape.scalar()
    assert Shape.of(None) == Shape.scalar()
    assert Shape.of(5) == Shape.vector(5)
    assert Shape.of((5,)) == Shape.vector(5)
    assert Shape.of((3, 4)) == Shape.matrix(3, 4)
    assert Shape.of([3, 4]) == Shape.matrix(3, 4)
    s = Shape.vector(2)
    assert Shape.of(s) is s


def test_of_rejects_other_types():
    with pytest.raises(TypeError):
        Shape.of("3")
    with pytest.raises(TypeError):
        Shape.of(True)


def test_str():
    assert str(Shape.scalar()) == "()"
    assert str(Shape.vector(3)) == "(3,)"
    assert str(Shape.matrix(3, 4)) == "(3, 4)"


def test_hash_and_dims():
    assert hash(Shape.matrix(2, 2)) == hash(Shape.of((2, 2)))
    assert Shape.matrix(2, 7).dims() == (2, 7)
    assert len({Shape.vector(1), Shape.vector(1), Shape.scalar()}) == 2


def test_immutable():
    s = Shape.vector(3)
    with pytest.raises(AttributeError):
        s.foo = 1
    assert s == Shape.vector(3)
    assert s.dims() == (3,)