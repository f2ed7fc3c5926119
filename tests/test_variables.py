from dcpexpr.constants import constant
from dcpexpr.shape import Shape
from dcpexpr.variables import (
    VariableBuilder,
    as_nonneg,
    as_nonpos,
    matrix_var,
    named_variable,
    nonneg_variable,
    nonpos_variable,
    scalar_var,
    variable,
    vector_var,
    with_name,
)


def test_variable_builder():
    x = VariableBuilder.vector(5).name("x").nonneg().build()
    assert x.is_variable()
    assert x.data.shape == Shape.vector(5)
    assert x.data.name == "x"
    assert x.data.nonneg
    assert not x.data.nonpos


def test_builder_last_sign_wins():
    x = VariableBuilder.scalar().nonneg().nonpos().build()
    assert (bool(x.data.nonneg), bool(x.data.nonpos)) == (False, True)


def test_builder_default_is_scalar():
    assert VariableBuilder().build().shape() == Shape.scalar()


def test_variable_function():
    x = variable((3, 4))
    assert x.shape() == Shape.matrix(3, 4)
    assert variable(5).shape() == Shape.vector(5)
    assert variable(()).shape() == Shape.scalar()


def test_variable_ext():
    x = with_name(as_nonneg(variable(5)), "x")
    assert x.data.nonneg
    assert x.data.name == "x"


def test_ext_keeps_identity():
    x = variable(3)
    y = as_nonpos(x)
    assert y.data.id == x.data.id
    assert y.data.nonpos and not y.data.nonneg
    assert not x.data.nonpos


def test_ext_leaves_non_variables_alone():
    c = constant(1.0)
    assert as_nonneg(c) is c
    assert with_name(c, "c") is c


def test_named_and_signed_variables():
    assert named_variable("z", 2).data.name == "z"
    assert nonneg_variable(3).data.nonneg
    assert nonpos_variable(3).data.nonpos


def test_convenience_functions():
    assert scalar_var().shape() == Shape.scalar()
    assert vector_var(5).shape() == Shape.vector(5)
    assert matrix_var(3, 4).shape() == Shape.matrix(3, 4)


def test_variables_get_distinct_ids():
    ids = {variable(2).variable_id() for _ in range(5)}
    assert len(ids) == 5