import pytest

from dcpexpr.errors import (
    CvxError,
    InvalidProblemError,
    NotDcpError,
    NumericalError,
    ShapeMismatchError,
    SolverError,
)


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (NotDcpError, "Problem is not DCP: "),
        (SolverError, "Solver error: "),
        (InvalidProblemError, "Invalid problem: "),
        (NumericalError, "Numerical error: "),
    ],
)
def test_message_prefix(cls, prefix):
    err = cls("details here")
    assert str(err) == prefix + "details here"
    assert err.detail == "details here"


@pytest.mark.parametrize(
    "cls", [NotDcpError, SolverError, InvalidProblemError, NumericalError, ShapeMismatchError]
)
def test_all_are_cvx_errors(cls):
    err = cls("a", "b") if cls is ShapeMismatchError else cls("a")
    assert isinstance(err, CvxError)
    assert "a" in str(err)


def test_shape_mismatch_message():
    err = ShapeMismatchError("(3,)", "(4,)")
    assert str(err) == "Shape mismatch: expected (3,), got (4,)"
    assert err.expected == "(3,)"
    assert err.got == "(4,)"


def test_solver_error_is_distinct_from_numerical_error():
    err = SolverError("Problem is infeasible")
    assert str(err) == "Solver error: Problem is infeasible"
    assert not isinstance(err, NumericalError)