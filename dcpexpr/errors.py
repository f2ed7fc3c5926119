"""Exception hierarchy for modelling and solving convex problems."""

from __future__ import annotations


class CvxError(Exception):
    """Base class for every error raised by this package."""


class NotDcpError(CvxError):
    """The problem does not follow the disciplined convex programming rules."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Problem is not DCP: {detail}")


class SolverError(CvxError):
    """The solver failed or reported a non-optimal status."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Solver error: {detail}")


class ShapeMismatchError(CvxError):
    """Two shapes that had to agree did not."""

    def __init__(self, expected: object, got: object) -> None:
        self.expected = str(expected)
        self.got = str(got)
        super().__init__(f"Shape mismatch: expected {self.expected}, got {self.got}")


class InvalidProblemError(CvxError):
    """The problem or expression is malformed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid problem: {detail}")


class NumericalError(CvxError):
    """A numerical difficulty prevented a result."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Numerical error: {detail}")