"""Expression trees for disciplined convex programming: shapes, arrays, curvature, sign and evaluation."""

__version__ = "0.1.0"

__all__ = [
    "array",
    "constants",
    "curvature",
    "errors",
    "evaluate",
    "expression",
    "shape",
    "sign",
    "variables",
]