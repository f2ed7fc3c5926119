# dcpexpr

Build expression trees for convex optimization problems and check them
against the rules of Disciplined Convex Programming (DCP).

`dcpexpr` gives you:

- **Shapes** (`dcpexpr.shape.Shape`) following NumPy conventions: scalar `()`,
  vector `(n,)`, matrix `(m, n)`, with broadcasting (`broadcast`) and
  matrix-product (`matmul`) rules.
- **Arrays** (`dcpexpr.array.Array`) holding a scalar, a dense NumPy matrix or a
  SciPy CSC matrix, with sign and positive-semidefiniteness checks.
- **Expressions** (`dcpexpr.expression.Expr`): immutable nodes of a tree, each
  with a kind from `ExprKind`. Variables come from `dcpexpr.variables`
  (`variable`, `nonneg_variable`, `VariableBuilder`, ...), constants from
  `dcpexpr.constants` (`constant`, `constant_vec`, `constant_matrix`, `zeros`,
  `ones`, `eye`, `into_constant`, ...). Expressions combine with `+`, `*` and
  unary `-`; numbers, lists, NumPy arrays and sparse matrices on either side
  become constants.
- **Curvature analysis** (`dcpexpr.curvature`): constant, affine, convex,
  concave or unknown.
- **Sign analysis** (`dcpexpr.sign`): nonnegative, nonpositive, zero or unknown.
- **Evaluation** (`dcpexpr.evaluate`) of any expression once variable values
  are known.

## Installation

```
pip install dcpexpr
```

## Usage

```python
from dcpexpr.variables import variable, nonneg_variable
from dcpexpr.constants import constant
from dcpexpr.curvature import curvature, is_convex
from dcpexpr.sign import sign

x = variable(5)                  # a vector variable of length 5
print(x.shape())                 # (5,)

expr = x * 2.0 + constant(1.0)
print(curvature(expr))           # Curvature.AFFINE
print(is_convex(expr))           # True

y = nonneg_variable(3)
print(sign(y))                   # Sign.NONNEGATIVE
print(sign(constant(-5.0)))      # Sign.NONPOSITIVE
```

### Nonlinear nodes

There are no helper functions for the nonlinear atoms; build their nodes
directly from an `ExprKind` and the child expressions. Kinds that need a
parameter (the axis of `SUM` and `CUMSUM`, the target `Shape` of `RESHAPE`,
the `IndexSpec` of `INDEX`, the exponent of `POWER`) take it as `param`.

```python
from dcpexpr.curvature import curvature
from dcpexpr.expression import Expr, ExprKind
from dcpexpr.variables import variable

x = variable(5)
norm = Expr(ExprKind.NORM2, (x,))
print(curvature(norm))           # Curvature.CONVEX
print(curvature(-norm))          # Curvature.CONCAVE

squared = Expr(ExprKind.POWER, (x,), param=2.0)
print(curvature(squared))        # Curvature.CONVEX
```

### Evaluating expressions

`evaluate(expr, ctx)` takes either a mapping from variable identifiers
(`expr.variable_id()`) to values, or an instance of a subclass of
`dcpexpr.evaluate.Evaluable` that implements `get_variable_value(var_id)`.
Values may be `Array` objects or anything `Array` accepts (numbers, lists,
NumPy arrays).

```python
from dcpexpr.array import Array
from dcpexpr.evaluate import Evaluable, evaluate, value
from dcpexpr.variables import variable


class Values(Evaluable):
    def __init__(self, values):
        self._values = values

    def get_variable_value(self, var_id):
        return self._values.get(var_id)


x = variable(())
ctx = Values({x.variable_id(): Array.from_scalar(4.0)})
print(value(x * 2.5, ctx).as_scalar())                      # 10.0
print(evaluate(x + 1.0, {x.variable_id(): 4.0}).as_scalar())  # 5.0
```

`evaluate` raises `dcpexpr.errors.InvalidProblemError` when a variable has no
value or the values do not fit together; `value` behaves the same way.

### DCP rules applied

- `convex + convex` is convex, `concave + concave` is concave, and
  `convex + concave` is unknown; constants and affine terms do not change
  curvature.
- Multiplying by a negative scalar constant flips convex and concave; by zero
  gives a constant.
- A quadratic form is convex for a positive semidefinite constant matrix and
  concave for a negative semidefinite one.

## What this package does not do

`dcpexpr` models and analyses expressions only. It has no problem objects
(objectives and constraints), no canonicalization and no solver: it cannot
minimize or maximize anything. The exceptions `NotDcpError`, `SolverError`
and `NumericalError` in `dcpexpr.errors` exist for code built on top of it.

## Running the tests

```
pip install -e ".[test]"
pytest
```