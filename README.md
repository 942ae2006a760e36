# unopt

Pure-Python components for building nonlinear optimization solvers. The package
uses only the standard library.

## Modules

- `unopt.vector`: dense-vector helpers. It has the `Norm` enum (`L1`, `L2`,
  `L2_SQUARED`, `INF`), `norm_from_string` ("L1", "L2" or "INF"), `norm_1`,
  `norm_2`, `norm_2_squared`, `norm_inf`, `norm(values, kind)`, `add_vectors`
  (returns `x + factor * y`), `scale`, `copy_from`, `format_vector` and
  `in_increasing_order`. An unknown norm raises `ValueError`.
- `unopt.sparse_vector`: `SparseVector`, a sparse vector with unique, unsorted
  indices (`insert`, `transform`, `clear`, `indices`, `values`, `empty`,
  `len()`, iteration over `(index, value)` pairs). The module also has
  `sparse_norm_1`, `sparse_norm_inf`, `dot(x, y, predicate=None)` (dense times
  sparse, optionally restricted to some indices) and `scale_sparse`, which
  empties the vector when the factor is zero.
- `unopt.symmetric_matrix`: the abstract `SymmetricMatrix` and two storage
  formats, `COOSymmetricMatrix` and `CSCSymmetricMatrix`. Both store one
  triangle and can reserve one diagonal regularization slot per row, which
  `set_regularization` fills in place. `quadratic_product` computes `x^T M y`
  on a leading block, and `smallest_diagonal_entry` returns 0 when no diagonal
  entry is stored. The CSC form needs its columns filled and finalized in
  order, and `column(j)` iterates over one column. Use
  `create_symmetric_matrix("COO" | "CSC", dimension, capacity, use_regularization)`
  to create one.
- `unopt.direction`: `Direction`, `Status`, `Multipliers`, `ActiveSet`,
  `ActiveConstraints` and `ConstraintPartition`, which describe the result of a
  subproblem. `str(direction)` gives a readable summary.
- `unopt.predicted_reduction`: `PredictedOptimalityReductionModel`. It returns
  the full-step value directly. For other step lengths it runs the
  precomputation once and reuses the function that precomputation returned.
- `unopt.augmented_system`: `AugmentedSystem` holds a KKT matrix, its
  right-hand side and its solution. It has `factorize_matrix`,
  `regularize_matrix` (a diagonal shift until the inertia is as expected, set
  by `RegularizationParameters`) and `solve`. It raises `UnstableRegularization`
  when the shift exceeds the failure threshold. `FunctionType` tells a linear,
  quadratic or nonlinear problem apart.
- `unopt.hessian_model`: `ExactHessian`, `ConvexifiedHessian` and
  `create_hessian_model`. `ConvexifiedHessian` shifts the diagonal of the
  original variables until the factorization is positive definite, and raises
  `ArithmeticError` if the shift diverges.
- `unopt.subproblem`: the `Subproblem` base class, `ActiveSetSubproblem`,
  `Bounds`, and `UnboundedSubproblem`, which is raised when a solver reports an
  unbounded subproblem.
- `unopt.lp_subproblem`: `LPSubproblem(max_vars, max_cons, solver)`.
- `unopt.qp_subproblem`:
  `QPSubproblem(max_vars, max_cons, hessian_model, solver, proximal_coefficient)`.

## Example

```python
from unopt.sparse_vector import SparseVector, dot
from unopt.symmetric_matrix import create_symmetric_matrix
from unopt.vector import Norm, norm

gradient = SparseVector()
gradient.insert(0, 3.0)
gradient.insert(2, -4.0)
print(dot([1.0, 1.0, 1.0], gradient))       # -1.0

print(norm([3.0, -4.0], Norm.L2))           # 5.0

hessian = create_symmetric_matrix("CSC", 2, 3, False)
hessian.insert(2.0, 0, 0)
hessian.finalize_column(0)
hessian.insert(1.0, 0, 1)
hessian.insert(4.0, 1, 1)
hessian.finalize_column(1)
print(hessian.quadratic_product([1.0, 1.0], [1.0, 1.0], 2))  # 8.0
print(hessian.smallest_diagonal_entry())                     # 2.0
```

## What the package does not do

This is a set of building blocks, not a complete solver. It has no command-line
program. It does not read model files, and it has no LP, QP or sparse linear
solver of its own. It also has no globalization strategy and no interior-point
(barrier) subproblem.

The subproblems, `AugmentedSystem` and `ConvexifiedHessian` take the problem,
the iterate, the linear solver and the LP/QP solver as duck-typed objects. The
protocols `LinearSolver`, `LPSolver`, `QPSolver`, `Problem` and `Iterate` in the
modules describe what those objects must provide. You bring the backends.

## Running the tests

```
pip install -e ".[test]"
pytest
```