"""Components for nonlinear optimization: sparse linear algebra, Hessian models and LP/QP subproblems."""

__version__ = "0.1.0"