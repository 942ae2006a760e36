"""Strategies that evaluate the Lagrangian Hessian, optionally convexified."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Protocol

from .augmented_system import LinearSolver
from .symmetric_matrix import SymmetricMatrix, create_symmetric_matrix

logger = logging.getLogger(__name__)


class Problem(Protocol):
    """The parts of a problem a Hessian model needs."""

    number_variables: int

    def get_number_original_variables(self) -> int: ...

    def evaluate_lagrangian_hessian(
        self, primal_variables: Sequence[float], constraint_multipliers: Sequence[float], hessian: SymmetricMatrix
    ) -> None: ...


class HessianModel(ABC):
    """Holds the Hessian matrix and counts its evaluations."""

    def __init__(self, dimension: int, maximum_number_nonzeros: int, sparse_format: str, use_regularization: bool) -> None:
        self.hessian = create_symmetric_matrix(sparse_format, dimension, maximum_number_nonzeros, use_regularization)
        self.evaluation_count = 0

    @abstractmethod
    def evaluate(
        self, problem: Problem, primal_variables: Sequence[float], constraint_multipliers: Sequence[float]
    ) -> None:
        """Evaluate the Hessian at the given primal-dual point."""

    def _evaluate_exact(
        self, problem: Problem, primal_variables: Sequence[float], constraint_multipliers: Sequence[float]
    ) -> None:
        self.hessian.dimension = problem.number_variables
        problem.evaluate_lagrangian_hessian(primal_variables, constraint_multipliers, self.hessian)
        self.evaluation_count += 1


class ExactHessian(HessianModel):
    """The exact Lagrangian Hessian, without regularization."""

    def __init__(self, dimension: int, maximum_number_nonzeros: int, sparse_format: str) -> None:
        super().__init__(dimension, maximum_number_nonzeros, sparse_format, False)

    def evaluate(
        self, problem: Problem, primal_variables: Sequence[float], constraint_multipliers: Sequence[float]
    ) -> None:
        self._evaluate_exact(problem, primal_variables, constraint_multipliers)


class ConvexifiedHessian(HessianModel):
    """The Lagrangian Hessian shifted on its diagonal until it is positive definite."""

    def __init__(
        self,
        dimension: int,
        maximum_number_nonzeros: int,
        sparse_format: str,
        linear_solver: LinearSolver,
        regularization_initial_value: float,
        regularization_increase_factor: float,
    ) -> None:
        super().__init__(dimension, maximum_number_nonzeros, sparse_format, True)
        self.linear_solver = linear_solver
        self.regularization_initial_value = regularization_initial_value
        self.regularization_increase_factor = regularization_increase_factor

    def evaluate(
        self, problem: Problem, primal_variables: Sequence[float], constraint_multipliers: Sequence[float]
    ) -> None:
        self._evaluate_exact(problem, primal_variables, constraint_multipliers)
        logger.debug("hessian before convexification: %s", self.hessian)
        self.regularize(self.hessian, problem.get_number_original_variables())

    def regularize(self, hessian: SymmetricMatrix, number_original_variables: int) -> None:
        """Shift the diagonal of the leading block until the factorization is positive definite.

        Raises ArithmeticError if the shift diverges.
        """
        smallest_diagonal_entry = hessian.smallest_diagonal_entry()
        logger.debug("The minimal diagonal entry of the matrix is %g", smallest_diagonal_entry)
        factor = self.regularization_initial_value - smallest_diagonal_entry if smallest_diagonal_entry <= 0.0 else 0.0
        while True:
            logger.debug("Testing factorization with regularization factor %g", factor)
            if factor > 0.0:
                current = factor
                hessian.set_regularization(lambda i: current if i < number_original_variables else 0.0)
            self.linear_solver.do_symbolic_factorization(hessian)
            self.linear_solver.do_numerical_factorization(hessian)
            if (
                self.linear_solver.rank() == number_original_variables
                and self.linear_solver.number_negative_eigenvalues() == 0
            ):
                logger.debug("Factorization was a success")
                return
            logger.debug(
                "rank: %d, negative eigenvalues: %d",
                self.linear_solver.rank(), self.linear_solver.number_negative_eigenvalues(),
            )
            factor = self.regularization_initial_value if factor == 0.0 else self.regularization_increase_factor * factor
            if not math.isfinite(factor):
                raise ArithmeticError("The regularization coefficient diverged")


def create_hessian_model(
    hessian_model: str,
    dimension: int,
    maximum_number_nonzeros: int,
    convexify: bool,
    sparse_format: str,
    linear_solver: LinearSolver | None = None,
    regularization_initial_value: float = 0.0,
    regularization_increase_factor: float = 0.0,
) -> HessianModel:
    """Create the named Hessian model ("exact"), convexified if requested."""
    if hessian_model != "exact":
        raise ValueError(f"Hessian model {hessian_model} does not exist")
    if not convexify:
        return ExactHessian(dimension, maximum_number_nonzeros, sparse_format)
    if linear_solver is None:
        raise ValueError("A convexified Hessian needs a linear solver")
    return ConvexifiedHessian(
        dimension,
        maximum_number_nonzeros,
        sparse_format,
        linear_solver,
        regularization_initial_value,
        regularization_increase_factor,
    )