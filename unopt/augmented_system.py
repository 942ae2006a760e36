"""Augmented (KKT) system with inertia-correcting regularization."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .symmetric_matrix import SymmetricMatrix, create_symmetric_matrix

logger = logging.getLogger(__name__)


class FunctionType(Enum):
    """Type of a function or of a whole problem."""

    LINEAR = 0
    QUADRATIC = 1
    NONLINEAR = 2


class UnstableRegularization(Exception):
    """Raised when the inertia correction exceeds its failure threshold."""

    def __init__(self) -> None:
        super().__init__("The inertia correction got unstable (delta_w > threshold)")


class LinearSolver(Protocol):
    """Symmetric indefinite linear solver that reports the inertia."""

    def do_symbolic_factorization(self, matrix: SymmetricMatrix) -> None: ...

    def do_numerical_factorization(self, matrix: SymmetricMatrix) -> None: ...

    def matrix_is_singular(self) -> bool: ...

    def number_negative_eigenvalues(self) -> int: ...

    def rank(self) -> int: ...

    def get_inertia(self) -> tuple[int, int, int]: ...

    def solve(self, matrix: SymmetricMatrix, rhs: list[float]) -> list[float]: ...


class Model(Protocol):
    """The parts of a model that decide whether to refactorize symbolically."""

    problem_type: FunctionType
    fixed_hessian_sparsity: bool


@dataclass(frozen=True)
class RegularizationParameters:
    """Parameters of the inertia correction of the augmented matrix."""

    failure_threshold: float
    first_block_initial_factor: float
    second_block_fraction: float
    first_block_lb: float
    first_block_decrease_factor: float
    first_block_fast_increase_factor: float
    first_block_slow_increase_factor: float


class AugmentedSystem:
    """Augmented matrix, right-hand side and solution of a KKT system."""

    def __init__(
        self,
        sparse_format: str,
        max_dimension: int,
        max_number_non_zeros: int,
        use_regularization: bool,
        parameters: RegularizationParameters,
    ) -> None:
        self.matrix = create_symmetric_matrix(sparse_format, max_dimension, max_number_non_zeros, use_regularization)
        self.rhs = [0.0] * max_dimension
        self.solution = [0.0] * max_dimension
        self.parameters = parameters
        self.number_factorizations = 0
        self.previous_regularization_first_block = 0.0

    def factorize_matrix(self, model: Model, linear_solver: LinearSolver) -> None:
        """Factorize the matrix, symbolically only when the structure may have changed."""
        if (
            self.number_factorizations == 0
            or model.problem_type == FunctionType.NONLINEAR
            or not model.fixed_hessian_sparsity
        ):
            linear_solver.do_symbolic_factorization(self.matrix)
        linear_solver.do_numerical_factorization(self.matrix)
        self.number_factorizations += 1

    def _apply_regularization(self, first: float, second: float, size_first_block: int) -> None:
        self.matrix.set_regularization(lambda i: first if i < size_first_block else -second)

    @staticmethod
    def _has_good_inertia(linear_solver: LinearSolver, size_second_block: int) -> bool:
        return (
            not linear_solver.matrix_is_singular()
            and linear_solver.number_negative_eigenvalues() == size_second_block
        )

    def regularize_matrix(
        self,
        model: Model,
        linear_solver: LinearSolver,
        size_first_block: int,
        size_second_block: int,
        constraint_regularization_parameter: float,
    ) -> None:
        """Shift the diagonal until the factorization has the expected inertia.

        Raises UnstableRegularization when the shift exceeds the failure threshold.
        """
        logger.debug("Original matrix\n%s", self.matrix)
        if self._has_good_inertia(linear_solver, size_second_block):
            logger.debug("Inertia is good")
            return
        logger.debug("Inertia is not good")

        p = self.parameters
        if linear_solver.matrix_is_singular():
            logger.debug("Matrix is singular")
            second = p.second_block_fraction * constraint_regularization_parameter
        else:
            second = 0.0
        if self.previous_regularization_first_block == 0.0:
            first = p.first_block_initial_factor
        else:
            first = max(p.first_block_lb, self.previous_regularization_first_block / p.first_block_decrease_factor)

        self._apply_regularization(first, second, size_first_block)
        while True:
            logger.debug("Testing factorization with regularization factors (%g, %g)", first, second)
            self.factorize_matrix(model, linear_solver)
            if self._has_good_inertia(linear_solver, size_second_block):
                logger.debug("Factorization was a success")
                self.previous_regularization_first_block = first
                return
            positive, negative, zero = linear_solver.get_inertia()
            logger.debug(
                "Expected inertia (%d, %d, 0), got (%d, %d, %d)",
                size_first_block, size_second_block, positive, negative, zero,
            )
            if self.previous_regularization_first_block == 0.0:
                first *= p.first_block_fast_increase_factor
            else:
                first *= p.first_block_slow_increase_factor
            if first > p.failure_threshold:
                raise UnstableRegularization()
            self._apply_regularization(first, second, size_first_block)

    def solve(self, linear_solver: LinearSolver) -> list[float]:
        """Solve the factorized system for the current right-hand side."""
        self.solution = list(linear_solver.solve(self.matrix, self.rhs))
        return self.solution