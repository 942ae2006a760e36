"""Quadratic programming subproblem (second-order active-set model)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from .direction import Direction
from .hessian_model import HessianModel
from .predicted_reduction import PredictedOptimalityReductionModel
from .sparse_vector import SparseVector, dot
from .subproblem import ActiveSetSubproblem, Bounds, Iterate, Problem
from .symmetric_matrix import SymmetricMatrix

logger = logging.getLogger(__name__)


class QPSolver(Protocol):
    """Solver of quadratic programs in the space of displacements."""

    def solve_QP(
        self,
        number_variables: int,
        number_constraints: int,
        variable_bounds: Sequence[Bounds],
        constraint_bounds: Sequence[Bounds],
        linear_objective: SparseVector,
        constraint_jacobian: Sequence[SparseVector],
        hessian: SymmetricMatrix,
        initial_point: Sequence[float],
    ) -> Direction: ...


class QPSubproblem(ActiveSetSubproblem):
    """Builds a quadratic model with the Lagrangian Hessian and solves the resulting QP."""

    def __init__(
        self,
        max_number_variables: int,
        max_number_constraints: int,
        hessian_model: HessianModel,
        solver: QPSolver,
        proximal_coefficient: float,
    ) -> None:
        super().__init__(max_number_variables, max_number_constraints)
        self.hessian_model = hessian_model
        self.solver = solver
        self.proximal_coefficient = proximal_coefficient

    def _evaluate_functions(self, problem: Problem, current_iterate: Iterate) -> None:
        self.hessian_model.evaluate(problem, current_iterate.primals, current_iterate.multipliers.constraints)
        problem.evaluate_objective_gradient(current_iterate, self.objective_gradient)
        problem.evaluate_constraints(current_iterate, self.constraints)
        problem.evaluate_constraint_jacobian(current_iterate, self.constraint_jacobian)

    def solve(self, statistics: Any, problem: Problem, current_iterate: Iterate) -> Direction:
        """Build the QP at the current iterate and solve it."""
        self._evaluate_functions(problem, current_iterate)
        self._set_variable_displacement_bounds(problem, current_iterate)
        self._set_linearized_constraint_bounds(problem, self.constraints)
        return self._solve_QP(problem, current_iterate)

    def compute_second_order_correction(self, problem: Problem, trial_iterate: Iterate) -> Direction:
        """Re-solve the QP with the constraint bounds shifted by the trial constraint values."""
        logger.debug("Entered SOC computation")
        self._shift_linearized_constraint_bounds(problem, trial_iterate.original_evaluations.constraints)
        return self._solve_QP(problem, trial_iterate)

    def _solve_QP(self, problem: Problem, iterate: Iterate) -> Direction:
        direction = self.solver.solve_QP(
            problem.number_variables,
            problem.number_constraints,
            self.variable_displacement_bounds,
            self.linearized_constraint_bounds,
            self.objective_gradient,
            self.constraint_jacobian,
            self.hessian_model.hessian,
            self.initial_point,
        )
        self._check_unboundedness(direction)
        self._compute_dual_displacements(problem, iterate, direction)
        self.number_subproblems_solved += 1
        return direction

    def generate_predicted_optimality_reduction_model(
        self, problem: Problem, direction: Direction
    ) -> PredictedOptimalityReductionModel:
        """The predicted reduction is quadratic in the step length."""

        def precompute():
            number_original_variables = problem.get_number_original_variables()
            # directional derivative with respect to the original variables only
            linear_term = dot(direction.primals, self.objective_gradient, lambda i: i < number_original_variables)
            quadratic_term = self.hessian_model.hessian.quadratic_product(
                direction.primals, direction.primals, problem.number_variables
            ) / 2.0
            return lambda step_length: -step_length * (linear_term + step_length * quadratic_term)

        return PredictedOptimalityReductionModel(-direction.objective, precompute)

    def get_hessian_evaluation_count(self) -> int:
        return self.hessian_model.evaluation_count

    def get_proximal_coefficient(self) -> float:
        return self.proximal_coefficient