"""Linear programming subproblem (first-order active-set model)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from .direction import Direction
from .predicted_reduction import PredictedOptimalityReductionModel
from .sparse_vector import SparseVector
from .subproblem import ActiveSetSubproblem, Bounds, Iterate, Problem

logger = logging.getLogger(__name__)


class LPSolver(Protocol):
    """Solver of linear programs in the space of displacements."""

    def solve_LP(
        self,
        number_variables: int,
        number_constraints: int,
        variable_bounds: Sequence[Bounds],
        constraint_bounds: Sequence[Bounds],
        linear_objective: SparseVector,
        constraint_jacobian: Sequence[SparseVector],
        initial_point: Sequence[float],
    ) -> Direction: ...


class LPSubproblem(ActiveSetSubproblem):
    """Linearizes the objective and the constraints and solves the resulting LP."""

    def __init__(self, max_number_variables: int, max_number_constraints: int, solver: LPSolver) -> None:
        super().__init__(max_number_variables, max_number_constraints)
        self.solver = solver

    def _evaluate_functions(self, problem: Problem, current_iterate: Iterate) -> None:
        problem.evaluate_objective_gradient(current_iterate, self.objective_gradient)
        problem.evaluate_constraints(current_iterate, self.constraints)
        problem.evaluate_constraint_jacobian(current_iterate, self.constraint_jacobian)

    def solve(self, statistics: Any, problem: Problem, current_iterate: Iterate) -> Direction:
        """Build the LP at the current iterate and solve it."""
        self._evaluate_functions(problem, current_iterate)
        self._set_variable_displacement_bounds(problem, current_iterate)
        self._set_linearized_constraint_bounds(problem, current_iterate.original_evaluations.constraints)
        return self._solve_LP(problem, current_iterate)

    def compute_second_order_correction(self, problem: Problem, trial_iterate: Iterate) -> Direction:
        """Re-solve the LP with the constraint bounds shifted by the trial constraint values."""
        logger.debug("Entered SOC computation")
        self._shift_linearized_constraint_bounds(problem, trial_iterate.original_evaluations.constraints)
        return self._solve_LP(problem, trial_iterate)

    def _solve_LP(self, problem: Problem, iterate: Iterate) -> Direction:
        direction = self.solver.solve_LP(
            problem.number_variables,
            problem.number_constraints,
            self.variable_displacement_bounds,
            self.linearized_constraint_bounds,
            self.objective_gradient,
            self.constraint_jacobian,
            self.initial_point,
        )
        self._check_unboundedness(direction)
        self._compute_dual_displacements(problem, iterate, direction)
        self.number_subproblems_solved += 1
        return direction

    def generate_predicted_optimality_reduction_model(
        self, problem: Problem, direction: Direction
    ) -> PredictedOptimalityReductionModel:
        """The predicted reduction is linear in the step length."""
        objective = direction.objective
        return PredictedOptimalityReductionModel(
            -objective, lambda: (lambda step_length: -step_length * objective)
        )

    def get_hessian_evaluation_count(self) -> int:
        """No second-order information is used."""
        return 0

    def get_proximal_coefficient(self) -> float:
        return 0.0