"""Subproblems that compute a direction at the current iterate, and the active-set family."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from .direction import Direction, Status
from .predicted_reduction import PredictedOptimalityReductionModel
from .sparse_vector import SparseVector
from .vector import copy_from


@dataclass
class Bounds:
    """A closed interval ``[lb, ub]``."""

    lb: float = -math.inf
    ub: float = math.inf


class UnboundedSubproblem(Exception):
    """Raised when a subproblem solver reports an unbounded problem."""

    def __init__(self) -> None:
        super().__init__("The subproblem is unbounded, this should not happen")


class Iterate(Protocol):
    """The parts of an iterate the subproblems use."""

    primals: list[float]
    multipliers: Any
    original_evaluations: Any

    def evaluate_objective(self, model: Any) -> None: ...


class Problem(Protocol):
    """The parts of a nonlinear problem the subproblems use."""

    number_variables: int
    number_constraints: int
    model: Any

    def get_number_original_variables(self) -> int: ...

    def get_variable_lower_bound(self, i: int) -> float: ...

    def get_variable_upper_bound(self, i: int) -> float: ...

    def get_constraint_lower_bound(self, j: int) -> float: ...

    def get_constraint_upper_bound(self, j: int) -> float: ...

    def evaluate_objective_gradient(self, iterate: Iterate, gradient: SparseVector) -> None: ...

    def evaluate_constraints(self, iterate: Iterate, constraints: list[float]) -> None: ...

    def evaluate_constraint_jacobian(self, iterate: Iterate, jacobian: list[SparseVector]) -> None: ...


ElasticSettingFunction = Callable[[Any, int, int, float, float], None]


class Subproblem(ABC):
    """Local model of the problem solved at each iteration to produce a direction."""

    def __init__(self, max_number_variables: int, max_number_constraints: int) -> None:
        self.objective_gradient = SparseVector()
        self.constraints = [0.0] * max_number_constraints
        self.constraint_jacobian = [SparseVector() for _ in range(max_number_constraints)]
        self.variable_bounds = [Bounds() for _ in range(max_number_variables)]
        self.direction = Direction(max_number_variables, max_number_constraints)
        self.number_subproblems_solved = 0
        # set when the parameterization (e.g. penalty or barrier parameter) changes
        self.subproblem_definition_changed = False

    @abstractmethod
    def initialize(self, statistics: Any, problem: Problem, first_iterate: Iterate) -> None:
        """Prepare the subproblem and the first iterate."""

    @abstractmethod
    def solve(self, statistics: Any, problem: Problem, current_iterate: Iterate) -> Direction:
        """Compute a direction at the current iterate."""

    @abstractmethod
    def compute_second_order_correction(self, problem: Problem, trial_iterate: Iterate) -> Direction:
        """Compute a second-order correction at the trial iterate."""

    @abstractmethod
    def prepare_for_feasibility_problem(self, current_iterate: Iterate) -> None:
        """Adapt the subproblem before switching to the feasibility problem."""

    @abstractmethod
    def get_proximal_coefficient(self) -> float:
        """Return the proximal coefficient of the subproblem."""

    @abstractmethod
    def set_elastic_variables(self, problem: Any, current_iterate: Iterate) -> None:
        """Set the elastic variables of the current iterate."""

    @abstractmethod
    def generate_predicted_optimality_reduction_model(
        self, problem: Problem, direction: Direction
    ) -> PredictedOptimalityReductionModel:
        """Return the predicted reduction of the optimality measure along ``direction``."""

    @abstractmethod
    def compute_optimality_measure(self, problem: Problem, iterate: Iterate) -> float:
        """Return the optimality measure at ``iterate``."""

    @abstractmethod
    def postprocess_accepted_iterate(self, problem: Problem, iterate: Iterate) -> None:
        """Adjust an iterate once it has been accepted."""

    @abstractmethod
    def get_hessian_evaluation_count(self) -> int:
        """Return the number of Hessian evaluations."""

    @abstractmethod
    def set_initial_point(self, initial_point: Sequence[float]) -> None:
        """Set the initial point handed to the subproblem solver."""

    def set_variable_bounds(self, problem: Problem, current_iterate: Iterate, trust_region_radius: float) -> None:
        """Intersect the variable bounds with the trust region (original variables only)."""
        number_original_variables = problem.get_number_original_variables()
        for i in range(problem.number_variables):
            lb = problem.get_variable_lower_bound(i)
            ub = problem.get_variable_upper_bound(i)
            if i < number_original_variables:
                xi = current_iterate.primals[i]
                lb = max(xi - trust_region_radius, lb)
                ub = min(xi + trust_region_radius, ub)
            self.variable_bounds[i] = Bounds(lb, ub)

    @staticmethod
    def _check_unboundedness(direction: Direction) -> None:
        if direction.status is Status.UNBOUNDED_PROBLEM:
            raise UnboundedSubproblem()

    def _check_problem_fits(self, problem: Problem) -> None:
        """Raise ValueError if the problem exceeds the preallocated dimensions."""
        max_variables = len(self.variable_bounds)
        max_constraints = len(self.constraints)
        if problem.number_variables > max_variables:
            raise ValueError(
                f"the problem has {problem.number_variables} variables, "
                f"the subproblem was allocated for {max_variables}"
            )
        if problem.number_constraints > max_constraints:
            raise ValueError(
                f"the problem has {problem.number_constraints} constraints, "
                f"the subproblem was allocated for {max_constraints}"
            )


class ActiveSetSubproblem(Subproblem):
    """Subproblem solved by an active-set method in the space of displacements."""

    def __init__(self, max_number_variables: int, max_number_constraints: int) -> None:
        super().__init__(max_number_variables, max_number_constraints)
        self.initial_point = [0.0] * max_number_variables
        self.variable_displacement_bounds = [Bounds() for _ in range(max_number_variables)]
        self.linearized_constraint_bounds = [Bounds() for _ in range(max_number_constraints)]

    def initialize(self, statistics: Any, problem: Problem, first_iterate: Iterate) -> None:
        """Check that the problem fits the subproblem; no other setup is needed."""
        self._check_problem_fits(problem)

    def set_initial_point(self, initial_point: Sequence[float]) -> None:
        copy_from(self.initial_point, initial_point)

    def prepare_for_feasibility_problem(self, current_iterate: Iterate) -> None:
        """Check that the iterate fits the subproblem; the model itself is unchanged."""
        capacity = len(self.variable_bounds)
        if len(current_iterate.primals) > capacity:
            raise ValueError(
                f"the iterate has {len(current_iterate.primals)} primals, "
                f"the subproblem was allocated for {capacity}"
            )

    def set_elastic_variables(self, problem: Any, current_iterate: Iterate) -> None:
        """Reset every elastic variable to zero with a unit lower-bound multiplier."""

        def reset_elastic(iterate: Any, j: int, elastic_index: int, jacobian_coefficient: float,
                          constraint_violation_coefficient: float) -> None:
            iterate.primals[elastic_index] = 0.0
            iterate.multipliers.lower_bounds[elastic_index] = 1.0

        problem.set_elastic_variables(current_iterate, reset_elastic)

    def compute_optimality_measure(self, problem: Problem, iterate: Iterate) -> float:
        """Return the original objective value at ``iterate``."""
        iterate.evaluate_objective(problem.model)
        return iterate.original_evaluations.objective

    def postprocess_accepted_iterate(self, problem: Problem, iterate: Iterate) -> None:
        """Check that the problem fits the subproblem; the iterate is left unchanged."""
        self._check_problem_fits(problem)

    def _set_variable_displacement_bounds(self, problem: Problem, current_iterate: Iterate) -> None:
        for i in range(problem.number_variables):
            bounds = self.variable_bounds[i]
            xi = current_iterate.primals[i]
            self.variable_displacement_bounds[i] = Bounds(bounds.lb - xi, bounds.ub - xi)

    def _set_linearized_constraint_bounds(self, problem: Problem, current_constraints: Sequence[float]) -> None:
        for j in range(problem.number_constraints):
            cj = current_constraints[j]
            self.linearized_constraint_bounds[j] = Bounds(
                problem.get_constraint_lower_bound(j) - cj,
                problem.get_constraint_upper_bound(j) - cj,
            )

    def _shift_linearized_constraint_bounds(self, problem: Problem, trial_constraints: Sequence[float]) -> None:
        for j in range(problem.number_constraints):
            bounds = self.linearized_constraint_bounds[j]
            cj = trial_constraints[j]
            self.linearized_constraint_bounds[j] = Bounds(bounds.lb - cj, bounds.ub - cj)

    @staticmethod
    def _compute_dual_displacements(problem: Problem, current_iterate: Iterate, direction: Direction) -> None:
        # active-set solvers return the new duals; turn them into displacements
        for j in range(problem.number_constraints):
            direction.multipliers.constraints[j] -= current_iterate.multipliers.constraints[j]