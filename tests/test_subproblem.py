import math
from types import SimpleNamespace

import pytest

from unopt.direction import Direction, Multipliers, Status
from unopt.predicted_reduction import PredictedOptimalityReductionModel
from unopt.subproblem import ActiveSetSubproblem, Bounds, Subproblem, UnboundedSubproblem


class Concrete(ActiveSetSubproblem):
    def solve(self, statistics, problem, current_iterate):
        return self.direction

    def compute_second_order_correction(self, problem, trial_iterate):
        return self.direction

    def get_proximal_coefficient(self):
        return 0.0

    def generate_predicted_optimality_reduction_model(self, problem, direction):
        return PredictedOptimalityReductionModel(0.0, lambda: (lambda t: 0.0))

    def get_hessian_evaluation_count(self):
        return 0


class FakeIterate:
    def __init__(self, primals, number_constraints, objective=0.0):
        self.primals = list(primals)
        self.multipliers = Multipliers(len(primals), number_constraints)
        self.original_evaluations = SimpleNamespace(objective=None, constraints=[0.0] * number_constraints)
        self._objective = objective
        self.models_seen = []

    def evaluate_objective(self, model):
        self.models_seen.append(model)
        self.original_evaluations.objective = self._objective


class FakeProblem:
    def __init__(self, variable_bounds, constraint_bounds, number_original_variables=None):
        self.variable_bounds = variable_bounds
        self.constraint_bounds = constraint_bounds
        self.number_variables = len(variable_bounds)
        self.number_constraints = len(constraint_bounds)
        self.number_original = (
            self.number_variables if number_original_variables is None else number_original_variables
        )
        self.model = object()
        self.elastic_calls = []

    def get_number_original_variables(self):
        return self.number_original

    def get_variable_lower_bound(self, i):
        return self.variable_bounds[i][0]

    def get_variable_upper_bound(self, i):
        return self.variable_bounds[i][1]

    def get_constraint_lower_bound(self, j):
        return self.constraint_bounds[j][0]

    def get_constraint_upper_bound(self, j):
        return self.constraint_bounds[j][1]

    def set_elastic_variables(self, iterate, function):
        function(iterate, 0, 2, 1.0, 1.0)


def test_subproblem_is_abstract():
    with pytest.raises(TypeError):
        Subproblem(2, 1)


def test_initial_state():
    sub = Concrete(3, 2)
    assert len(sub.constraints) == 2
    assert len(sub.constraint_jacobian) == 2
    assert sub.constraint_jacobian[0] is not sub.constraint_jacobian[1]
    assert all(b == Bounds(-math.inf, math.inf) for b in sub.variable_bounds)
    assert sub.number_subproblems_solved == 0
    assert sub.subproblem_definition_changed is False
    assert sub.direction.number_variables == 3


def test_trust_region_applies_to_original_variables_only():
    problem = FakeProblem([(-5.0, 0.5), (-10.0, 10.0), (-7.0, 8.0)], [], number_original_variables=2)
    iterate = FakeIterate([0.0, 0.0, 0.0], 0)
    sub = Concrete(3, 0)
    sub.set_variable_bounds(problem, iterate, 1.0)
    assert sub.variable_bounds[0] == Bounds(-1.0, 0.5)
    assert sub.variable_bounds[1] == Bounds(-1.0, 1.0)
    assert sub.variable_bounds[2] == Bounds(-7.0, 8.0)


def test_large_radius_keeps_variable_bounds():
    problem = FakeProblem([(-5.0, 0.5), (2.0, 3.0)], [])
    iterate = FakeIterate([0.0, 2.5], 0)
    sub = Concrete(2, 0)
    sub.set_variable_bounds(problem, iterate, math.inf)
    assert sub.variable_bounds == [Bounds(-5.0, 0.5), Bounds(2.0, 3.0)]


def test_set_initial_point_copies_prefix():
    sub = Concrete(3, 0)
    ActiveSetSubproblem.set_initial_point(sub, [4.0, 5.0])
    assert sub.initial_point[:2] == [4.0, 5.0]
    assert sub.initial_point[2] == 0.0


def test_set_elastic_variables_resets_values():
    problem = FakeProblem([(0.0, 1.0)] * 3, [(0.0, 0.0)])
    iterate = FakeIterate([7.0, 7.0, 7.0], 1)
    iterate.multipliers.lower_bounds[2] = 9.0
    ActiveSetSubproblem.set_elastic_variables(Concrete(3, 1), problem, iterate)
    assert iterate.primals == [7.0, 7.0, 0.0]
    assert iterate.multipliers.lower_bounds[2] == 1.0


def test_optimality_measure_is_objective():
    problem = FakeProblem([(0.0, 1.0)], [])
    iterate = FakeIterate([0.5], 0, objective=3.25)
    measure = ActiveSetSubproblem.compute_optimality_measure(Concrete(1, 0), problem, iterate)
    assert measure == 3.25
    assert iterate.models_seen == [problem.model]


def test_displacement_bounds_at_origin_equal_variable_bounds():
    problem = FakeProblem([(-2.0, 3.0), (1.0, 4.0)], [])
    sub = Concrete(2, 0)
    sub.set_variable_bounds(problem, FakeIterate([0.0, 0.0], 0), math.inf)
    sub._set_variable_displacement_bounds(problem, FakeIterate([0.0, 0.0], 0))
    assert sub.variable_displacement_bounds == [Bounds(-2.0, 3.0), Bounds(1.0, 4.0)]


def test_linearized_bounds_shift_round_trip():
    problem = FakeProblem([], [(1.0, 2.0), (-3.0, math.inf)])
    sub = Concrete(0, 2)
    sub._set_linearized_constraint_bounds(problem, [0.0, 0.0])
    assert sub.linearized_constraint_bounds == [Bounds(1.0, 2.0), Bounds(-3.0, math.inf)]
    sub._shift_linearized_constraint_bounds(problem, [1.0, -3.0])
    assert sub.linearized_constraint_bounds[0].lb == 0.0
    assert sub.linearized_constraint_bounds[1].lb == 0.0
    assert sub.linearized_constraint_bounds[1].ub == math.inf


def test_dual_displacements():
    problem = FakeProblem([(0.0, 1.0)], [(0.0, 0.0), (0.0, 0.0)])
    iterate = FakeIterate([0.0], 2)
    iterate.multipliers.constraints = [1.5, -2.0]
    direction = Direction(1, 2)
    direction.multipliers.constraints = [1.5, -2.0]
    ActiveSetSubproblem._compute_dual_displacements(problem, iterate, direction)
    assert direction.multipliers.constraints == [0.0, 0.0]


def test_unboundedness_raises():
    direction = Direction(1, 0)
    direction.status = Status.UNBOUNDED_PROBLEM
    with pytest.raises(UnboundedSubproblem):
        Subproblem._check_unboundedness(direction)


def test_optimal_direction_passes_unboundedness_check():
    direction = Direction(1, 0)
    Subproblem._check_unboundedness(direction)
    assert direction.status is Status.OPTIMAL