from dataclasses import dataclass

import pytest

from unopt.augmented_system import (
    AugmentedSystem,
    FunctionType,
    RegularizationParameters,
    UnstableRegularization,
)


class DiagonalSolver:
    """Exact inertia for diagonal matrices."""

    def __init__(self):
        self.diagonal = []
        self.symbolic = 0
        self.numerical = 0

    def do_symbolic_factorization(self, matrix):
        self.symbolic += 1

    def do_numerical_factorization(self, matrix):
        self.numerical += 1
        diagonal = [0.0] * matrix.dimension
        for i, j, entry in matrix:
            if i == j:
                diagonal[i] += entry
        self.diagonal = diagonal

    def get_inertia(self):
        positive = sum(1 for d in self.diagonal if d > 0)
        negative = sum(1 for d in self.diagonal if d < 0)
        return positive, negative, len(self.diagonal) - positive - negative

    def matrix_is_singular(self):
        return self.get_inertia()[2] > 0

    def number_negative_eigenvalues(self):
        return self.get_inertia()[1]

    def rank(self):
        positive, negative, _ = self.get_inertia()
        return positive + negative

    def solve(self, matrix, rhs):
        return [r / d for r, d in zip(rhs, self.diagonal)]


@dataclass
class FakeModel:
    problem_type: FunctionType = FunctionType.NONLINEAR
    fixed_hessian_sparsity: bool = True


def _parameters(threshold=1e40):
    return RegularizationParameters(
        failure_threshold=threshold,
        first_block_initial_factor=1e-4,
        second_block_fraction=0.5,
        first_block_lb=1e-20,
        first_block_decrease_factor=3.0,
        first_block_fast_increase_factor=100.0,
        first_block_slow_increase_factor=8.0,
    )


def _system(diagonal, threshold=1e40):
    system = AugmentedSystem("COO", len(diagonal), len(diagonal), True, _parameters(threshold))
    system.matrix.reset()
    for i, d in enumerate(diagonal):
        system.matrix.insert(d, i, i)
        system.matrix.finalize_column(i)
    return system


def test_good_inertia_leaves_matrix_untouched():
    system = _system([2.0, 3.0, -1.0])
    solver = DiagonalSolver()
    model = FakeModel()
    system.factorize_matrix(model, solver)
    system.regularize_matrix(model, solver, 2, 1, 0.2)
    assert system.matrix.entries[:3] == [0.0, 0.0, 0.0]
    assert system.number_factorizations == 1
    assert system.previous_regularization_first_block == 0.0


def test_regularization_increases_until_inertia_is_correct():
    system = _system([-1.0, 3.0, -1.0])
    solver = DiagonalSolver()
    model = FakeModel()
    system.factorize_matrix(model, solver)
    system.regularize_matrix(model, solver, 2, 1, 0.2)
    assert solver.get_inertia() == (2, 1, 0)
    assert system.previous_regularization_first_block > 1.0
    assert system.number_factorizations > 2


def test_singular_matrix_regularizes_second_block():
    system = _system([2.0, 3.0, 0.0])
    solver = DiagonalSolver()
    model = FakeModel()
    system.factorize_matrix(model, solver)
    system.regularize_matrix(model, solver, 2, 1, 0.2)
    params = system.parameters
    assert system.matrix.entries[0] == params.first_block_initial_factor
    assert system.matrix.entries[2] == pytest.approx(-params.second_block_fraction * 0.2)
    assert system.previous_regularization_first_block == params.first_block_initial_factor


def test_unstable_regularization_raises():
    system = _system([-1.0, 3.0, -1.0], threshold=1e-3)
    solver = DiagonalSolver()
    model = FakeModel()
    system.factorize_matrix(model, solver)
    with pytest.raises(UnstableRegularization):
        system.regularize_matrix(model, solver, 2, 1, 0.2)


@pytest.mark.parametrize(
    "problem_type, fixed, expected_symbolic",
    [
        (FunctionType.LINEAR, True, 1),
        (FunctionType.QUADRATIC, True, 1),
        (FunctionType.NONLINEAR, True, 3),
        (FunctionType.LINEAR, False, 3),
    ],
)
def test_symbolic_factorization_only_when_needed(problem_type, fixed, expected_symbolic):
    system = _system([1.0, 1.0])
    solver = DiagonalSolver()
    model = FakeModel(problem_type, fixed)
    for _ in range(3):
        system.factorize_matrix(model, solver)
    assert solver.symbolic == expected_symbolic
    assert solver.numerical == 3


def test_solve_uses_rhs():
    system = _system([2.0, 4.0])
    solver = DiagonalSolver()
    system.factorize_matrix(FakeModel(), solver)
    system.rhs = [6.0, 2.0]
    result = system.solve(solver)
    assert result == [3.0, 0.5]
    assert system.solution == result