import math

import pytest

from unopt.direction import (
    ActiveConstraints,
    ActiveSet,
    ConstraintPartition,
    Direction,
    Multipliers,
    Status,
)


def test_defaults():
    direction = Direction(3, 2)
    assert direction.primals == [0.0, 0.0, 0.0]
    assert direction.multipliers.constraints == [0.0, 0.0]
    assert direction.multipliers.lower_bounds == [0.0, 0.0, 0.0]
    assert direction.objective_multiplier == 1.0
    assert direction.status is Status.OPTIMAL
    assert math.isinf(direction.norm)
    assert math.isinf(direction.objective)
    assert direction.constraint_partition is None


def test_set_dimensions_keeps_storage():
    direction = Direction(5, 4)
    direction.set_dimensions(2, 1)
    assert (direction.number_variables, direction.number_constraints) == (2, 1)
    assert len(direction.primals) == 5


@pytest.mark.parametrize("status,text", [
    (Status.OPTIMAL, "optimal"),
    (Status.UNBOUNDED_PROBLEM, "unbounded problem"),
    (Status.INFEASIBLE, "infeasible"),
])
def test_status_descriptions_in_direction_output(status, text):
    direction = Direction(1, 0)
    direction.status = status
    assert f"Status: {text}\n" in str(direction)


def test_multipliers_sizes():
    multipliers = Multipliers(4, 2)
    assert len(multipliers.lower_bounds) == 4
    assert len(multipliers.upper_bounds) == 4
    assert len(multipliers.constraints) == 2


def test_str_prints_primals_and_active_set():
    direction = Direction(2, 1)
    direction.primals = [1.5, -2.0]
    direction.active_set = ActiveSet(
        constraints=ActiveConstraints(at_lower_bound=[0]),
        bounds=ActiveConstraints(at_upper_bound=[1]),
    )
    text = str(direction)
    assert "d^* = 1.5 -2 \n" in text
    assert "Status: optimal\n" in text
    assert "bound constraints active at upper bound = x1\n" in text
    assert "constraints at lower bound = c0\n" in text
    assert "general feasible" not in text


def test_str_prints_partition():
    direction = Direction(1, 3)
    direction.constraint_partition = ConstraintPartition(
        feasible=[0], infeasible=[1, 2], lower_bound_infeasible=[1], upper_bound_infeasible=[2]
    )
    text = str(direction)
    assert "general feasible = c0\n" in text
    assert "general lower infeasible = c1\n" in text
    assert "general upper infeasible = c2\n" in text


def test_partitions_are_independent():
    first = ConstraintPartition()
    second = ConstraintPartition()
    first.feasible.append(3)
    assert second.feasible == []