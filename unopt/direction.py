"""Primal-dual directions returned by subproblems, with their active sets."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from .vector import format_vector


class Status(Enum):
    """Outcome of a subproblem solve."""

    OPTIMAL = 0
    UNBOUNDED_PROBLEM = 1
    INFEASIBLE = 2

    @property
    def description(self) -> str:
        """Human-readable name of the status."""
        return _STATUS_DESCRIPTIONS[self]

    def __str__(self) -> str:
        return self.description


_STATUS_DESCRIPTIONS = {
    Status.OPTIMAL: "optimal",
    Status.UNBOUNDED_PROBLEM: "unbounded problem",
    Status.INFEASIBLE: "infeasible",
}


@dataclass
class ActiveConstraints:
    """Indices of constraints at their lower or upper bound at the solution."""

    at_lower_bound: list[int] = field(default_factory=list)
    at_upper_bound: list[int] = field(default_factory=list)


@dataclass
class ActiveSet:
    """Active general constraints and active bound constraints."""

    constraints: ActiveConstraints = field(default_factory=ActiveConstraints)
    bounds: ActiveConstraints = field(default_factory=ActiveConstraints)


@dataclass
class ConstraintPartition:
    """Partition of the general constraints into feasible and infeasible ones."""

    feasible: list[int] = field(default_factory=list)
    infeasible: list[int] = field(default_factory=list)
    lower_bound_infeasible: list[int] = field(default_factory=list)
    upper_bound_infeasible: list[int] = field(default_factory=list)


class Multipliers:
    """Lagrange multipliers of the bound constraints and general constraints."""

    def __init__(self, number_variables: int, number_constraints: int) -> None:
        self.lower_bounds = [0.0] * number_variables
        self.upper_bounds = [0.0] * number_variables
        self.constraints = [0.0] * number_constraints

    def __repr__(self) -> str:
        return (
            f"Multipliers(lower_bounds={self.lower_bounds!r}, "
            f"upper_bounds={self.upper_bounds!r}, constraints={self.constraints!r})"
        )


def _indices(prefix: str, indices: list[int]) -> str:
    return "".join(f" {prefix}{i}" for i in indices)


class Direction:
    """Primal displacement and dual information computed by a subproblem."""

    def __init__(self, max_number_variables: int, max_number_constraints: int) -> None:
        self.number_variables = max_number_variables
        self.number_constraints = max_number_constraints
        self.primals = [0.0] * max_number_variables
        self.multipliers = Multipliers(max_number_variables, max_number_constraints)
        self.objective_multiplier = 1.0
        self.status = Status.OPTIMAL
        self.norm = math.inf
        self.objective = math.inf
        self.active_set = ActiveSet()
        self.constraint_partition: ConstraintPartition | None = None

    def set_dimensions(self, number_variables: int, number_constraints: int) -> None:
        """Set the number of variables and constraints actually in use."""
        self.number_variables = number_variables
        self.number_constraints = number_constraints

    def __str__(self) -> str:
        parts = [
            "\nDirection:\n",
            "d^* = ",
            format_vector(self.primals, 0, self.number_variables),
            f"Status: {self.status.description}\n",
            f"objective = {self.objective:g}\n",
            f"norm = {self.norm:g}\n",
            "bound constraints active at lower bound =",
            _indices("x", self.active_set.bounds.at_lower_bound),
            "\nbound constraints active at upper bound =",
            _indices("x", self.active_set.bounds.at_upper_bound),
            "\nconstraints at lower bound =",
            _indices("c", self.active_set.constraints.at_lower_bound),
            "\nconstraints at upper bound =",
            _indices("c", self.active_set.constraints.at_upper_bound),
            "\n",
        ]
        if self.constraint_partition is not None:
            partition = self.constraint_partition
            parts += [
                "general feasible =",
                _indices("c", partition.feasible),
                "\ngeneral lower infeasible =",
                _indices("c", partition.lower_bound_infeasible),
                "\ngeneral upper infeasible =",
                _indices("c", partition.upper_bound_infeasible),
                "\n",
            ]
        parts += [
            f"objective multiplier = {self.objective_multiplier:g}\n",
            "lower bound multipliers = ",
            format_vector(self.multipliers.lower_bounds),
            "upper bound multipliers = ",
            format_vector(self.multipliers.upper_bounds),
            "constraint multipliers = ",
            format_vector(self.multipliers.constraints),
        ]
        return "".join(parts)