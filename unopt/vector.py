"""Dense vector helpers: norms, scaling, copying and formatting."""

from __future__ import annotations

import math
from collections.abc import Iterable, MutableSequence, Sequence
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class Norm(Enum):
    """Vector norms understood by the solver."""

    L1 = 1
    L2 = 2
    L2_SQUARED = 3
    INF = 4


_NORM_NAMES = {"L1": Norm.L1, "L2": Norm.L2, "INF": Norm.INF}


def norm_from_string(norm_string: str) -> Norm:
    """Return the norm named by ``norm_string`` ("L1", "L2" or "INF")."""
    try:
        return _NORM_NAMES[norm_string]
    except KeyError:
        raise ValueError(f"The norm {norm_string!r} is not known") from None


def add_vectors(x: Sequence[float], y: Sequence[float], scaling_factor: float) -> list[float]:
    """Return ``x + scaling_factor * y`` over the length of ``x``."""
    if len(x) > len(y):
        raise ValueError("add_vectors: x is larger than y")
    return [xi + scaling_factor * yi for xi, yi in zip(x, y)]


def scale(x: Iterable[float], scaling_factor: float) -> list[float]:
    """Return the entries of ``x`` multiplied by ``scaling_factor``."""
    return [xi * scaling_factor for xi in x]


def copy_from(destination: MutableSequence[T], source: Sequence[T], length: int | None = None) -> int:
    """Copy the leading entries of ``source`` into ``destination``.

    At most ``length`` entries are copied, and never more than either
    sequence holds. Returns the number of entries copied.
    """
    count = min(len(source), len(destination))
    if length is not None:
        count = min(count, length)
    destination[:count] = source[:count]
    return count


def norm_1(values: Iterable[float]) -> float:
    """Return the sum of absolute values."""
    return sum((abs(v) for v in values), 0.0)


def norm_2_squared(values: Iterable[float]) -> float:
    """Return the sum of squares."""
    return sum((v * v for v in values), 0.0)


def norm_2(values: Iterable[float]) -> float:
    """Return the Euclidean norm."""
    return math.sqrt(norm_2_squared(values))


def norm_inf(values: Iterable[float]) -> float:
    """Return the largest absolute value (0 for an empty input)."""
    return max((abs(v) for v in values), default=0.0)


_NORM_FUNCTIONS = {
    Norm.L1: norm_1,
    Norm.L2: norm_2,
    Norm.L2_SQUARED: norm_2_squared,
    Norm.INF: norm_inf,
}


def norm(values: Iterable[float], kind: Norm) -> float:
    """Return the norm of ``values`` of the given kind."""
    try:
        function = _NORM_FUNCTIONS[kind]
    except (KeyError, TypeError):
        raise ValueError(f"The norm {kind!r} is not known") from None
    return function(values)


def _format_number(value: object) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_vector(x: Sequence[object], start: int = 0, length: int | None = None) -> str:
    """Format a slice of ``x`` as space-terminated entries followed by a newline."""
    end = len(x) if length is None else min(start + length, len(x))
    return "".join(f"{_format_number(v)} " for v in x[start:end]) + "\n"


def in_increasing_order(values: Sequence[float]) -> bool:
    """Return whether ``values`` is in non-decreasing order."""
    return all(a <= b for a, b in zip(values, values[1:]))