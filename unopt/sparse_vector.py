"""A sparse vector of (index, value) pairs with unique, unsorted indices."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence


class SparseVector:
    """Sparse vector storing indices and values in insertion order."""

    def __init__(self) -> None:
        self._indices: list[int] = []
        self._values: list[float] = []

    def insert(self, index: int, value: float) -> None:
        """Append the entry ``value`` at ``index``."""
        self._indices.append(index)
        self._values.append(value)

    def transform(self, f: Callable[[float], float]) -> None:
        """Replace every stored value ``v`` by ``f(v)``."""
        self._values = [f(v) for v in self._values]

    def clear(self) -> None:
        """Remove all entries."""
        self._indices.clear()
        self._values.clear()

    def indices(self) -> Iterator[int]:
        """Iterate over the stored indices."""
        return iter(self._indices)

    def values(self) -> Iterator[float]:
        """Iterate over the stored values."""
        return iter(self._values)

    def empty(self) -> bool:
        """Return whether the vector holds no entries."""
        return not self._indices

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[tuple[int, float]]:
        return zip(self._indices, self._values)

    def __repr__(self) -> str:
        return f"SparseVector({list(self)!r})"

    def __str__(self) -> str:
        lines = [f"sparse vector with {len(self)} non zeros\n"]
        lines.extend(f"index {i}, value {v:g}\n" for i, v in self)
        return "".join(lines)


def sparse_norm_1(x: SparseVector) -> float:
    """Return the sum of absolute values of the stored entries."""
    return sum((abs(v) for v in x.values()), 0.0)


def sparse_norm_inf(x: SparseVector) -> float:
    """Return the largest absolute stored value (0 when empty)."""
    return max((abs(v) for v in x.values()), default=0.0)


def dot(x: Sequence[float], y: SparseVector, predicate: Callable[[int], bool] | None = None) -> float:
    """Return the dot product of dense ``x`` and sparse ``y``.

    When ``predicate`` is given, only indices for which it holds contribute.
    """
    result = 0.0
    for i, yi in y:
        if i >= len(x):
            raise IndexError("dot: the sparse vector y is larger than the dense vector x")
        if predicate is None or predicate(i):
            result += x[i] * yi
    return result


def scale_sparse(x: SparseVector, factor: float) -> None:
    """Multiply the entries of ``x`` by ``factor``; a zero factor empties it."""
    if factor == 0.0:
        x.clear()
    else:
        x.transform(lambda entry: factor * entry)