"""Sparse symmetric matrices in coordinate (COO) and compressed column (CSC) form."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence

from .vector import format_vector


class SymmetricMatrix(ABC):
    """Sparse symmetric matrix built incrementally, column by column.

    Only one triangle is stored. When ``use_regularization`` is set, one
    diagonal slot per row is reserved so that a diagonal shift can later be
    written in place with :meth:`set_regularization`.
    """

    def __init__(self, dimension: int, original_capacity: int, use_regularization: bool) -> None:
        self.dimension = dimension
        self.capacity = original_capacity + (dimension if use_regularization else 0)
        self.use_regularization = use_regularization
        self._entries: list[float] = []

    @property
    def number_nonzeros(self) -> int:
        """Number of stored entries, regularization slots included."""
        return len(self._entries)

    @property
    def entries(self) -> list[float]:
        """A copy of the stored entries in storage order."""
        return list(self._entries)

    def reset(self) -> None:
        """Empty the matrix."""
        self._entries.clear()

    def quadratic_product(self, x: Sequence[float], y: Sequence[float], block_size: int) -> float:
        """Return ``x^T M y`` restricted to the leading ``block_size`` block."""
        if len(x) != len(y):
            raise ValueError("quadratic_product: the two vectors x and y do not have the same size")
        if block_size > len(x):
            raise ValueError("quadratic_product: the block size is larger than the vectors")
        result = 0.0
        for i, j, entry in self:
            if i < block_size and j < block_size:
                result += (1.0 if i == j else 2.0) * entry * x[i] * y[j]
        return result

    @abstractmethod
    def __iter__(self) -> Iterator[tuple[int, int, float]]:
        """Iterate over the stored ``(row, column, entry)`` triplets."""

    @abstractmethod
    def insert(self, term: float, row_index: int, column_index: int) -> None:
        """Append an entry at ``(row_index, column_index)``."""

    @abstractmethod
    def finalize_column(self, column_index: int) -> None:
        """Signal that ``column_index`` is complete."""

    @abstractmethod
    def smallest_diagonal_entry(self) -> float:
        """Return the smallest stored diagonal entry, or 0 if there is none."""

    @abstractmethod
    def set_regularization(self, regularization_function: Callable[[int], float]) -> None:
        """Write ``regularization_function(i)`` into each reserved diagonal slot."""

    @abstractmethod
    def _body(self) -> str:
        """Return the format-specific textual description of the contents."""

    def _check_regularization(self) -> None:
        if not self.use_regularization:
            raise RuntimeError(
                "You are trying to regularize a matrix where regularization was not preallocated."
            )

    def __str__(self) -> str:
        header = f"Dimension: {self.dimension}, number of nonzeros: {self.number_nonzeros}\n"
        return header + self._body()


class COOSymmetricMatrix(SymmetricMatrix):
    """Coordinate-list storage; regularization slots lie at the start of the entries."""

    def __init__(self, dimension: int, original_capacity: int, use_regularization: bool) -> None:
        super().__init__(dimension, original_capacity, use_regularization)
        self._row_indices: list[int] = []
        self._column_indices: list[int] = []
        if self.use_regularization:
            self._initialize_regularization()

    def reset(self) -> None:
        super().reset()
        self._row_indices.clear()
        self._column_indices.clear()
        if self.use_regularization:
            self._initialize_regularization()

    def __iter__(self) -> Iterator[tuple[int, int, float]]:
        return zip(self._row_indices, self._column_indices, self._entries)

    def insert(self, term: float, row_index: int, column_index: int) -> None:
        self._entries.append(term)
        self._row_indices.append(row_index)
        self._column_indices.append(column_index)

    def finalize_column(self, column_index: int) -> None:
        """Columns need no finalization in coordinate form."""

    def smallest_diagonal_entry(self) -> float:
        smallest = min((entry for i, j, entry in self if i == j), default=math.inf)
        return 0.0 if smallest == math.inf else smallest

    def set_regularization(self, regularization_function: Callable[[int], float]) -> None:
        self._check_regularization()
        for i in range(self.dimension):
            self._entries[i] = regularization_function(i)

    def _body(self) -> str:
        return "".join(f"m({i}, {j}) = {entry:g}\n" for i, j, entry in self)

    def _initialize_regularization(self) -> None:
        for i in range(self.dimension):
            self.insert(0.0, i, i)


class CSCSymmetricMatrix(SymmetricMatrix):
    """Compressed sparse column storage; columns must be filled in order.

    With regularization, the reserved diagonal slot is the last entry of
    each column, appended when the column is finalized.
    """

    def __init__(self, dimension: int, original_capacity: int, use_regularization: bool) -> None:
        super().__init__(dimension, original_capacity, use_regularization)
        self._column_starts: list[int] = [0] * (dimension + 1)
        self._row_indices: list[int] = []
        self._current_column = 0

    @property
    def column_starts(self) -> list[int]:
        """A copy of the column start offsets (``dimension + 1`` values)."""
        return list(self._column_starts[: self.dimension + 1])

    @property
    def row_indices(self) -> list[int]:
        """A copy of the row indices in storage order."""
        return list(self._row_indices)

    def reset(self) -> None:
        super().reset()
        self._row_indices.clear()
        self._column_starts = [0] * (self.dimension + 1)
        self._current_column = 0

    def __iter__(self) -> Iterator[tuple[int, int, float]]:
        for j in range(self.dimension):
            for i, entry in self.column(j):
                yield i, j, entry

    def column(self, column_index: int) -> Iterator[tuple[int, float]]:
        """Iterate over the ``(row, entry)`` pairs of one column."""
        start = self._column_starts[column_index]
        end = self._column_starts[column_index + 1]
        return zip(self._row_indices[start:end], self._entries[start:end])

    def insert(self, term: float, row_index: int, column_index: int) -> None:
        if column_index != self._current_column:
            raise ValueError("The previous columns should be finalized")
        self._entries.append(term)
        self._row_indices.append(row_index)
        self._column_starts[column_index + 1] += 1

    def finalize_column(self, column_index: int) -> None:
        if column_index != self._current_column:
            raise ValueError("You are not finalizing the current column")
        if column_index >= self.dimension:
            raise ValueError("The dimension of the matrix was exceeded")
        if self.use_regularization:
            self.insert(0.0, column_index, column_index)
        self._current_column += 1
        # the next column starts where this one ends
        if column_index < self.dimension - 1:
            self._column_starts[column_index + 2] = self._column_starts[column_index + 1]

    def smallest_diagonal_entry(self) -> float:
        smallest = math.inf
        for j in range(self.dimension):
            start, end = self._column_starts[j], self._column_starts[j + 1]
            # a diagonal entry, if present, is the last one of its column
            if start < end and self._row_indices[end - 1] == j:
                smallest = min(smallest, self._entries[end - 1])
        return 0.0 if smallest == math.inf else smallest

    def set_regularization(self, regularization_function: Callable[[int], float]) -> None:
        self._check_regularization()
        for i in range(self.dimension):
            self._entries[self._column_starts[i + 1] - 1] = regularization_function(i)

    def _body(self) -> str:
        nnz = self.number_nonzeros
        return (
            "W = "
            + format_vector(self._entries, 0, nnz)
            + "with column start: "
            + format_vector(self._column_starts, 0, self.dimension + 1)
            + "and row index: "
            + format_vector(self._row_indices, 0, nnz)
        )


_MATRIX_TYPES: dict[str, type[SymmetricMatrix]] = {
    "COO": COOSymmetricMatrix,
    "CSC": CSCSymmetricMatrix,
}


def create_symmetric_matrix(
    symmetric_matrix_type: str, dimension: int, capacity: int, use_regularization: bool
) -> SymmetricMatrix:
    """Create an empty symmetric matrix of the named sparse format ("COO" or "CSC")."""
    try:
        matrix_class = _MATRIX_TYPES[symmetric_matrix_type]
    except KeyError:
        raise ValueError(f"Symmetric matrix type {symmetric_matrix_type!r} unknown") from None
    return matrix_class(dimension, capacity, use_regularization)