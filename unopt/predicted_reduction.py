"""Lazily evaluated model of the predicted reduction of the optimality measure."""

from __future__ import annotations

from collections.abc import Callable


class PredictedOptimalityReductionModel:
    """Predicted reduction as a function of the step length.

    The full step value is known up front. For other step lengths, the
    precomputation is run once and the function it returns is reused.
    """

    def __init__(
        self,
        full_step_value: float,
        partial_step_precomputation: Callable[[], Callable[[float], float]],
    ) -> None:
        self.full_step_predicted_reduction = full_step_value
        self._partial_step_precomputation = partial_step_precomputation
        self._partial_step_predicted_reduction: Callable[[float], float] | None = None

    def evaluate(self, step_length: float) -> float:
        """Return the predicted reduction for ``step_length``."""
        if step_length == 1.0:
            return self.full_step_predicted_reduction
        if self._partial_step_predicted_reduction is None:
            self._partial_step_predicted_reduction = self._partial_step_precomputation()
        return self._partial_step_predicted_reduction(step_length)