"""Per-session accumulation of classifier scores."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..streaming.errors import InvalidArgumentError, ensure


@dataclass(frozen=True)
class AggregateResult:
    """Final verdict of a session.

    Attributes:
        means: Per-class mean probability over all recorded firings.
        best_index: Argmax class index, or None when nothing was recorded.
        count: Number of recorded firings.
    """

    means: np.ndarray
    best_index: int | None
    count: int

    @property
    def has_data(self) -> bool:
        return self.count > 0


class ScoreAggregator:
    """Running per-class sums of score vectors plus a firing count."""

    def __init__(self, num_classes: int) -> None:
        ensure(num_classes > 0, f"Expected num_classes to be positive, but got {num_classes}")
        self.num_classes = num_classes
        self._sums = np.zeros(num_classes, dtype=np.float64)
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def sums(self) -> np.ndarray:
        return self._sums.copy()

    def record(self, scores) -> None:
        """Add one score vector to the running sums."""
        scores = np.asarray(scores, dtype=np.float64).reshape(-1)
        if scores.shape[0] != self.num_classes:
            raise InvalidArgumentError(
                f"Expected {self.num_classes} scores, but got {scores.shape[0]}"
            )
        self._sums += scores
        self._count += 1

    def reset(self) -> None:
        self._sums[:] = 0.0
        self._count = 0

    def finalize(self) -> AggregateResult:
        """Return mean scores and argmax class, then reset.

        With no recorded firings the means are all zero and best_index is None.
        """
        count = self._count
        if count == 0:
            result = AggregateResult(np.zeros(self.num_classes), None, 0)
        else:
            means = self._sums / count
            result = AggregateResult(means, int(np.argmax(means)), count)
        self.reset()
        return result
