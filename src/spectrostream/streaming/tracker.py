"""Periodic firing gate with temporary suppression."""

from __future__ import annotations

from .errors import ensure


class Tracker:
    """Decide on which sampling ticks a classification should fire.

    A tick fires when the tick counter is a multiple of ``period`` and no
    suppression window is active. ``suppress()`` opens a window covering the
    next ``suppression_period`` ticks.
    """

    def __init__(self, period: int, suppression_period: int | None = None) -> None:
        ensure(period > 0, f"Expected period to be positive, but got {period}")
        suppression = 0 if suppression_period is None else suppression_period
        ensure(
            suppression >= 0,
            f"Expected suppression period to be >= 0, but got {suppression}",
        )
        self.period = period
        self.suppression_period = suppression
        self.counter = 0
        self.suppression_onset: int | None = None

    def tick(self) -> bool:
        """Advance the counter by one and return whether this tick fires."""
        self.counter += 1
        return self.counter % self.period == 0 and (
            self.suppression_onset is None
            or self.counter - self.suppression_onset > self.suppression_period
        )

    def suppress(self) -> None:
        """Start a suppression window at the current tick."""
        self.suppression_onset = self.counter
