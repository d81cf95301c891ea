"""Tests for the firing tracker."""

from __future__ import annotations

import pytest

from spectrostream.streaming import InvalidArgumentError, Tracker


def _fired_ticks(tracker: Tracker, n: int) -> list[int]:
    return [i for i in range(1, n + 1) if tracker.tick()]


@pytest.mark.unit
class TestTracker:
    def test_fires_on_multiples_of_period(self) -> None:
        assert _fired_ticks(Tracker(4), 12) == [4, 8, 12]

    def test_period_one_fires_every_tick(self) -> None:
        assert _fired_ticks(Tracker(1), 3) == [1, 2, 3]

    @pytest.mark.parametrize("period", [0, -1])
    def test_rejects_non_positive_period(self, period: int) -> None:
        with pytest.raises(InvalidArgumentError):
            Tracker(period)

    def test_rejects_negative_suppression(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Tracker(3, -1)

    def test_none_suppression_means_zero(self) -> None:
        tracker = Tracker(3, None)
        assert tracker.suppression_period == 0

    def test_suppression_example(self) -> None:
        tracker = Tracker(3, 2)
        assert [tracker.tick() for _ in range(3)] == [False, False, True]
        tracker.suppress()
        assert tracker.tick() is False  # 4
        assert tracker.tick() is False  # 5
        assert tracker.tick() is True  # 6: 6 - 3 = 3 > 2

    def test_suppression_skips_period_multiple_inside_window(self) -> None:
        tracker = Tracker(2, 3)
        assert _fired_ticks(tracker, 2) == [2]
        tracker.suppress()
        # 4 - 2 = 2 is not > 3, so tick 4 is swallowed; 6 - 2 = 4 fires
        assert [i for i in range(3, 9) if tracker.tick()] == [6, 8]

    def test_zero_suppression_does_not_block_next_multiple(self) -> None:
        tracker = Tracker(1, 0)
        tracker.tick()
        tracker.suppress()
        assert tracker.tick() is True

    @pytest.mark.parametrize("period,suppression", [(1, 0), (2, 1), (3, 5), (5, 2)])
    def test_fires_only_on_multiples_outside_suppression(self, period: int, suppression: int) -> None:
        tracker = Tracker(period, suppression)
        onset = None
        for i in range(1, 60):
            fired = tracker.tick()
            expected = i % period == 0 and (onset is None or i - onset > suppression)
            assert fired == expected
            if fired and i % 2 == 0:
                tracker.suppress()
                onset = i
