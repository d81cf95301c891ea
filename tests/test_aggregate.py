"""Tests for session score aggregation."""

from __future__ import annotations

import numpy as np
import pytest

from spectrostream.scoring import ScoreAggregator
from spectrostream.streaming import InvalidArgumentError


@pytest.mark.unit
class TestScoreAggregator:
    def test_finalize_returns_elementwise_mean(self) -> None:
        agg = ScoreAggregator(3)
        agg.record([0.2, 0.5, 0.3])
        agg.record([0.4, 0.1, 0.5])
        result = agg.finalize()
        np.testing.assert_allclose(result.means, [0.3, 0.3, 0.4])
        assert result.best_index == 2
        assert result.count == 2
        assert result.has_data

    def test_finalize_resets(self) -> None:
        agg = ScoreAggregator(2)
        agg.record([1.0, 0.0])
        agg.finalize()
        assert agg.count == 0
        np.testing.assert_array_equal(agg.sums, [0.0, 0.0])

    def test_finalize_without_data(self) -> None:
        result = ScoreAggregator(4).finalize()
        np.testing.assert_array_equal(result.means, np.zeros(4))
        assert result.best_index is None
        assert result.count == 0
        assert not result.has_data

    def test_sessions_do_not_leak(self) -> None:
        agg = ScoreAggregator(2)
        agg.record([0.9, 0.1])
        agg.finalize()
        agg.record([0.2, 0.8])
        result = agg.finalize()
        np.testing.assert_allclose(result.means, [0.2, 0.8])
        assert result.best_index == 1

    def test_rejects_wrong_length(self) -> None:
        agg = ScoreAggregator(3)
        with pytest.raises(InvalidArgumentError):
            agg.record([0.5, 0.5])

    def test_rejects_non_positive_class_count(self) -> None:
        with pytest.raises(InvalidArgumentError):
            ScoreAggregator(0)

    def test_sums_is_a_copy(self) -> None:
        agg = ScoreAggregator(2)
        agg.record([0.5, 0.5])
        sums = agg.sums
        sums[0] = 100.0
        assert agg.sums[0] == 0.5
