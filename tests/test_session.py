"""Tests for the classification session controller."""

from __future__ import annotations

import asyncio

import numpy as np
import pytest

from spectrostream.scoring import ClassificationSession
from spectrostream.streaming import IllegalStateError, ScoringDecision


class FakeClassifier:
    labels = ["murmur", "normal", "noise"]
    input_shape = (4, 8)

    def __init__(self, outputs=None) -> None:
        self.outputs = list(outputs or [[0.2, 0.7, 0.1]])
        self.inputs: list[np.ndarray] = []

    async def recognize(self, x: np.ndarray) -> np.ndarray:
        self.inputs.append(x)
        return np.array(self.outputs[min(len(self.inputs), len(self.outputs)) - 1])


def _tensor(seed: int = 0) -> np.ndarray:
    return np.random.default_rng(seed).normal(-50, 10, size=(1, 4, 8, 1)).astype(np.float32)


@pytest.mark.unit
class TestClassificationSession:
    def test_scores_are_aggregated_until_end(self) -> None:
        classifier = FakeClassifier([[0.6, 0.3, 0.1], [0.2, 0.7, 0.1]])
        session = ClassificationSession(classifier)
        session.begin()
        asyncio.run(session.on_spectrogram(_tensor(0)))
        asyncio.run(session.on_spectrogram(_tensor(1)))
        result = session.end()
        np.testing.assert_allclose(result.aggregate.means, [0.4, 0.5, 0.1])
        assert result.label == "normal"
        assert result.num_firings == 2
        assert result.scores_by_label["murmur"] == pytest.approx(0.4)
        np.testing.assert_allclose(result.last_scores, [0.2, 0.7, 0.1])

    def test_classifier_receives_normalized_input(self) -> None:
        classifier = FakeClassifier()
        session = ClassificationSession(classifier)
        session.begin()
        asyncio.run(session.on_spectrogram(_tensor()))
        x = classifier.inputs[0]
        assert x.shape == (1, 4, 8, 1)
        assert abs(float(np.mean(x))) < 1e-4

    def test_decision_carries_scores_and_suppress_flag(self) -> None:
        session = ClassificationSession(FakeClassifier(), suppress_after_fire=True)
        session.begin()
        decision = asyncio.run(session.on_spectrogram(_tensor()))
        assert isinstance(decision, ScoringDecision)
        assert decision.suppress is True
        np.testing.assert_allclose(decision.scores, [0.2, 0.7, 0.1])

    def test_end_without_firings_is_no_data(self) -> None:
        session = ClassificationSession(FakeClassifier())
        session.begin()
        result = session.end()
        assert result.label is None
        assert result.num_firings == 0
        assert result.scores_by_label == {"murmur": 0.0, "normal": 0.0, "noise": 0.0}

    def test_scores_outside_session_are_not_recorded(self) -> None:
        session = ClassificationSession(FakeClassifier())
        asyncio.run(session.on_spectrogram(_tensor()))
        session.begin()
        assert session.aggregator.count == 0
        assert session.end().num_firings == 0

    def test_begin_resets_previous_session(self) -> None:
        session = ClassificationSession(FakeClassifier())
        session.begin()
        asyncio.run(session.on_spectrogram(_tensor()))
        session.begin()
        assert session.aggregator.count == 0
        assert session.last_scores is None

    def test_end_twice_fails(self) -> None:
        session = ClassificationSession(FakeClassifier())
        session.begin()
        session.end()
        with pytest.raises(IllegalStateError):
            session.end()

    def test_highlighted_labels(self) -> None:
        session = ClassificationSession(FakeClassifier([[0.55, 0.5, 0.9]]))
        assert session.highlighted_labels() == []
        session.begin()
        asyncio.run(session.on_spectrogram(_tensor()))
        assert session.highlighted_labels() == ["murmur", "noise"]
