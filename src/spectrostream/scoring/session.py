"""Classification session: owns score aggregation between begin and end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from ..global_config import DEFAULT_HIGHLIGHT_THRESHOLD
from ..streaming.errors import IllegalStateError
from ..streaming.extractor import ScoringDecision
from ..streaming.normalize import normalize
from .aggregate import AggregateResult, ScoreAggregator
from .classifier import Classifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """Aggregate verdict with class indices mapped to labels."""

    aggregate: AggregateResult
    labels: list[str]
    last_scores: np.ndarray | None = None
    scores_by_label: dict[str, float] = field(default_factory=dict)

    @property
    def label(self) -> str | None:
        if self.aggregate.best_index is None:
            return None
        return self.labels[self.aggregate.best_index]

    @property
    def num_firings(self) -> int:
        return self.aggregate.count


class ClassificationSession:
    """Score spectrogram windows with a classifier and aggregate the results.

    ``on_spectrogram`` is meant to be passed as the extractor's
    spectrogram callback. Scores are recorded only while the session is
    active (between ``begin()`` and ``end()``).
    """

    def __init__(
        self,
        classifier: Classifier,
        *,
        suppress_after_fire: bool = False,
        highlight_threshold: float = DEFAULT_HIGHLIGHT_THRESHOLD,
    ) -> None:
        self.classifier = classifier
        self.labels = list(classifier.labels)
        self.suppress_after_fire = suppress_after_fire
        self.highlight_threshold = highlight_threshold
        self.aggregator = ScoreAggregator(len(self.labels))
        self.last_scores: np.ndarray | None = None
        self.active = False

    def begin(self) -> None:
        self.aggregator.reset()
        self.last_scores = None
        self.active = True
        logger.debug("Session started")

    def end(self) -> SessionResult:
        """Finalize aggregation and close the session.

        Raises:
            IllegalStateError: If the session was not begun.
        """
        if not self.active:
            raise IllegalStateError("Cannot end a session that has not begun")
        self.active = False
        aggregate = self.aggregator.finalize()
        result = SessionResult(
            aggregate=aggregate,
            labels=self.labels,
            last_scores=self.last_scores,
            scores_by_label={
                label: float(score) for label, score in zip(self.labels, aggregate.means)
            },
        )
        logger.info(
            "Session ended: firings=%d label=%s", result.num_firings, result.label
        )
        return result

    def highlighted_labels(self) -> list[str]:
        """Labels whose most recent score exceeds the highlight threshold."""
        if self.last_scores is None:
            return []
        return [
            label
            for label, score in zip(self.labels, self.last_scores)
            if score > self.highlight_threshold
        ]

    async def on_spectrogram(
        self, freq_tensor: np.ndarray, time_tensor: np.ndarray | None = None
    ) -> ScoringDecision:
        scores = np.asarray(await self.classifier.recognize(normalize(freq_tensor))).reshape(-1)
        if self.active:
            self.aggregator.record(scores)
            self.last_scores = scores
            highlighted = self.highlighted_labels()
            if highlighted:
                logger.debug("Above %.2f: %s", self.highlight_threshold, ", ".join(highlighted))
        return ScoringDecision(scores=scores, suppress=self.suppress_after_fire)
