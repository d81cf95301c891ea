"""Classifier wrappers and session score aggregation."""

from .aggregate import AggregateResult, ScoreAggregator
from .classifier import Classifier, TFLiteClassifier, load_labels
from .session import ClassificationSession, SessionResult

__all__ = [
    "AggregateResult",
    "ClassificationSession",
    "Classifier",
    "ScoreAggregator",
    "SessionResult",
    "TFLiteClassifier",
    "load_labels",
]
