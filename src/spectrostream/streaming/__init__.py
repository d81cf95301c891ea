"""Streaming feature extraction package."""

from .errors import IllegalStateError, InvalidArgumentError, StreamingError
from .extractor import FeatureExtractor, FeatureExtractorConfig, ScoringDecision
from .frames import FrameQueue, flatten_frames, to_input_tensor
from .normalize import EPSILON, normalize
from .tracker import Tracker

__all__ = [
    "EPSILON",
    "FeatureExtractor",
    "FeatureExtractorConfig",
    "FrameQueue",
    "IllegalStateError",
    "InvalidArgumentError",
    "ScoringDecision",
    "StreamingError",
    "Tracker",
    "flatten_frames",
    "normalize",
    "to_input_tensor",
]
