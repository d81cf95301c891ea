"""Classifier interface and TensorFlow Lite backed implementation.

The classifier is opaque to the streaming core: it takes a normalized
``(1, frames, columns, 1)`` spectrogram tensor and returns one probability
per class.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Protocol

import numpy as np

from ..streaming.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Classifier(Protocol):
    labels: list[str]

    @property
    def input_shape(self) -> tuple[int, int]: ...

    async def recognize(self, x: np.ndarray) -> np.ndarray: ...


def load_labels(metadata_path: Path | str) -> list[str]:
    """Read class labels from a metadata JSON file.

    Accepts either ``{"wordLabels": [...]}`` or a ``{label: index}`` mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidArgumentError: If no labels can be read from it.
    """
    metadata_path = Path(metadata_path)
    if not metadata_path.exists():
        raise FileNotFoundError(f"Metadata file not found: {metadata_path}")
    with open(metadata_path, encoding="utf-8") as f:
        metadata = json.load(f)

    if isinstance(metadata, dict) and isinstance(metadata.get("wordLabels"), list):
        labels = [str(label) for label in metadata["wordLabels"]]
    elif isinstance(metadata, dict) and metadata and all(
        isinstance(v, int) for v in metadata.values()
    ):
        labels = [label for label, _ in sorted(metadata.items(), key=lambda kv: kv[1])]
    else:
        labels = []

    if not labels:
        raise InvalidArgumentError(f"No class labels found in {metadata_path}")
    return labels


def _tflite_module():
    try:
        import tflite_runtime.interpreter as tflite
    except ImportError:
        import tensorflow.lite as tflite
    return tflite


class TFLiteClassifier:
    """Speech-command style classifier backed by a ``.tflite`` model."""

    def __init__(self, model_path: Path | str, metadata_path: Path | str) -> None:
        model_path = Path(model_path)
        if not model_path.exists():
            raise FileNotFoundError(f"Model file not found: {model_path}")
        self.labels = load_labels(metadata_path)

        tflite = _tflite_module()
        self.interpreter = tflite.Interpreter(model_path=str(model_path))
        self.interpreter.allocate_tensors()
        self.input_details = self.interpreter.get_input_details()
        self.output_details = self.interpreter.get_output_details()
        logger.info("Loaded classifier model from %s", model_path)

        num_outputs = int(self.output_details[0]["shape"][-1])
        if num_outputs != len(self.labels):
            raise InvalidArgumentError(
                f"Model has {num_outputs} outputs but metadata lists {len(self.labels)} labels"
            )

    @property
    def input_shape(self) -> tuple[int, int]:
        """(num_frames, columns) of the model input, without batch and channel axes."""
        shape = self.input_details[0]["shape"]
        return int(shape[1]), int(shape[2])

    def _invoke(self, x: np.ndarray) -> np.ndarray:
        x = x.astype(self.input_details[0]["dtype"], copy=False)
        self.interpreter.set_tensor(self.input_details[0]["index"], x)
        self.interpreter.invoke()
        return np.array(self.interpreter.get_tensor(self.output_details[0]["index"])[0])

    async def recognize(self, x: np.ndarray) -> np.ndarray:
        """Run inference in a worker thread and return per-class probabilities."""
        return await asyncio.to_thread(self._invoke, x)
