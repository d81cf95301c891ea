"""Tests for classifier metadata loading and model validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from spectrostream.scoring import TFLiteClassifier, load_labels
from spectrostream.streaming import InvalidArgumentError


@pytest.mark.unit
class TestLoadLabels:
    def test_word_labels(self, tmp_path: Path) -> None:
        path = tmp_path / "metadata.json"
        path.write_text(json.dumps({"wordLabels": ["noise", "murmur", "normal"]}))
        assert load_labels(path) == ["noise", "murmur", "normal"]

    def test_label_index_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps({"playful": 2, "alert": 0, "anxious": 1}))
        assert load_labels(path) == ["alert", "anxious", "playful"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_labels(tmp_path / "nope.json")

    @pytest.mark.parametrize("payload", [{}, {"wordLabels": []}, ["a", "b"], {"a": "x"}])
    def test_no_labels(self, tmp_path: Path, payload) -> None:
        path = tmp_path / "metadata.json"
        path.write_text(json.dumps(payload))
        with pytest.raises(InvalidArgumentError):
            load_labels(path)


@pytest.mark.unit
def test_tflite_classifier_missing_model(tmp_path: Path) -> None:
    metadata = tmp_path / "metadata.json"
    metadata.write_text(json.dumps({"wordLabels": ["a"]}))
    with pytest.raises(FileNotFoundError):
        TFLiteClassifier(tmp_path / "model.tflite", metadata)
