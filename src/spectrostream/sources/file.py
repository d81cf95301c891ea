"""Playback of decoded audio as an analyser source."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import librosa
import numpy as np

from ..global_config import DEFAULT_SAMPLE_RATE_HZ
from .analyser import AnalyserSource

logger = logging.getLogger(__name__)


class FileAudioSource(AnalyserSource):
    """Play back a mono sample array one frame per spectrum read.

    Every ``frequency_frame()`` call advances the playback cursor by
    ``frame_size`` samples. Once the audio is used up the source reports
    silence, ``finished`` turns True and the ``ended`` event is set.
    """

    def __init__(self, samples, sample_rate_hz: int, name: str | None = None) -> None:
        super().__init__(sample_rate_hz)
        self.samples = np.asarray(samples, dtype=np.float32).reshape(-1)
        self.name = name
        self.position = 0
        self.finished = False
        self.ended: asyncio.Event | None = None

    @classmethod
    def from_file(
        cls, path: Path | str, sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ
    ) -> FileAudioSource:
        """Decode ``path`` to mono at ``sample_rate_hz``."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")
        y, sr = librosa.load(path, sr=sample_rate_hz, mono=True)
        logger.debug("Loaded %s: %d samples @ %d Hz", path.name, len(y), sr)
        return cls(y, int(sr), name=path.name)

    @property
    def duration_s(self) -> float:
        return len(self.samples) / self.sample_rate_hz

    def open(self, frame_size: int) -> None:
        super().open(frame_size)
        self.position = 0
        self.finished = False
        self.ended = asyncio.Event()

    def _advance(self) -> None:
        if self.position >= len(self.samples):
            if not self.finished:
                self.finished = True
                self.ended.set()
            return
        self.position = min(self.position + self.frame_size, len(self.samples))

    def _latest_samples(self, n: int) -> np.ndarray:
        if self.finished:
            return np.zeros(n, dtype=np.float32)
        start = self.position - n
        if start >= 0:
            return self.samples[start : self.position]
        # Cursor is still inside the first window; left pad with silence
        out = np.zeros(n, dtype=np.float32)
        out[n - self.position :] = self.samples[: self.position]
        return out
