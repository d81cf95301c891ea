"""Analyser-style spectrum snapshots over a sample buffer.

Mirrors how a browser AnalyserNode reports data: the analysis window spans
twice the frame size, is Blackman weighted, and the magnitude of each bin is
reported in decibels. The lower ``frame_size`` bins are returned.
"""

from __future__ import annotations

import numpy as np

from ..streaming.errors import IllegalStateError, InvalidArgumentError


def spectrum_db(samples: np.ndarray, window: np.ndarray) -> np.ndarray:
    """Return the dB magnitude spectrum of ``samples`` weighted by ``window``.

    Bins with zero magnitude come out as ``-inf``; an all-zero input therefore
    reads as silence.
    """
    spectrum = np.abs(np.fft.rfft(samples * window)) / len(window)
    with np.errstate(divide="ignore"):
        return (20.0 * np.log10(spectrum)).astype(np.float32)


class AnalyserSource:
    """Base class for sources that compute spectra from their own sample buffer.

    Subclasses implement ``_latest_samples(n)`` and may override ``_advance()``
    to move a playback cursor on every spectrum read.
    """

    def __init__(self, sample_rate_hz: int) -> None:
        self.sample_rate_hz = sample_rate_hz
        self.frame_size: int | None = None
        self._window: np.ndarray | None = None

    @property
    def analysis_size(self) -> int:
        return 2 * self.frame_size

    def open(self, frame_size: int) -> None:
        if frame_size <= 0:
            raise InvalidArgumentError(f"frame_size must be positive, got {frame_size}")
        self.frame_size = frame_size
        self._window = np.blackman(self.analysis_size).astype(np.float32)

    def close(self) -> None:
        pass

    def _advance(self) -> None:
        pass

    def _latest_samples(self, n: int) -> np.ndarray:
        raise NotImplementedError

    def _require_open(self) -> None:
        if self.frame_size is None:
            raise IllegalStateError(f"{type(self).__name__} must be opened before reading frames")

    def frequency_frame(self) -> np.ndarray:
        self._require_open()
        self._advance()
        samples = self._latest_samples(self.analysis_size)
        return spectrum_db(samples, self._window)[: self.frame_size]

    def time_frame(self) -> np.ndarray:
        self._require_open()
        return self._latest_samples(self.frame_size).astype(np.float32, copy=True)
