"""Audio source contract consumed by the feature extractor."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class AudioSource(Protocol):
    """Anything that yields fixed-length spectrum and waveform snapshots on demand.

    ``open(frame_size)`` prepares the source; afterwards every
    ``frequency_frame()`` returns ``frame_size`` dB magnitudes (``-inf`` in the
    first bin when there is no signal) and ``time_frame()`` returns the most
    recent ``frame_size`` samples. ``close()`` releases any held resources.
    """

    def open(self, frame_size: int) -> None: ...
    def frequency_frame(self) -> np.ndarray: ...
    def time_frame(self) -> np.ndarray: ...
    def close(self) -> None: ...
