"""Live microphone capture as an analyser source (sounddevice)."""

from __future__ import annotations

import logging
import threading

import numpy as np

from ..global_config import DEFAULT_SAMPLE_RATE_HZ
from .analyser import AnalyserSource

logger = logging.getLogger(__name__)


class MicrophoneAudioSource(AnalyserSource):
    """Keep the most recent analysis window of microphone input.

    The PortAudio callback thread writes into a ring buffer guarded by a lock;
    frame reads copy the latest samples out of it.
    """

    def __init__(
        self,
        sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
        device: int | str | None = None,
    ) -> None:
        super().__init__(sample_rate_hz)
        self.device = device
        self._stream = None
        self._buffer = np.zeros(0, dtype=np.float32)
        self._lock = threading.Lock()

    def open(self, frame_size: int) -> None:
        # Imported here: PortAudio is loaded at import time and is missing on headless hosts
        import sounddevice as sd

        super().open(frame_size)
        with self._lock:
            self._buffer = np.zeros(self.analysis_size, dtype=np.float32)
        stream = sd.InputStream(
            samplerate=self.sample_rate_hz,
            channels=1,
            dtype="float32",
            device=self.device,
            callback=self._on_audio,
        )
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream
        logger.info("Microphone capture started (device=%s, %d Hz)", self.device, self.sample_rate_hz)

    def _on_audio(self, indata, frames, time_info, status) -> None:
        if status:
            logger.warning("Input stream status: %s", status)
        self.push_samples(indata[:, 0])

    def push_samples(self, samples: np.ndarray) -> None:
        """Append samples to the ring buffer, keeping only the newest window."""
        samples = np.asarray(samples, dtype=np.float32).reshape(-1)
        if samples.size == 0:
            return
        with self._lock:
            size = len(self._buffer)
            if samples.shape[0] >= size:
                self._buffer[:] = samples[-size:]
            else:
                self._buffer = np.roll(self._buffer, -samples.shape[0])
                self._buffer[-samples.shape[0] :] = samples

    def _latest_samples(self, n: int) -> np.ndarray:
        with self._lock:
            return self._buffer[-n:].copy()

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()
            logger.info("Microphone capture stopped")
