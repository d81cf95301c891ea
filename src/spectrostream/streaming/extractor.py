"""Streaming feature extractor.

Samples an audio source at a fixed cadence, keeps a sliding window of
spectrum frames, and hands a fixed-shape tensor to a scoring callback when
the tracker allows it.

Overlap policy: callbacks are serialized. The sampling task awaits each
callback before taking the next sample; tick deadlines stay on a fixed grid,
and deadlines missed while a callback runs are dropped (counted in
``dropped_ticks``), never queued.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .errors import IllegalStateError, ensure
from .frames import FrameQueue, to_input_tensor
from .tracker import Tracker

if TYPE_CHECKING:
    from ..sources.base import AudioSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringDecision:
    """Outcome of one scoring callback.

    Attributes:
        scores: Per-class probabilities, if the callback produced any.
        suppress: Whether the tracker should enter its suppression window.
    """

    scores: np.ndarray | None = None
    suppress: bool = False


SpectrogramCallback = Callable[
    [np.ndarray, "np.ndarray | None"], Awaitable["ScoringDecision | bool"]
]


@dataclass
class FeatureExtractorConfig:
    """In-memory configuration for FeatureExtractor.

    Attributes:
        spectrogram_callback: Async callable taking (freq_tensor, time_tensor)
            and returning a ScoringDecision (or a bool suppress flag).
        num_frames_per_spectrogram: Frames per classification window.
        overlap_factor: Fraction of the window shared by consecutive firings.
        sample_rate_hz: Sample rate of the audio source.
        fft_size: Frame size; one frame is sampled every fft_size / sample_rate_hz s.
        column_truncate_length: Width each frequency frame is truncated to.
            Defaults to fft_size.
        suppression_time_millis: Cooldown after a firing that requests it.
        include_raw_audio: Also keep a time-domain window and pass it along.
        fire_before_full: Fire on tracker permission even before the window
            holds num_frames_per_spectrogram frames (input left zero padded).
    """

    spectrogram_callback: SpectrogramCallback | None
    num_frames_per_spectrogram: int
    overlap_factor: float = 0.0
    sample_rate_hz: int = 44100
    fft_size: int = 1024
    column_truncate_length: int | None = None
    suppression_time_millis: float = 0.0
    include_raw_audio: bool = False
    fire_before_full: bool = False


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


class FeatureExtractor:
    """Idle/streaming state machine driving the sampling loop."""

    def __init__(self, config: FeatureExtractorConfig | None) -> None:
        ensure(
            config is not None,
            "Required configuration object is missing for FeatureExtractor",
        )
        ensure(
            config.spectrogram_callback is not None,
            "spectrogram_callback cannot be None",
        )
        ensure(
            config.num_frames_per_spectrogram > 0,
            f"Invalid value in num_frames_per_spectrogram: {config.num_frames_per_spectrogram}",
        )
        ensure(
            config.suppression_time_millis >= 0,
            f"Expected suppression_time_millis to be >= 0, but got {config.suppression_time_millis}",
        )
        ensure(
            0 <= config.overlap_factor < 1,
            f"Expected overlap_factor to be >= 0 and < 1, but got {config.overlap_factor}",
        )
        ensure(config.sample_rate_hz > 0, f"Invalid sample_rate_hz: {config.sample_rate_hz}")
        ensure(config.fft_size > 0, f"Invalid fft_size: {config.fft_size}")
        column_truncate_length = config.column_truncate_length or config.fft_size
        ensure(
            0 < column_truncate_length <= config.fft_size,
            f"column_truncate_length {column_truncate_length} must be in (0, fft_size={config.fft_size}].",
        )

        self.spectrogram_callback = config.spectrogram_callback
        self.num_frames = config.num_frames_per_spectrogram
        self.overlap_factor = config.overlap_factor
        self.sample_rate_hz = config.sample_rate_hz
        self.fft_size = config.fft_size
        self.column_truncate_length = column_truncate_length
        self.suppression_time_millis = config.suppression_time_millis
        self.include_raw_audio = config.include_raw_audio
        self.fire_before_full = config.fire_before_full

        self.frame_duration_millis = self.fft_size / self.sample_rate_hz * 1e3
        self.period = max(1, round_half_up(self.num_frames * (1 - self.overlap_factor)))
        self.suppression_ticks = round_half_up(
            self.suppression_time_millis / self.frame_duration_millis
        )

        self._source: AudioSource | None = None
        self._streaming = False
        self._task: asyncio.Task | None = None
        self._inflight: asyncio.Future | None = None
        self._freq_queue: FrameQueue | None = None
        self._time_queue: FrameQueue | None = None
        self._tracker: Tracker | None = None
        self.fire_count = 0
        self.dropped_ticks = 0

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    @property
    def sampling_task(self) -> asyncio.Task | None:
        """Task running the paced sampling loop, if any."""
        return self._task

    @property
    def tracker(self) -> Tracker | None:
        return self._tracker

    @property
    def frequency_queue(self) -> FrameQueue | None:
        return self._freq_queue

    @property
    def time_queue(self) -> FrameQueue | None:
        return self._time_queue

    async def start(self, source: AudioSource, *, paced: bool = True) -> None:
        """Begin streaming from ``source``.

        Args:
            source: Audio source producing frequency (and time) frames.
            paced: If True, schedule a sampling task at the frame interval.
                If False, the caller drives ``process_frame()`` itself.

        Raises:
            IllegalStateError: If the extractor is already streaming.
        """
        if self._streaming:
            raise IllegalStateError("Cannot start already-started FeatureExtractor")

        source.open(self.fft_size)
        self._source = source
        self._freq_queue = FrameQueue(self.num_frames, self.column_truncate_length)
        self._time_queue = (
            FrameQueue(self.num_frames, self.fft_size) if self.include_raw_audio else None
        )
        self._tracker = Tracker(self.period, self.suppression_ticks)
        self.fire_count = 0
        self.dropped_ticks = 0
        self._streaming = True
        if paced:
            self._task = asyncio.create_task(self._run())
        logger.info(
            "Feature extractor started: frames=%d period=%d suppression_ticks=%d interval=%.2fms paced=%s",
            self.num_frames,
            self.period,
            self.suppression_ticks,
            self.frame_duration_millis,
            paced,
        )

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.frame_duration_millis / 1e3
        deadline = loop.time() + interval
        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            await self.process_frame()
            deadline += interval
            now = loop.time()
            if deadline < now:
                missed = int((now - deadline) // interval) + 1
                deadline += missed * interval
                self.dropped_ticks += missed
                logger.debug("Dropped %d sampling tick(s) behind a slow callback", missed)

    async def process_frame(self) -> bool:
        """Run one sampling tick.

        Returns:
            True if the scoring callback was invoked on this tick.

        Raises:
            IllegalStateError: If the extractor is not streaming.
            Exception: Whatever the scoring callback raises.
        """
        if not self._streaming:
            raise IllegalStateError("Cannot process frames while not streaming")

        freq = self._source.frequency_frame()
        if freq[0] == -np.inf:
            return False

        self._freq_queue.push(freq[: self.column_truncate_length])
        if self._time_queue is not None:
            self._time_queue.push(self._source.time_frame()[: self.fft_size])

        if not self._tracker.tick():
            return False
        if not self._freq_queue.is_full and not self.fire_before_full:
            logger.debug(
                "Tick %d skipped: window holds %d/%d frames",
                self._tracker.counter,
                len(self._freq_queue),
                self.num_frames,
            )
            return False

        freq_tensor = to_input_tensor(
            self._freq_queue.flatten(),
            (1, self.num_frames, self.column_truncate_length, 1),
        )
        time_tensor = None
        if self._time_queue is not None:
            time_tensor = to_input_tensor(
                self._time_queue.flatten(), (1, self.num_frames * self.fft_size)
            )

        self.fire_count += 1
        logger.debug("Firing at tick %d (firing #%d)", self._tracker.counter, self.fire_count)
        inflight = self._inflight = asyncio.ensure_future(
            self.spectrogram_callback(freq_tensor, time_tensor)
        )
        try:
            decision = await asyncio.shield(inflight)
        finally:
            # stop() may already have taken over the future
            if self._inflight is inflight and inflight.done():
                self._inflight = None
        del freq_tensor, time_tensor

        if isinstance(decision, ScoringDecision):
            suppress = decision.suppress
        else:
            suppress = bool(decision)
        if suppress and self._streaming:
            self._tracker.suppress()
        return True

    async def wait(self) -> None:
        """Wait for the sampling task to end, re-raising a callback failure."""
        if self._task is None:
            return
        try:
            await self._task
        finally:
            if self._task is not None and self._task.done():
                self._task = None

    async def stop(self) -> None:
        """Stop streaming and release the audio source.

        An in-flight callback is allowed to finish; its side effects stand
        and its suppress flag is discarded.

        Raises:
            IllegalStateError: If the extractor is not streaming.
        """
        if not self._streaming:
            raise IllegalStateError("Cannot stop because there is no ongoing streaming activity.")
        self._streaming = False

        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:  # noqa: BLE001
                logger.exception("Sampling task ended with an error")

        inflight, self._inflight = self._inflight, None
        if inflight is not None:
            try:
                await inflight
            except Exception:  # noqa: BLE001
                logger.exception("In-flight scoring callback failed during stop")

        source, self._source = self._source, None
        source.close()
        logger.info(
            "Feature extractor stopped: firings=%d dropped_ticks=%d",
            self.fire_count,
            self.dropped_ticks,
        )
