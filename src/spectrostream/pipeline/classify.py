"""Pipeline for classifying audio files and microphone captures."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..global_config import (
    DEFAULT_FFT_SIZE,
    DEFAULT_OVERLAP_FACTOR,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_SUPPRESSION_TIME_MILLIS,
    RAW_AUDIO_DIR,
)
from ..scoring.classifier import Classifier
from ..scoring.session import ClassificationSession, SessionResult
from ..sources.file import FileAudioSource
from ..sources.microphone import MicrophoneAudioSource
from ..streaming.extractor import FeatureExtractor, FeatureExtractorConfig

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = (".wav", ".mp3")


def _resolve_audio_files(files: list[Path] | None, raw_audio_dir: Path) -> list[Path]:
    """Return list of audio paths: explicit files if given, else all .wav/.mp3 in raw_audio_dir."""
    if files:
        return [Path(p).resolve() for p in files]
    if not raw_audio_dir.exists():
        return []
    return sorted(p for p in raw_audio_dir.iterdir() if p.suffix.lower() in AUDIO_EXTENSIONS)


def build_extractor_config(
    session: ClassificationSession,
    *,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
    fft_size: int = DEFAULT_FFT_SIZE,
    overlap_factor: float = DEFAULT_OVERLAP_FACTOR,
    suppression_time_millis: float = DEFAULT_SUPPRESSION_TIME_MILLIS,
    fire_before_full: bool = False,
) -> FeatureExtractorConfig:
    """Size the extractor window from the classifier's input shape."""
    num_frames, columns = session.classifier.input_shape
    return FeatureExtractorConfig(
        spectrogram_callback=session.on_spectrogram,
        num_frames_per_spectrogram=num_frames,
        overlap_factor=overlap_factor,
        sample_rate_hz=sample_rate_hz,
        fft_size=fft_size,
        column_truncate_length=columns,
        suppression_time_millis=suppression_time_millis,
        fire_before_full=fire_before_full,
    )


async def classify_source(
    source,
    session: ClassificationSession,
    config: FeatureExtractorConfig,
    *,
    paced: bool = False,
    duration_s: float | None = None,
) -> SessionResult:
    """Run one classification session over ``source``.

    Unpaced runs drive the extractor as fast as possible until a
    FileAudioSource is used up. Paced runs sample in real time until the
    source's ``ended`` event fires, ``duration_s`` elapses, or the sampling
    task fails. The extractor is always stopped before the session ends.

    Raises:
        Exception: Whatever the scoring callback raised.
    """
    if not paced and not isinstance(source, FileAudioSource):
        raise ValueError("Unpaced classification needs a finite FileAudioSource")

    extractor = FeatureExtractor(config)
    session.begin()
    try:
        await extractor.start(source, paced=paced)
        if not paced:
            while not source.finished:
                await extractor.process_frame()
        else:
            waiters: set[asyncio.Future] = {extractor.sampling_task}
            ended = getattr(source, "ended", None)
            ended_task = asyncio.ensure_future(ended.wait()) if ended is not None else None
            if ended_task is not None:
                waiters.add(ended_task)
            try:
                await asyncio.wait(waiters, timeout=duration_s, return_when=asyncio.FIRST_COMPLETED)
            finally:
                if ended_task is not None:
                    ended_task.cancel()
            if extractor.sampling_task.done():
                await extractor.wait()
    finally:
        if extractor.is_streaming:
            await extractor.stop()
        result = session.end()
    return result


def _result_item(name: str, result: SessionResult, **extra) -> dict:
    return {
        "file": name,
        "status": "success",
        "label": result.label,
        "best_index": result.aggregate.best_index,
        "num_firings": result.num_firings,
        "scores": {label: round(score, 4) for label, score in result.scores_by_label.items()},
        **extra,
    }


def run_classify(
    *,
    classifier: Classifier,
    audio_files: list[Path] | None = None,
    raw_audio_dir: Path = RAW_AUDIO_DIR,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
    fft_size: int = DEFAULT_FFT_SIZE,
    overlap_factor: float = DEFAULT_OVERLAP_FACTOR,
    suppression_time_millis: float = DEFAULT_SUPPRESSION_TIME_MILLIS,
    fire_before_full: bool = False,
    realtime: bool = False,
) -> dict:
    """Classify audio file(s), one session per file.

    If audio_files is None or empty, uses all .wav/.mp3 files in raw_audio_dir.
    With realtime=True each file is played back at its natural pace.

    Returns:
        Dict with success, total, succeeded, failed, skipped, message, items, failures.
    """
    paths = _resolve_audio_files(audio_files, raw_audio_dir)
    if not paths:
        return {
            "success": True,
            "total": 0,
            "succeeded": 0,
            "failed": 0,
            "skipped": 0,
            "message": "No audio files to process.",
            "items": [],
            "failures": [],
        }

    session = ClassificationSession(classifier)
    config = build_extractor_config(
        session,
        sample_rate_hz=sample_rate_hz,
        fft_size=fft_size,
        overlap_factor=overlap_factor,
        suppression_time_millis=suppression_time_millis,
        fire_before_full=fire_before_full,
    )

    succeeded = 0
    failed = 0
    items: list[dict] = []
    failures: list[dict] = []

    for audio_path in paths:
        if not audio_path.exists():
            failed += 1
            failures.append({"item": str(audio_path), "reason": "File not found"})
            items.append({"file": str(audio_path), "status": "failed", "detail": "File not found"})
            continue

        try:
            source = FileAudioSource.from_file(audio_path, sample_rate_hz=sample_rate_hz)
            result = asyncio.run(classify_source(source, session, config, paced=realtime))
            succeeded += 1
            items.append(_result_item(audio_path.name, result, duration_s=round(source.duration_s, 3)))
        except Exception as e:
            logger.exception("Classification failed for %s", audio_path)
            failed += 1
            failures.append({"item": str(audio_path), "reason": str(e)})
            items.append({"file": audio_path.name, "status": "failed", "detail": str(e)})

    return {
        "success": failed == 0,
        "total": len(paths),
        "succeeded": succeeded,
        "failed": failed,
        "skipped": 0,
        "message": f"Processed {len(paths)} file(s). Succeeded: {succeeded}, failed: {failed}.",
        "items": items,
        "failures": failures,
    }


def run_listen(
    *,
    classifier: Classifier,
    duration_s: float,
    device: int | str | None = None,
    source=None,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
    fft_size: int = DEFAULT_FFT_SIZE,
    overlap_factor: float = DEFAULT_OVERLAP_FACTOR,
    suppression_time_millis: float = DEFAULT_SUPPRESSION_TIME_MILLIS,
) -> dict:
    """Classify a timed live capture as a single session.

    ``source`` defaults to a MicrophoneAudioSource on ``device``.

    Returns:
        Dict with success, total, succeeded, failed, message, items, failures.
    """
    if duration_s <= 0:
        return {
            "success": False,
            "total": 0,
            "succeeded": 0,
            "failed": 0,
            "message": f"Duration must be positive, got {duration_s}",
            "items": [],
            "failures": [],
        }

    source = source or MicrophoneAudioSource(sample_rate_hz=sample_rate_hz, device=device)
    session = ClassificationSession(classifier)
    config = build_extractor_config(
        session,
        sample_rate_hz=sample_rate_hz,
        fft_size=fft_size,
        overlap_factor=overlap_factor,
        suppression_time_millis=suppression_time_millis,
    )
    name = "microphone" if device is None else f"microphone:{device}"
    try:
        result = asyncio.run(
            classify_source(source, session, config, paced=True, duration_s=duration_s)
        )
    except Exception as e:
        logger.exception("Live classification failed")
        return {
            "success": False,
            "total": 1,
            "succeeded": 0,
            "failed": 1,
            "message": f"Live classification failed after {duration_s:.1f}s.",
            "items": [{"file": name, "status": "failed", "detail": str(e)}],
            "failures": [{"item": name, "reason": str(e)}],
        }

    return {
        "success": True,
        "total": 1,
        "succeeded": 1,
        "failed": 0,
        "message": f"Listened for {duration_s:.1f}s.",
        "items": [_result_item(name, result, duration_s=duration_s)],
        "failures": [],
    }
