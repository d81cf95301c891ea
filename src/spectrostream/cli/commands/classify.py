"""CLI command for classifying audio files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...global_config import (
    DEFAULT_METADATA_PATH,
    DEFAULT_MODEL_PATH,
    DEFAULT_OVERLAP_FACTOR,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_SUPPRESSION_TIME_MILLIS,
    RAW_AUDIO_DIR,
)
from ...pipeline.classify import run_classify
from ...scoring.classifier import TFLiteClassifier
from ..base import BaseCLI

app = typer.Typer(
    name="classify",
    help="Classify audio files with a streaming spectrogram model",
)


@app.callback(invoke_without_command=True)
def classify(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Audio file(s) to classify. If omitted, all .wav/.mp3 files in data/audio are used.",
        ),
    ] = [],
    model: Annotated[
        Path,
        typer.Option("--model", "-m", help="Path to the .tflite model."),
    ] = DEFAULT_MODEL_PATH,
    metadata: Annotated[
        Path,
        typer.Option("--metadata", help="Path to the label metadata JSON."),
    ] = DEFAULT_METADATA_PATH,
    sample_rate: Annotated[
        int,
        typer.Option("--sample-rate", "-r", help="Decode and analysis sample rate in Hz."),
    ] = DEFAULT_SAMPLE_RATE_HZ,
    overlap: Annotated[
        float,
        typer.Option("--overlap", "-o", help="Window overlap factor in [0, 1)."),
    ] = DEFAULT_OVERLAP_FACTOR,
    suppression_ms: Annotated[
        float,
        typer.Option("--suppression-ms", help="Cooldown after a firing, in milliseconds."),
    ] = DEFAULT_SUPPRESSION_TIME_MILLIS,
    fire_before_full: Annotated[
        bool,
        typer.Option(
            "--fire-before-full",
            help="Classify before the first window is full (input left zero padded).",
        ),
    ] = False,
    realtime: Annotated[
        bool,
        typer.Option("--realtime", help="Play files back at their natural pace."),
    ] = False,
    no_log: Annotated[
        bool,
        typer.Option("--no-log", help="Do not write a log file to logs/."),
    ] = False,
) -> None:
    """Classify audio files and print mean class scores per file.

    Each file is one session: frames are sampled while the file plays back,
    every firing is scored, and the mean scores and top class are reported
    when playback ends.
    """
    cli = BaseCLI("classify")
    audio_list = list(files) if files else None

    def _run() -> dict:
        classifier = TFLiteClassifier(model, metadata)
        return run_classify(
            classifier=classifier,
            audio_files=audio_list,
            raw_audio_dir=RAW_AUDIO_DIR,
            sample_rate_hz=sample_rate,
            overlap_factor=overlap,
            suppression_time_millis=suppression_ms,
            fire_before_full=fire_before_full,
            realtime=realtime,
        )

    pre_message = "Classifying " + (
        f"{len(audio_list)} file(s)..." if audio_list else "all audio in data/audio..."
    )
    cli.handle_cli_operation(
        operation="classify",
        op_callable=_run,
        pre_message=pre_message,
        log_module="classify",
        enable_log=not no_log,
        log_context={
            "inputs": str([str(p) for p in audio_list]) if audio_list else f"all audio in {RAW_AUDIO_DIR}",
            "model": str(model),
        },
    )
