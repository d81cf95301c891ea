"""CLI command for classifying live microphone input."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...global_config import (
    DEFAULT_METADATA_PATH,
    DEFAULT_MODEL_PATH,
    DEFAULT_OVERLAP_FACTOR,
    DEFAULT_SAMPLE_RATE_HZ,
)
from ...pipeline.classify import run_listen
from ...scoring.classifier import TFLiteClassifier
from ..base import BaseCLI

app = typer.Typer(
    name="listen",
    help="Classify live microphone input for a fixed duration",
)


@app.callback(invoke_without_command=True)
def listen(
    seconds: Annotated[
        float,
        typer.Option("--seconds", "-s", help="How long to listen."),
    ] = 10.0,
    device: Annotated[
        str | None,
        typer.Option("--device", "-d", help="Input device index or name. Default: system input."),
    ] = None,
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
        typer.Option("--sample-rate", "-r", help="Capture sample rate in Hz."),
    ] = DEFAULT_SAMPLE_RATE_HZ,
    overlap: Annotated[
        float,
        typer.Option("--overlap", "-o", help="Window overlap factor in [0, 1)."),
    ] = DEFAULT_OVERLAP_FACTOR,
    no_log: Annotated[
        bool,
        typer.Option("--no-log", help="Do not write a log file to logs/."),
    ] = False,
) -> None:
    """Listen to the microphone and report mean class scores at the end."""
    cli = BaseCLI("listen")
    input_device: int | str | None = int(device) if device and device.isdigit() else device

    def _run() -> dict:
        classifier = TFLiteClassifier(model, metadata)
        return run_listen(
            classifier=classifier,
            duration_s=seconds,
            device=input_device,
            sample_rate_hz=sample_rate,
            overlap_factor=overlap,
        )

    cli.handle_cli_operation(
        operation="listen",
        op_callable=_run,
        pre_message=f"Listening for {seconds:.1f}s...",
        log_module="listen",
        enable_log=not no_log,
        log_context={"device": str(device), "model": str(model)},
    )
