from __future__ import annotations

import importlib

import pytest


@pytest.mark.unit
def test_import_package() -> None:
    importlib.import_module("spectrostream")


@pytest.mark.unit
def test_import_cli_main() -> None:
    importlib.import_module("spectrostream.cli.main")


@pytest.mark.unit
def test_import_microphone_source_without_audio_hardware() -> None:
    importlib.import_module("spectrostream.sources.microphone")
