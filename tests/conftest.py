from __future__ import annotations

import wave
from pathlib import Path

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Forces test mode. Application code can use this to refuse dangerous behaviors.
    Automatically applied to all tests.
    """
    monkeypatch.setenv("APP_ENV", "test")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """
    A dedicated temp root directory for each test.
    All filesystem writes in tests should be under this root (or tmp_path directly).
    """
    root = tmp_path / "proj"
    (root / "data" / "audio").mkdir(parents=True)
    (root / "logs").mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def chdir_to_project_root(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Automatically change working directory to project_root for all tests.
    This ensures relative-path operations go into the temp directory by default.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def sine_wav(project_root: Path) -> Path:
    """
    Half a second of a 440 Hz tone as 16-bit mono WAV at 44.1 kHz.
    """
    sr = 44100
    t = np.arange(int(sr * 0.5)) / sr
    buf = (0.5 * np.sin(2 * np.pi * 440.0 * t) * 32767).astype(np.int16)
    path = project_root / "data" / "audio" / "tone.wav"
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(sr)
        w.writeframes(buf.tobytes())
    return path
