"""Audio sources feeding the feature extractor."""

from .analyser import AnalyserSource, spectrum_db
from .base import AudioSource
from .file import FileAudioSource
from .microphone import MicrophoneAudioSource

__all__ = [
    "AnalyserSource",
    "AudioSource",
    "FileAudioSource",
    "MicrophoneAudioSource",
    "spectrum_db",
]
