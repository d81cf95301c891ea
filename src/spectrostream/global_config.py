"""Global, project-wide configuration constants.

This module intentionally contains **no business logic** – only simple,
shared filesystem anchors and cross-cutting constants that many modules
can import.
"""

from pathlib import Path

# Core roots
PACKAGE_ROOT: Path = Path(__file__).resolve().parent
# PROJECT_ROOT is the repo root (where pyproject.toml and models/ live)
# From src/spectrostream/global_config.py, go up two levels: src/spectrostream -> src -> repo root
PROJECT_ROOT: Path = PACKAGE_ROOT.parent.parent

# Core Names
PROJECT_NAME = "spectrostream"
PACKAGE_NAME = "spectrostream"

# Data directories
DATA_DIR: Path = PROJECT_ROOT / "data"
RAW_AUDIO_DIR: Path = DATA_DIR / "audio"

# Model directories
MODELS_DIR: Path = PROJECT_ROOT / "models"
DEFAULT_MODEL_PATH: Path = MODELS_DIR / "model.tflite"
DEFAULT_METADATA_PATH: Path = MODELS_DIR / "metadata.json"

# Logs directories
LOGS_DIR: Path = PROJECT_ROOT / "logs"

# Streaming defaults (analyser-node style capture)
DEFAULT_SAMPLE_RATE_HZ = 44100
DEFAULT_FFT_SIZE = 1024
DEFAULT_OVERLAP_FACTOR = 0.5
DEFAULT_SUPPRESSION_TIME_MILLIS = 0.0

# Scores above this are reported as highlighted classes
DEFAULT_HIGHLIGHT_THRESHOLD = 0.5
