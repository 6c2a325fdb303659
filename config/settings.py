"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Machine-specific overrides go in .env (or the process environment)
- Per-user preferences (save path) live in config/recorder.yaml
- Import these settings in modules: from config.settings import OUTPUT_LABEL
"""

import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# OUTPUT CONFIGURATION
# =============================================================================

# Root folder recordings are saved under (changeable at runtime by the UI)
DEFAULT_SAVE_ROOT = Path(
    os.getenv("RECORDER_SAVE_ROOT", str(Path.home() / "Videos")),
)

# Label used both as the output folder name and the filename prefix:
# <SaveRoot>/<Label>/<YYYY-MM>/<Label> - <YYYY-MM-DD at HH.MM.SS>.<ext>
OUTPUT_LABEL = os.getenv("OUTPUT_LABEL", "Magic Window")
OUTPUT_MONTH_FORMAT = "%Y-%m"
OUTPUT_TIMESTAMP_FORMAT = "%Y-%m-%d at %H.%M.%S"

# Preferences file (YAML) holding overrides such as the save path
RECORDER_CONFIG_FILE = Path(
    os.getenv("RECORDER_CONFIG_FILE", "config/recorder.yaml"),
)

# =============================================================================
# SEGMENT CONFIGURATION
# =============================================================================

# Parent of per-session working directories
TEMP_ROOT = Path(
    os.getenv("RECORDER_TEMP_ROOT", str(Path(tempfile.gettempdir()) / "magic-window")),
)

SEGMENT_FILENAME_PREFIX = "segment-"
SEGMENT_INDEX_WIDTH = 6  # segment-000042.webm
DEFAULT_SEGMENT_EXTENSION = "mp4"
CONCAT_MANIFEST_NAME = "concat_list.txt"
CONCAT_LOG_NAME = "concat.log"

# =============================================================================
# SESSION LIMITS
# =============================================================================

# Recording Durations (in seconds)
MAX_RECORDING_DURATION = int(os.getenv("MAX_RECORDING_DURATION", "7200"))  # 2 hours
DURATION_TICK_INTERVAL = float(os.getenv("DURATION_TICK_INTERVAL", "1.0"))

# How long stop() waits for the capture surface to flush its last segment
FLUSH_GRACE_SECONDS = float(os.getenv("FLUSH_GRACE_SECONDS", "3.0"))

# =============================================================================
# DISK SPACE CONFIGURATION
# =============================================================================

# Space Management (in bytes)
DISK_CRITICAL_BYTES = int(
    os.getenv("DISK_CRITICAL_BYTES", str(100 * 1024 * 1024)),
)  # 100 MiB - recording is stopped below this
DISK_LOW_BYTES = int(
    os.getenv("DISK_LOW_BYTES", str(2 * 1024 * 1024 * 1024)),
)  # 2 GiB - UI shows a warning below this
DISK_POLL_INTERVAL = float(os.getenv("DISK_POLL_INTERVAL", "30"))  # seconds

# =============================================================================
# CONCATENATION CONFIGURATION
# =============================================================================

FFMPEG_BINARY = os.getenv("FFMPEG_BINARY", "ffmpeg")
FFMPEG_LOG_LEVEL = "error"
JOIN_TIMEOUT_SECONDS = float(os.getenv("JOIN_TIMEOUT_SECONDS", "3600"))
FALLBACK_COPY_CHUNK_BYTES = 1024 * 1024  # 1 MiB

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

# Remote Control Configuration
# File-based control for triggering actions via SSH/scripts
# Commands: START <source>, PAUSE, RESUME, STOP, SAVEPATH <path>, STATUS
CONTROL_FILE = os.getenv(
    "CONTROL_FILE",
    "/tmp/recorder_control.cmd",  # noqa: S108
)
STATUS_FILE = os.getenv(
    "STATUS_FILE",
    "/tmp/recorder_status.json",  # noqa: S108
)
SERVICE_LOOP_INTERVAL = 0.1  # seconds
STATUS_WRITE_INTERVAL = 1.0  # seconds

# Implementation selection for the service (see RecordingFactory)
JOINER_MODE = os.getenv("JOINER_MODE", "auto")  # auto | real | mock
CAPTURE_MODE = os.getenv("CAPTURE_MODE", "mock")  # none | mock

# Logging Configuration
LOG_DIR = os.getenv("LOG_DIR", "/var/log/recorder")
LOG_SERVICE_FILE = "service.log"
LOG_BACKUP_COUNT = 7
