"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Machine-specific paths can be overridden from .env, NOT edited here
- Import these settings in modules: from config.settings import METADATA_DB_NAME
- Keep values generic and domain-agnostic
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

# Storage Paths
STORAGE_BASE_PATH = Path(
    os.getenv("SESSIONCAM_STORAGE_PATH", "./session_data"),
).resolve()

# SQLite database holding the Sessions and MediaItems collections
METADATA_DB_NAME = "sessioncam.db"

# Optional YAML overrides for StorageConfig
STORAGE_CONFIG_FILE = Path("config/storage.yaml")

# SQLite busy timeout (seconds) before a locked database is reported
DB_TIMEOUT_SECONDS = 5.0

# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

# Default session name: "Session Oct 18, 3:45 PM"
SESSION_NAME_PREFIX = "Session"

# =============================================================================
# CAPTURE CONFIGURATION
# =============================================================================

# Video recordings shorter than this are treated as accidental taps
# and discarded without being saved
MIN_CLIP_DURATION_SECONDS = 0.5

# =============================================================================
# PLAYBACK CONFIGURATION
# =============================================================================

# Tolerance when comparing a playback position against a trim boundary.
# Position updates arrive a few times per second, never exactly on the mark.
BOUNDARY_EPSILON_SECONDS = 1e-6

# Crop rectangles are normalized; allow float noise at the edges
CROP_TOLERANCE = 1e-9

# =============================================================================
# PREFERENCES CONFIGURATION
# =============================================================================

PREFERENCES_FILE = Path(
    os.getenv("SESSIONCAM_PREFERENCES_FILE", "./session_data/preferences.json"),
)

# Key for "don't ask me again" on the flag prompt
PREF_SUPPRESS_FLAG_PROMPT = "suppress_flag_prompt"
