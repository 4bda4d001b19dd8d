"""Local configuration for dirdigest."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_HOME_DIR = "~/.dirdigest"
DEFAULT_CACHE_DIR = ".dirdigest_cache"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_DEBOUNCE_S = 0.25
DEFAULT_LOG_LEVEL = "INFO"

# Bytes inspected when deciding whether a file is binary.
BINARY_SNIFF_BYTES = 8192
# Characters per token for the length-based estimate.
CHARS_PER_TOKEN = 4
PROGRESS_EVERY_N_FILES = 100

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    ".git",
    ".vs",
    ".vscode",
    ".idea",
    ".DS_Store",
    "bin",
    "obj",
    "__pycache__",
    "node_modules",
    "dist",
    "build",
    "coverage",
    "*.exe",
    "*.dll",
    "*.pdb",
    "*.png",
    "*.jpg",
    "*.zip",
)

# Settings and templates documents live here.
DIRDIGEST_HOME = Path(os.getenv("DIRDIGEST_HOME", DEFAULT_HOME_DIR)).expanduser()
DIRDIGEST_SETTINGS_PATH = DIRDIGEST_HOME / "settings.json"
DIRDIGEST_TEMPLATES_PATH = DIRDIGEST_HOME / "templates.json"

# Local-only cache directory for stored digests served by the API.
DIRDIGEST_CACHE_PATH = Path(os.getenv("DIRDIGEST_CACHE_PATH", DEFAULT_CACHE_DIR)).expanduser().resolve()
DIRDIGEST_MAX_FILE_SIZE = int(os.getenv("DIRDIGEST_MAX_FILE_SIZE", str(DEFAULT_MAX_FILE_SIZE)))
DIRDIGEST_DEBOUNCE_S = float(os.getenv("DIRDIGEST_DEBOUNCE_S", str(DEFAULT_DEBOUNCE_S)))
DIRDIGEST_LOG_LEVEL = os.getenv("DIRDIGEST_LOG_LEVEL", DEFAULT_LOG_LEVEL)
