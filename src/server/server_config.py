"""Configuration for the server."""

MAX_DISPLAY_SIZE: int = 300_000
DEFAULT_FILE_SIZE_KB: int = 100
MAX_FILE_SIZE_KB: int = 100 * 1024
MAX_SESSIONS: int = 32
