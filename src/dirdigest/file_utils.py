"""File inspection helpers used by the scanner."""

from __future__ import annotations

from pathlib import Path

from dirdigest.config import BINARY_SNIFF_BYTES
from dirdigest.utils.logging_config import get_logger

logger = get_logger(__name__)


def is_binary_file(path: Path, sniff_bytes: int = BINARY_SNIFF_BYTES) -> bool:
    """Check whether a file looks binary.

    Args:
        path: File to inspect.
        sniff_bytes: Size of the prefix searched for a NUL byte.

    Returns:
        True if the prefix contains a zero byte or the file cannot be read.
    """
    try:
        with path.open("rb") as f:
            chunk = f.read(sniff_bytes)
    except OSError:
        return True
    return b"\x00" in chunk


def read_text_content(path: Path) -> str:
    """Read a text file, returning an empty string when it cannot be read."""
    try:
        # newline="" keeps CRLF line endings intact.
        with path.open(encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except OSError as exc:
        logger.debug("Failed to read file", extra={"path": str(path), "error": str(exc)})
        return ""
