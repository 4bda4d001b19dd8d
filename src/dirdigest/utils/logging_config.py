"""Logging setup shared by the library and the server."""

from __future__ import annotations

import logging
import sys

from dirdigest.config import DIRDIGEST_LOG_LEVEL

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

_configured = False


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter appending ``extra={...}`` context as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS}
        if not extras:
            return message
        context = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{message} [{context}]"


def configure_logging(level: str | int | None = None) -> None:
    """Install the dirdigest handler on the root logger once.

    Args:
        level: Log level name or number. Defaults to ``DIRDIGEST_LOG_LEVEL``.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel(level or DIRDIGEST_LOG_LEVEL)
    if _configured:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ExtraFieldsFormatter(_LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
