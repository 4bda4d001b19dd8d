"""Pattern matching for ignore, force-include and target-file lists."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import pathspec

from dirdigest.utils.logging_config import get_logger

logger = get_logger(__name__)

_SPLIT_RE = re.compile(r"[,\r\n]+")


def split_patterns(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma or newline separated pattern string into clean patterns."""
    if not raw:
        return []
    items = _SPLIT_RE.split(raw) if isinstance(raw, str) else raw
    return [item.strip() for item in items if item and item.strip()]


def relative_posix_path(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators."""
    return Path(os.path.relpath(path, root)).as_posix()


def matches(
    path: str | os.PathLike[str],
    root: str | os.PathLike[str],
    patterns: Iterable[str] | None,
    *,
    is_dir: bool,
) -> bool:
    """Check whether a filesystem entry matches any of ``patterns``.

    An entry matches a pattern when its name equals the pattern (ignoring case
    and a trailing ``/``), or when its root-relative path matches the pattern as
    a glob anchored at ``root``. Directories are also tried with a trailing ``/``
    so that ``docs/`` style patterns match directories only.

    Args:
        path: Absolute path of the entry.
        root: Scan root the relative path is computed against.
        patterns: Raw patterns. Surrounding whitespace and empty entries are ignored.
        is_dir: Whether the entry is a directory.

    Returns:
        True if any pattern matches.
    """
    if not patterns:
        return False

    name = Path(path).name.lower()
    relative_path = relative_posix_path(path, root)
    relative_dir_path = relative_path + "/"

    for pattern in patterns:
        clean = pattern.strip()
        if not clean:
            continue

        dir_only = clean.endswith("/")
        if (is_dir or not dir_only) and name == clean.rstrip("/").lower():
            return True

        regex = _compile(clean)
        if regex is None:
            continue
        if regex.search(relative_path):
            return True
        if is_dir and regex.search(relative_dir_path):
            return True

    return False


_DESCENDANT_SUFFIX = "(?:/|$)"


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> re.Pattern[str] | None:
    """Compile ``pattern`` into a regex that matches whole relative paths only.

    gitignore patterns also match every path below a matched directory. Here a
    glob names exactly the entries it matches, so that suffix is dropped unless
    the pattern ends in ``**``.
    """
    # Leading "/" anchors the glob at the scan root instead of any depth.
    anchored = pattern if pattern.startswith("/") else "/" + pattern
    try:
        regex, include = pathspec.lookup_pattern("gitignore").pattern_to_regex(anchored)
    except ValueError as exc:
        logger.debug("Skipping invalid glob pattern", extra={"pattern": pattern, "error": str(exc)})
        return None
    if regex is None or not include:
        return None

    if regex.endswith(_DESCENDANT_SUFFIX):
        regex = regex[: -len(_DESCENDANT_SUFFIX)] + "$"
    elif regex.endswith("/") and not pattern.rstrip("/").endswith("**"):
        regex += "$"
    return re.compile(regex)
