"""Persisted user settings and their translation into scan options."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from dirdigest.config import DEFAULT_IGNORE_PATTERNS, DIRDIGEST_SETTINGS_PATH
from dirdigest.patterns import split_patterns
from dirdigest.schemas import IngestOptions
from dirdigest.utils.logging_config import get_logger

logger = get_logger(__name__)


class AppSettings(BaseModel):
    """User-editable scan settings.

    Pattern fields hold raw comma or newline separated strings as typed by the
    user. ``include_git_ignored`` is kept for compatibility and does not change
    scanning.
    """

    last_source_path: str = ""
    max_file_size_kb: float = 100
    limit_files: bool = False
    max_files_str: str = "5"
    whitelist: str = "models, schemas"
    ignore_patterns: str = "docs/, *.svg, test/"
    include_git_ignored: bool = True
    use_target_files: bool = False
    target_file_patterns: str = "README.md, pyproject.toml, *.cfg"


def load_settings(path: Path = DIRDIGEST_SETTINGS_PATH) -> AppSettings:
    """Load settings, falling back to defaults when the document is missing or malformed."""
    if not path.exists():
        return AppSettings()
    try:
        return AppSettings.model_validate_json(path.read_text(encoding="utf-8"))
    # ValueError covers pydantic.ValidationError and UnicodeDecodeError.
    except (OSError, ValueError) as exc:
        logger.debug("Using default settings", extra={"path": str(path), "error": str(exc)})
        return AppSettings()


def save_settings(settings: AppSettings, path: Path = DIRDIGEST_SETTINGS_PATH) -> None:
    """Write settings as indented JSON. Failures are logged, not raised."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to save settings", extra={"path": str(path), "error": str(exc)})


def parse_max_files(settings: AppSettings) -> int | None:
    """Return the per-directory file cap, or None when disabled or invalid."""
    if not settings.limit_files:
        return None
    try:
        value = int(settings.max_files_str.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def build_options(settings: AppSettings, root_path: str | None = None) -> IngestOptions:
    """Translate settings into scan options.

    User ignore patterns extend the built-in defaults. Target patterns apply only
    while ``use_target_files`` is enabled.
    """
    return IngestOptions(
        root_path=root_path if root_path is not None else settings.last_source_path,
        max_file_size=int(settings.max_file_size_kb * 1024),
        max_files_per_directory=parse_max_files(settings),
        ignore_patterns=[*DEFAULT_IGNORE_PATTERNS, *split_patterns(settings.ignore_patterns)],
        force_include_patterns=split_patterns(settings.whitelist),
        target_file_patterns=split_patterns(settings.target_file_patterns) if settings.use_target_files else [],
        include_git_ignored=settings.include_git_ignored,
    )


def append_pattern(raw: str, value: str) -> str:
    """Append ``value`` to a comma separated pattern string unless already listed."""
    value = value.strip()
    if not value or value in split_patterns(raw):
        return raw
    return f"{raw}, {value}" if raw.strip() else value
