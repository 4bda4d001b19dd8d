"""Scan configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from dirdigest.config import DEFAULT_IGNORE_PATTERNS, DIRDIGEST_MAX_FILE_SIZE


@dataclass(frozen=True)
class IngestOptions:
    """Options for a directory scan.

    Attributes:
        root_path: Directory to scan. Must exist.
        max_file_size: Files larger than this many bytes keep a node but no content.
        max_files_per_directory: Optional cap on files materialized per directory.
            Subdirectories are never capped.
        ignore_patterns: Patterns pruning directories and excluding files.
        force_include_patterns: Patterns overriding ``ignore_patterns`` for
            directories and exempting a directory from the file cap.
        target_file_patterns: When non-empty, only files matching these patterns
            are kept and ``ignore_patterns`` no longer applies to files.
        include_git_ignored: Persisted with the settings; has no effect on scanning.
    """

    root_path: str
    max_file_size: int = DIRDIGEST_MAX_FILE_SIZE
    max_files_per_directory: int | None = None
    ignore_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    force_include_patterns: list[str] = field(default_factory=list)
    target_file_patterns: list[str] = field(default_factory=list)
    include_git_ignored: bool = False

    @property
    def target_mode(self) -> bool:
        """True when file filtering runs in inclusion mode."""
        return any(pattern.strip() for pattern in self.target_file_patterns)
