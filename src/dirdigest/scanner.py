"""Directory traversal producing the annotated file tree."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Callable

from dirdigest.config import PROGRESS_EVERY_N_FILES
from dirdigest.exceptions import DirectoryNotFoundError, ScanCancelledError
from dirdigest.file_utils import is_binary_file, read_text_content
from dirdigest.patterns import matches, relative_posix_path
from dirdigest.schemas import ErrorKind, FileTreeNode, IngestOptions, IngestResult
from dirdigest.tokens import estimate_tokens
from dirdigest.utils.logging_config import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[str], None]

CANCELLED_MESSAGE = "Operation cancelled by user."


def scan_directory(
    options: IngestOptions,
    *,
    cancel_event: threading.Event | None = None,
    progress: ProgressCallback | None = None,
) -> IngestResult:
    """Scan ``options.root_path`` into a node tree.

    The walk is sequential and depth-first. Every kept entry becomes a
    ``FileTreeNode``; files over the size limit, binaries and unreadable files
    keep their node with empty content. Directories that cannot be listed are
    left out without failing the scan.

    Args:
        options: Scan configuration.
        cancel_event: Checked before each directory and each entry. When set,
            the scan stops and a cancelled result is returned.
        progress: Receives advisory status messages.

    Returns:
        A result holding the root node with scan-time aggregates, or a failed
        result describing why the scan stopped. Text views are left empty.
    """
    try:
        root = Path(options.root_path)
        if not root.is_dir():
            raise DirectoryNotFoundError(f"Directory not found: {options.root_path}")
        root = root.resolve()

        _report(progress, "Scanning directory structure...")
        walker = _TreeWalker(options, root, cancel_event=cancel_event, progress=progress)
        root_node = FileTreeNode(
            name=root.name or str(root),
            full_path=str(root),
            relative_path="",
            is_directory=True,
        )
        walker.process_directory(root, root_node)
    except ScanCancelledError:
        logger.info("Scan cancelled", extra={"root_path": options.root_path})
        return IngestResult.failure(ErrorKind.CANCELLED, CANCELLED_MESSAGE)
    except DirectoryNotFoundError as exc:
        logger.warning("Scan root missing", extra={"root_path": options.root_path})
        return IngestResult.failure(ErrorKind.DIRECTORY_NOT_FOUND, str(exc))
    except Exception as exc:
        logger.exception("Scan failed", extra={"root_path": options.root_path})
        return IngestResult.failure(ErrorKind.GENERIC, f"Error: {exc}")

    _report(progress, f"Scan complete: {walker.files_processed} files.")
    return IngestResult(
        root_nodes=[root_node],
        file_count=root_node.file_count,
        total_tokens_estimated=root_node.token_count,
    )


class _TreeWalker:
    def __init__(
        self,
        options: IngestOptions,
        root: Path,
        *,
        cancel_event: threading.Event | None,
        progress: ProgressCallback | None,
    ) -> None:
        self.options = options
        self.root = root
        self.cancel_event = cancel_event
        self.progress = progress
        self.files_processed = 0

    def process_directory(self, directory: Path, node: FileTreeNode) -> None:
        self._check_cancelled()

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            logger.debug("Skipping unreadable directory", extra={"path": str(directory), "error": str(exc)})
            return

        opts = self.options
        # Symlinked directories are not followed.
        raw_dirs = [entry for entry in entries if entry.is_dir(follow_symlinks=False)]
        raw_files = [entry for entry in entries if not entry.is_dir(follow_symlinks=False) and entry.is_file()]

        directories = [
            entry
            for entry in raw_dirs
            if self._matches(entry.path, opts.force_include_patterns, is_dir=True)
            or not self._matches(entry.path, opts.ignore_patterns, is_dir=True)
        ]

        if opts.target_mode:
            files = [entry for entry in raw_files if self._matches(entry.path, opts.target_file_patterns, is_dir=False)]
        else:
            files = [entry for entry in raw_files if not self._matches(entry.path, opts.ignore_patterns, is_dir=False)]
        files.sort(key=lambda entry: entry.name)

        cap = opts.max_files_per_directory
        if cap and cap > 0 and not self._matches(directory, opts.force_include_patterns, is_dir=True):
            files = files[:cap]

        children: list[FileTreeNode] = []
        for entry in sorted(directories + files, key=lambda entry: entry.name):
            self._check_cancelled()

            is_dir = entry.is_dir(follow_symlinks=False)
            child = FileTreeNode(
                name=entry.name,
                full_path=entry.path,
                relative_path=relative_posix_path(entry.path, self.root),
                is_directory=is_dir,
            )
            if is_dir:
                self.process_directory(Path(entry.path), child)
            else:
                self._process_file(entry, child)
            children.append(child)

        node.children = children
        node.token_count = sum(child.token_count for child in children)
        node.file_count = sum(child.file_count for child in children)

    def _process_file(self, entry: os.DirEntry[str], node: FileTreeNode) -> None:
        path = Path(entry.path)
        content = ""
        try:
            size = entry.stat().st_size
        except OSError as exc:
            logger.debug("Failed to stat file", extra={"path": entry.path, "error": str(exc)})
            size = None

        if size is not None and size <= self.options.max_file_size and not is_binary_file(path):
            content = read_text_content(path)

        node.content = content
        node.token_count = estimate_tokens(content)
        node.file_count = 1

        self.files_processed += 1
        if self.files_processed % PROGRESS_EVERY_N_FILES == 0:
            _report(self.progress, f"Processed {self.files_processed} files...")

    def _matches(self, path: str | Path, patterns: list[str], *, is_dir: bool) -> bool:
        return matches(path, self.root, patterns, is_dir=is_dir)

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ScanCancelledError(CANCELLED_MESSAGE)


def _report(progress: ProgressCallback | None, message: str) -> None:
    if progress is not None:
        progress(message)
