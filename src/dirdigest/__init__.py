"""dirdigest: turn a directory tree into a selectable text digest."""

from dirdigest.exceptions import (
    DirdigestError,
    DirectoryNotFoundError,
    EmptyDigestError,
    ScanCancelledError,
)
from dirdigest.ingestion import DigestSession, ingest_directory, refresh_result
from dirdigest.output_formatter import render
from dirdigest.patterns import matches, split_patterns
from dirdigest.scanner import scan_directory
from dirdigest.schemas import ErrorKind, FileTreeNode, IngestOptions, IngestResult, RenderedDigest
from dirdigest.selection import find_node, set_checked

__all__ = [
    "DigestSession",
    "DirdigestError",
    "DirectoryNotFoundError",
    "EmptyDigestError",
    "ErrorKind",
    "FileTreeNode",
    "IngestOptions",
    "IngestResult",
    "RenderedDigest",
    "ScanCancelledError",
    "find_node",
    "ingest_directory",
    "matches",
    "refresh_result",
    "render",
    "scan_directory",
    "set_checked",
    "split_patterns",
]
