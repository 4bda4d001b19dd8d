"""Shared schemas for dirdigest."""

from dirdigest.schemas.ingestion import ErrorKind, IngestResult, RenderedDigest
from dirdigest.schemas.options import IngestOptions
from dirdigest.schemas.tree import FileTreeNode

__all__ = ["ErrorKind", "FileTreeNode", "IngestOptions", "IngestResult", "RenderedDigest"]
