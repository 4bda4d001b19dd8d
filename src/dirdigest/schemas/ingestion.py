"""Ingestion output models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from dirdigest.schemas.tree import FileTreeNode


class ErrorKind(str, Enum):
    """Reasons a scan can fail as a whole."""

    DIRECTORY_NOT_FOUND = "directory_not_found"
    CANCELLED = "cancelled"
    GENERIC = "generic"


class RenderedDigest(BaseModel):
    """Text views derived from the tree and its current selection."""

    summary: str
    tree: str
    content: str
    file_count: int
    total_tokens: int


class IngestResult(BaseModel):
    """Scan output together with its rendered views."""

    is_success: bool = True
    error_message: str = ""
    error_kind: ErrorKind | None = None
    root_nodes: list[FileTreeNode] = Field(default_factory=list)
    file_count: int = 0
    total_tokens_estimated: int = 0
    summary: str = ""
    tree_structure_text: str = ""
    file_contents: str = ""

    @property
    def digest(self) -> str:
        """Summary, tree and file contents as a single document."""
        return f"{self.summary}\n\n{self.tree_structure_text}\n\n{self.file_contents}"

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "IngestResult":
        """Build a failed result carrying no tree."""
        return cls(is_success=False, error_kind=kind, error_message=message)
