"""Pydantic models for the API."""

from __future__ import annotations

from typing import Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from dirdigest.patterns import split_patterns
from server.server_config import DEFAULT_FILE_SIZE_KB, MAX_FILE_SIZE_KB


class IngestRequest(BaseModel):
    """Request model for the /api/ingest endpoint.

    Attributes
    ----------
    root_path : str
        Local directory to scan.
    max_file_size : int
        Largest file, in KB, whose content is included.
    max_files_per_directory : int | None
        Optional cap on files kept per directory.
    ignore_patterns : list[str]
        Patterns added to the built-in ignore list.
    use_default_ignores : bool
        Start from the built-in ignore list.
    force_include_patterns : list[str]
        Directories traversed and left uncapped even when ignored.
    target_file_patterns : list[str]
        When set, only files matching these patterns are kept.

    """

    root_path: str = Field(..., description="Local directory to scan")
    max_file_size: int = Field(
        default=DEFAULT_FILE_SIZE_KB,
        ge=1,
        le=MAX_FILE_SIZE_KB,
        description="Maximum file size in KB",
    )
    max_files_per_directory: int | None = Field(default=None, ge=1, description="Files kept per directory")
    ignore_patterns: list[str] = Field(default_factory=list, description="Additional ignore patterns")
    use_default_ignores: bool = Field(default=True, description="Include the built-in ignore patterns")
    force_include_patterns: list[str] = Field(default_factory=list, description="Whitelisted directories")
    target_file_patterns: list[str] = Field(default_factory=list, description="Only keep matching files")

    @field_validator("root_path")
    @classmethod
    def validate_root_path(cls, v: str) -> str:
        """Validate that ``root_path`` is not empty."""
        if not v.strip():
            err = "root_path cannot be empty"
            raise ValueError(err)
        return v.strip()

    @field_validator("ignore_patterns", "force_include_patterns", "target_file_patterns", mode="before")
    @classmethod
    def normalize_patterns(cls, v: str | list[str] | None) -> list[str]:
        """Normalize pattern inputs from comma/newline separated strings or lists."""
        return split_patterns(v)


class SelectionRequest(BaseModel):
    """Request model for changing the selection of a stored ingest.

    Attributes
    ----------
    paths : list[str]
        Root-relative paths of the nodes to change. ``""`` is the root.
    checked : bool
        New inclusion state, applied to each node and its subtree.

    """

    paths: list[str] = Field(..., min_length=1, description="Relative paths to change")
    checked: bool = Field(..., description="Include or exclude the nodes")


class IngestSuccessResponse(BaseModel):
    """Success response model for the ingest endpoints.

    Attributes
    ----------
    ingest_id : UUID
        Identifier of the stored ingest, used for selection changes and downloads.
    root_path : str
        Scanned directory.
    summary : str
        Directory name, file count, character count and token estimate.
    digest_url : str
        URL to download the full digest from the local cache.
    tree : str
        Directory tree of the selected entries.
    content : str
        Concatenated file contents, cropped for display.
    file_count : int
        Number of selected files.
    total_tokens : int
        Estimated tokens of the selected files.

    """

    ingest_id: UUID = Field(..., description="Stored ingest identifier")
    root_path: str = Field(..., description="Scanned directory")
    summary: str = Field(..., description="Ingestion summary with token estimates")
    digest_url: str = Field(..., description="URL to download the full digest content")
    tree: str = Field(..., description="Directory tree")
    content: str = Field(..., description="Concatenated file contents")
    file_count: int = Field(..., description="Selected file count")
    total_tokens: int = Field(..., description="Estimated token count")


class IngestErrorResponse(BaseModel):
    """Error response model for the ingest endpoints.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.
    error_kind : str | None
        Machine-readable failure reason.

    """

    error: str = Field(..., description="Error message")
    error_kind: str | None = Field(default=None, description="Failure reason")


# Union type for API responses
IngestResponse = Union[IngestSuccessResponse, IngestErrorResponse]
