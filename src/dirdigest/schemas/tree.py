"""File tree models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FileTreeNode(BaseModel):
    """A scanned file or directory.

    ``token_count`` and ``file_count`` hold the file's own values for files and
    the aggregate over checked descendants for directories.
    """

    name: str
    full_path: str
    relative_path: str = ""
    is_directory: bool = False
    content: str = ""
    token_count: int = Field(default=0, ge=0)
    file_count: int = Field(default=0, ge=0)
    is_checked: bool = True
    children: list["FileTreeNode"] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Name as shown in tree views, with ``/`` after directories."""
        return f"{self.name}/" if self.is_directory else self.name
