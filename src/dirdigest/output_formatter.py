"""Render the checked part of a file tree into summary, tree and content views."""

from __future__ import annotations

from typing import Iterator

from dirdigest.schemas import FileTreeNode, RenderedDigest
from dirdigest.tokens import format_token_count

FILE_DELIMITER = "=" * 48
TREE_HEADER = "Directory structure:"
_ROOT_MARKER = "└── "
_ENTRY_MARKER = "├── "
_INDENT = "    "


def render(root_nodes: list[FileTreeNode], *, directory_name: str | None = None) -> RenderedDigest:
    """Create summary, tree text and file contents for the current selection.

    Unchecked nodes are skipped together with their whole subtree. Directory
    aggregates are recomputed from checked descendants on every call; nothing
    else in the tree is modified and no file is read.

    Args:
        root_nodes: Scanned roots (normally a single node).
        directory_name: Name shown in the summary. Defaults to the first root's name.

    Returns:
        The rendered views and totals.
    """
    for root in root_nodes:
        aggregate_counts(root)

    visited = list(iter_checked(root_nodes))
    files = [node for node, _ in visited if not node.is_directory]

    tree = TREE_HEADER + "\n" + "\n".join(_tree_line(node, depth) for node, depth in visited)
    content = "".join(_file_block(node) for node in files if node.content)
    file_count = len(files)
    total_tokens = sum(node.token_count for node in files)

    if directory_name is None:
        directory_name = root_nodes[0].name if root_nodes else ""
    summary = "\n".join(
        [
            f"Directory: {directory_name}",
            f"Files analyzed: {file_count}",
            f"Total characters: {len(content)}",
            f"Estimated tokens: {format_token_count(total_tokens)}",
        ]
    )

    return RenderedDigest(
        summary=summary,
        tree=tree,
        content=content,
        file_count=file_count,
        total_tokens=total_tokens,
    )


def aggregate_counts(node: FileTreeNode) -> tuple[int, int]:
    """Recompute directory totals bottom-up from checked descendants.

    Returns:
        Tuple of (file_count, token_count) for ``node`` as its parent sees it,
        zero when ``node`` is unchecked.
    """
    if node.is_directory:
        file_count = 0
        token_count = 0
        for child in node.children:
            child_files, child_tokens = aggregate_counts(child)
            file_count += child_files
            token_count += child_tokens
        node.file_count = file_count
        node.token_count = token_count

    if not node.is_checked:
        return 0, 0
    return node.file_count, node.token_count


def iter_checked(nodes: list[FileTreeNode], depth: int = 0) -> Iterator[tuple[FileTreeNode, int]]:
    """Yield checked nodes depth-first with their depth, pruning unchecked subtrees."""
    for node in nodes:
        if not node.is_checked:
            continue
        yield node, depth
        yield from iter_checked(node.children, depth + 1)


def _tree_line(node: FileTreeNode, depth: int) -> str:
    if depth == 0:
        return _ROOT_MARKER + node.display_name
    return _INDENT * depth + _ENTRY_MARKER + node.display_name


def _file_block(node: FileTreeNode) -> str:
    return f"{FILE_DELIMITER}\nFILE: {node.relative_path}\n{FILE_DELIMITER}\n{node.content}\n\n"
