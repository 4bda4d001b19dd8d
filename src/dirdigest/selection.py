"""Selection helpers over the scanned tree."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator

from dirdigest.schemas import FileTreeNode


def set_checked(node: FileTreeNode, value: bool) -> None:
    """Set ``is_checked`` on ``node`` and every descendant."""
    node.is_checked = value
    for child in node.children:
        set_checked(child, value)


def iter_nodes(nodes: Iterable[FileTreeNode]) -> Iterator[FileTreeNode]:
    """Yield every node depth-first, regardless of selection."""
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)


def find_node(nodes: Iterable[FileTreeNode], relative_path: str) -> FileTreeNode | None:
    """Find a node by its root-relative path (``""`` is the root)."""
    target = relative_path.strip().replace("\\", "/").strip("/")
    for node in iter_nodes(nodes):
        if node.relative_path == target:
            return node
    return None


class SelectionState:
    """Dirty flag for the selection, with optional change subscribers."""

    def __init__(self) -> None:
        self.dirty = False
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def mark_changed(self) -> None:
        self.dirty = True
        for listener in list(self._listeners):
            listener()

    def clear(self) -> None:
        self.dirty = False
