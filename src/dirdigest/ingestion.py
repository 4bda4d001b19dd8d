"""Ingestion pipeline: directory scan -> rendered digest, plus re-rendering on selection changes."""

from __future__ import annotations

import asyncio
import threading
from typing import Callable

from dirdigest.config import DIRDIGEST_DEBOUNCE_S
from dirdigest.debounce import Debouncer
from dirdigest.output_formatter import render
from dirdigest.scanner import ProgressCallback, scan_directory
from dirdigest.schemas import FileTreeNode, IngestOptions, IngestResult
from dirdigest.selection import SelectionState, find_node, set_checked
from dirdigest.utils.logging_config import get_logger

logger = get_logger(__name__)


async def ingest_directory(
    options: IngestOptions,
    *,
    cancel_event: threading.Event | None = None,
    progress: ProgressCallback | None = None,
) -> IngestResult:
    """Scan a directory and render its digest.

    The scan runs in a worker thread. Cancelling the awaiting task signals the
    scan to stop at its next checkpoint and re-raises ``CancelledError``; setting
    ``cancel_event`` instead yields a failed result with ``ErrorKind.CANCELLED``.

    Args:
        options: Scan configuration.
        cancel_event: Optional shared cancellation signal.
        progress: Receives advisory status messages.

    Returns:
        The rendered result, or the failed scan result unchanged.
    """
    event = cancel_event or threading.Event()
    try:
        result = await asyncio.to_thread(scan_directory, options, cancel_event=event, progress=progress)
    except asyncio.CancelledError:
        event.set()
        raise

    if not result.is_success:
        return result

    result = refresh_result(result)
    logger.info(
        "Directory ingested",
        extra={
            "root_path": options.root_path,
            "file_count": result.file_count,
            "total_tokens": result.total_tokens_estimated,
        },
    )
    return result


def refresh_result(result: IngestResult) -> IngestResult:
    """Re-render ``result`` from its tree and current selection.

    The returned result shares ``root_nodes`` with the input. Failed results are
    returned as-is.
    """
    if not result.is_success:
        return result
    rendered = render(result.root_nodes)
    return result.model_copy(
        update={
            "summary": rendered.summary,
            "tree_structure_text": rendered.tree,
            "file_contents": rendered.content,
            "file_count": rendered.file_count,
            "total_tokens_estimated": rendered.total_tokens,
        }
    )


class DigestSession:
    """Current result plus the selection edits applied to it.

    ``toggle`` coalesces bursts of edits into one re-render after the quiet
    period; ``render_now`` re-renders immediately. Rendering only ever happens
    on the event loop thread, never concurrently with itself.
    """

    def __init__(
        self,
        result: IngestResult,
        *,
        delay: float = DIRDIGEST_DEBOUNCE_S,
        on_render: Callable[[IngestResult], None] | None = None,
    ) -> None:
        self.result = result
        self.on_render = on_render
        self.selection = SelectionState()
        self.render_count = 0
        self._debouncer = Debouncer(self._render_if_dirty, delay)

    @property
    def render_pending(self) -> bool:
        return self._debouncer.pending

    def select(self, relative_path: str, checked: bool) -> FileTreeNode:
        """Check or uncheck a node and its subtree without scheduling a render.

        Raises:
            KeyError: If no node has ``relative_path``.
        """
        node = find_node(self.result.root_nodes, relative_path)
        if node is None:
            raise KeyError(relative_path)
        set_checked(node, checked)
        self.selection.mark_changed()
        return node

    def toggle(self, relative_path: str, checked: bool) -> FileTreeNode:
        """Change the selection and schedule a debounced re-render."""
        node = self.select(relative_path, checked)
        self._debouncer.trigger()
        return node

    def render_now(self) -> IngestResult:
        self._debouncer.cancel()
        self.result = refresh_result(self.result)
        self.selection.clear()
        self.render_count += 1
        if self.on_render is not None:
            self.on_render(self.result)
        return self.result

    def close(self) -> None:
        self._debouncer.cancel()

    def _render_if_dirty(self) -> None:
        if self.selection.dirty:
            self.render_now()
