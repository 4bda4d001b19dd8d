"""Process ingest requests and keep their sessions for later selection changes."""

from __future__ import annotations

import shutil
from collections import OrderedDict
from uuid import UUID, uuid4

from dirdigest.config import DEFAULT_IGNORE_PATTERNS, DIRDIGEST_CACHE_PATH
from dirdigest.ingestion import DigestSession, ingest_directory
from dirdigest.schemas import IngestOptions, IngestResult
from dirdigest.selection import find_node
from dirdigest.utils.logging_config import get_logger
from server.models import IngestErrorResponse, IngestRequest, IngestResponse, IngestSuccessResponse
from server.server_config import MAX_DISPLAY_SIZE, MAX_SESSIONS

# Initialize logger for this module
logger = get_logger(__name__)

# Least recently used first.
_SESSIONS: OrderedDict[UUID, DigestSession] = OrderedDict()


def get_session(ingest_id: UUID) -> DigestSession | None:
    """Return the stored session for ``ingest_id``, if any."""
    session = _SESSIONS.get(ingest_id)
    if session is not None:
        _SESSIONS.move_to_end(ingest_id)
    return session


def _remember_session(ingest_id: UUID, session: DigestSession) -> None:
    _SESSIONS[ingest_id] = session
    while len(_SESSIONS) > MAX_SESSIONS:
        oldest = next(iter(_SESSIONS))
        logger.info("Evicting ingest session", extra={"ingest_id": str(oldest)})
        discard_session(oldest)


def discard_session(ingest_id: UUID) -> bool:
    """Forget a session and remove its cached digest.

    Parameters
    ----------
    ingest_id : UUID
        Identifier of the ingest.

    Returns
    -------
    bool
        ``True`` if a session or cached digest existed.

    """
    session = _SESSIONS.pop(ingest_id, None)
    if session is not None:
        session.close()

    cache_dir = DIRDIGEST_CACHE_PATH / str(ingest_id)
    if not cache_dir.exists():
        return session is not None
    shutil.rmtree(cache_dir)
    return True


def _store_digest_content(ingest_id: UUID, digest_content: str) -> None:
    """Store digest content locally under the cache directory.

    Parameters
    ----------
    ingest_id : UUID
        Identifier of the ingest.
    digest_content : str
        The complete digest content to store.

    """
    cache_dir = DIRDIGEST_CACHE_PATH / str(ingest_id)
    cache_dir.mkdir(parents=True, exist_ok=True)
    local_txt_file = cache_dir / "digest.txt"
    with local_txt_file.open("w", encoding="utf-8") as f:
        f.write(digest_content)


def _generate_digest_url(ingest_id: UUID) -> str:
    return f"/api/download/file/{ingest_id}"


def _build_options(request: IngestRequest) -> IngestOptions:
    ignore = list(DEFAULT_IGNORE_PATTERNS) if request.use_default_ignores else []
    return IngestOptions(
        root_path=request.root_path,
        max_file_size=request.max_file_size * 1024,
        max_files_per_directory=request.max_files_per_directory,
        ignore_patterns=[*ignore, *request.ignore_patterns],
        force_include_patterns=request.force_include_patterns,
        target_file_patterns=request.target_file_patterns,
    )


def _success_response(ingest_id: UUID, root_path: str, result: IngestResult) -> IngestSuccessResponse:
    _store_digest_content(ingest_id, result.digest)

    content = result.file_contents
    if len(content) > MAX_DISPLAY_SIZE:
        content = (
            f"(Content cropped to {int(MAX_DISPLAY_SIZE / 1_000)}k characters, "
            "download full digest to see more)\n" + content[:MAX_DISPLAY_SIZE]
        )

    return IngestSuccessResponse(
        ingest_id=ingest_id,
        root_path=root_path,
        summary=result.summary,
        digest_url=_generate_digest_url(ingest_id),
        tree=result.tree_structure_text,
        content=content,
        file_count=result.file_count,
        total_tokens=result.total_tokens_estimated,
    )


async def process_query(request: IngestRequest) -> IngestResponse:
    """Scan the requested directory and return its digest."""
    options = _build_options(request)
    _print_query(options)

    result = await ingest_directory(options)
    if not result.is_success:
        logger.error(
            "Query processing failed",
            extra={
                "root_path": request.root_path,
                "error": result.error_message,
                "error_kind": result.error_kind,
            },
        )
        kind = result.error_kind.value if result.error_kind else None
        return IngestErrorResponse(error=result.error_message, error_kind=kind)

    ingest_id = uuid4()
    _remember_session(ingest_id, DigestSession(result))

    logger.info(
        "Query processing completed successfully",
        extra={
            "root_path": request.root_path,
            "ingest_id": str(ingest_id),
            "file_count": result.file_count,
            "estimated_tokens": result.total_tokens_estimated,
        },
    )
    return _success_response(ingest_id, request.root_path, result)


def update_selection(session: DigestSession, ingest_id: UUID, paths: list[str], checked: bool) -> IngestResponse:
    """Apply a selection change to a stored session and re-render it.

    Parameters
    ----------
    session : DigestSession
        The stored session.
    ingest_id : UUID
        Identifier of the session.
    paths : list[str]
        Relative paths of the nodes to change.
    checked : bool
        New inclusion state.

    Returns
    -------
    IngestResponse
        The re-rendered digest, or an error naming the unknown paths.

    """
    # Any unknown path rejects the whole request before a node changes.
    missing = [path for path in paths if find_node(session.result.root_nodes, path) is None]
    if missing:
        return IngestErrorResponse(error=f"Unknown paths: {', '.join(missing)}", error_kind="unknown_path")

    for path in paths:
        session.select(path, checked)
    result = session.render_now()

    root_path = result.root_nodes[0].full_path if result.root_nodes else ""
    return _success_response(ingest_id, root_path, result)


def _print_query(options: IngestOptions) -> None:
    logger.info(
        "Processing query",
        extra={
            "root_path": options.root_path,
            "max_file_size_kb": int(options.max_file_size / 1024),
            "max_files_per_directory": options.max_files_per_directory,
            "target_mode": options.target_mode,
        },
    )
