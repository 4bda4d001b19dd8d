"""Ingest endpoints for the API."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse, JSONResponse, Response

from dirdigest.config import DIRDIGEST_CACHE_PATH
from server.models import IngestRequest, SelectionRequest
from server.query_processor import discard_session, get_session, process_query, update_selection
from server.routers_utils import COMMON_INGEST_RESPONSES, to_json_response

router = APIRouter()


@router.post("/api/ingest", responses=COMMON_INGEST_RESPONSES)
async def api_ingest(ingest_request: IngestRequest) -> JSONResponse:
    """Scan a local directory and return its digest.

    **This endpoint walks the requested directory, applying the ignore,
    whitelist and target-file patterns, and returns the summary, directory tree
    and concatenated file contents.** The ingest is kept so its selection can be
    changed later.

    **Parameters**

    - **ingest_request** (`IngestRequest`): Pydantic model containing scan parameters

    **Returns**

    - **JSONResponse**: Success response with the digest or error response with appropriate HTTP status code

    """
    response = await process_query(ingest_request)
    return to_json_response(response)


@router.post("/api/ingest/{ingest_id}/selection", responses=COMMON_INGEST_RESPONSES)
async def api_update_selection(ingest_id: UUID, selection: SelectionRequest) -> JSONResponse:
    """Include or exclude nodes of a stored ingest and re-render it.

    **Changing a directory applies to its whole subtree.** No file is read
    again; the digest is rebuilt from the tree captured when the directory was scanned.

    **Raises**

    - **HTTPException**: **404** - unknown ingest ID

    """
    session = get_session(ingest_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Ingest {ingest_id!s} not found")

    response = update_selection(session, ingest_id, selection.paths, selection.checked)
    return to_json_response(response)


@router.delete("/api/ingest/{ingest_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def api_delete_ingest(ingest_id: UUID) -> Response:
    """Forget a stored ingest and remove its cached digest.

    **Raises**

    - **HTTPException**: **404** - unknown ingest ID

    """
    if not discard_session(ingest_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Ingest {ingest_id!s} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/download/file/{ingest_id}", response_model=None)
async def download_ingest(ingest_id: UUID) -> FileResponse:
    """Download the full digest stored for an ingest ID.

    **The stored file always holds the uncropped digest** as of the last scan or
    selection change, including the summary and directory tree.

    **Parameters**

    - **ingest_id** (`UUID`): Identifier that the ingest step emitted

    **Returns**

    - **FileResponse**: Streamed response with media type ``text/plain`` for local files

    **Raises**

    - **HTTPException**: **404** - no digest stored for the ID
    - **HTTPException**: **403** - the process lacks permission to read the directory or file

    """
    directory = (DIRDIGEST_CACHE_PATH / str(ingest_id)).resolve()
    if not str(directory).startswith(str(DIRDIGEST_CACHE_PATH.resolve())):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Invalid ingest ID: {ingest_id!r}")

    digest_file = directory / "digest.txt"
    if not digest_file.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Digest {ingest_id!s} not found")

    try:
        return FileResponse(path=digest_file, media_type="text/plain", filename=f"digest_{ingest_id}.txt")
    except PermissionError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission denied for {digest_file}",
        ) from exc
