"""Shared helpers for the ingest routers."""

from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from server.models import IngestErrorResponse, IngestResponse, IngestSuccessResponse

COMMON_INGEST_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_200_OK: {"model": IngestSuccessResponse, "description": "Successful ingestion"},
    status.HTTP_400_BAD_REQUEST: {"model": IngestErrorResponse, "description": "Bad request or missing directory"},
    status.HTTP_409_CONFLICT: {"model": IngestErrorResponse, "description": "Scan was cancelled"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": IngestErrorResponse, "description": "Internal server error"},
}

_ERROR_STATUS = {
    "directory_not_found": status.HTTP_400_BAD_REQUEST,
    "unknown_path": status.HTTP_400_BAD_REQUEST,
    "cancelled": status.HTTP_409_CONFLICT,
}


def to_json_response(response: IngestResponse) -> JSONResponse:
    """Wrap an ingest response with the matching HTTP status code."""
    if isinstance(response, IngestSuccessResponse):
        return JSONResponse(status_code=status.HTTP_200_OK, content=response.model_dump(mode="json"))

    status_code = _ERROR_STATUS.get(response.error_kind or "", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
