"""FastAPI application."""

from __future__ import annotations

from fastapi import FastAPI

from dirdigest.utils.logging_config import configure_logging
from server.routers.ingest import router as ingest_router

# Runs under "python -m server" and when uvicorn imports the app directly.
configure_logging()

app = FastAPI(title="dirdigest", description="Turn a local directory into a text digest.")
app.include_router(ingest_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}
