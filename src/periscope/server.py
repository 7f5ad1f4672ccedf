# src/periscope/server.py
"""Periscope HTTP API: serves a snapshot of the workspace tree.

Endpoints:
- GET /files  - full snapshot as {"files": [...]}
- GET /health - liveness check
"""

import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from periscope.config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_ROUTE, ERROR_MESSAGE, ScanSettings, load_settings
from periscope.core.scanner import take_snapshot

logger = logging.getLogger(__name__)


# =============================================================================
# Response Models
# =============================================================================

class FileEntry(BaseModel):
    path: str
    content: str
    timestamp: float


class SnapshotResponse(BaseModel):
    files: List[FileEntry]


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    root: str


# =============================================================================
# App
# =============================================================================

def create_app(settings: Optional[ScanSettings] = None) -> FastAPI:
    """Builds the API around one set of scan settings (env defaults if omitted)."""
    settings = settings or load_settings()

    app = FastAPI(title="Periscope", description="Workspace snapshot service")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Plain def: each request runs its own scan in the threadpool
    @app.get(
        DEFAULT_ROUTE,
        response_model=SnapshotResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def get_files():
        """Scan the root and return every eligible file with its content."""
        try:
            records = take_snapshot(settings)
        except Exception:
            logger.exception("Scan of %s failed", settings.root)
            return JSONResponse(status_code=500, content={"error": ERROR_MESSAGE})

        logger.info("Snapshot of %s: %d files", settings.root, len(records))
        return SnapshotResponse(files=[FileEntry(**r.to_dict()) for r in records])

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok", root=str(settings.root))

    return app


def run(settings: ScanSettings, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
    logger.info("Serving %s on http://%s:%d%s", settings.root, host, port, DEFAULT_ROUTE)
    uvicorn.run(create_app(settings), host=host, port=port)
