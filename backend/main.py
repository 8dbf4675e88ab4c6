from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.routes import data, entries, progress, reports, session, tasks
from mastery.errors import MalformedImportError, StaleWriteError, StorageUnavailableError
from mastery.logging_config import configure_logging

logger = logging.getLogger("backend")


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Self-Mastery Tracker API", version="0.1.0")

    app.include_router(session.router)
    app.include_router(tasks.router)
    app.include_router(entries.router)
    app.include_router(progress.router)
    app.include_router(reports.router)
    app.include_router(data.router)

    @app.exception_handler(MalformedImportError)
    async def _malformed_import_handler(request: Request, exc: MalformedImportError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(StaleWriteError)
    async def _stale_write_handler(request: Request, exc: StaleWriteError):
        logger.warning("Rejected stale write: %s", exc)
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StorageUnavailableError)
    async def _storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
        logger.error("Storage unavailable: %s", exc)
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()
