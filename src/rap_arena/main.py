# src/rap_arena/main.py
"""Main entry point for the Rap Arena application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from rap_arena.api.v1 import (
    beats_router,
    comments_router,
    favorites_router,
    notifications_router,
    posts_router,
    reactions_router,
    recordings_router,
    users_router,
)
from rap_arena.core.errors import RapArenaError
from rap_arena.core.settings import settings
from rap_arena.services.storage_cleanup import StorageCleanupWorker

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Rap Arena API",
    description="Posts, recordings and beats with likes, comments and notifications",
    version=settings.app_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(GZipMiddleware)

app.include_router(reactions_router, prefix="/api/v1")
app.include_router(favorites_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(recordings_router, prefix="/api/v1")
app.include_router(beats_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.exception_handler(RapArenaError)
async def handle_domain_error(request: Request, exc: RapArenaError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal server error"},
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": _validation_errors(exc)},
    )


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def _validation_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


@app.on_event("startup")
async def on_startup() -> None:
    if settings.storage_cleanup_enabled:
        worker = StorageCleanupWorker()
        await worker.start()
        app.state.storage_cleanup_worker = worker
    else:
        app.state.storage_cleanup_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: StorageCleanupWorker | None = getattr(app.state, "storage_cleanup_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rap_arena.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
