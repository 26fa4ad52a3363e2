"""FastAPI application entry point and lifespan management.

Configures CORS, maps domain exceptions to HTTP responses, registers the
API routers and manages the application lifespan (data directories,
loading the tracker document, closing shared HTTP clients).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from research_tracker.api.v1.router import router as v1_router
from research_tracker.config import get_settings
from research_tracker.deps import get_file_gateway, get_store
from research_tracker.exceptions import (
    EntityNotFound,
    ImportRejected,
    MailNotConfigured,
    MailUpstreamError,
    PathOutsideStorageRoot,
)
from research_tracker.schemas.common import HealthResponse
from research_tracker.services.http_client_manager import close_all_clients


def _setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Suppress noisy third-party HTTP loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Runs on startup: create directories and load the tracker document."""
    settings = get_settings()
    _setup_logging(settings.LOG_LEVEL)
    log = logging.getLogger(__name__)

    storage_root = get_file_gateway().storage_root
    storage_root.mkdir(parents=True, exist_ok=True)

    doc = get_store().document
    log.info(
        "Tracker ready at %s: %d projects, %d outreach, %d materials, %d decisions",
        settings.data_path, len(doc.projects), len(doc.outreach),
        len(doc.materials), len(doc.decisions),
    )
    log.info("File storage root: %s", storage_root)

    yield  # Application runs here

    await close_all_clients()
    log.info("Shutting down")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": message},
        media_type="application/json; charset=utf-8",
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # JSON and text responses always declare charset=utf-8
    @app.middleware("http")
    async def enforce_utf8_charset(request: Request, call_next):
        response = await call_next(request)
        ct = response.headers.get("content-type", "")
        if ("charset" not in ct) and any(
            t in ct for t in ("application/json", "text/html", "text/plain", "text/csv")
        ):
            response.headers["content-type"] = ct + "; charset=utf-8"
        return response

    @app.exception_handler(EntityNotFound)
    async def not_found_handler(request: Request, exc: EntityNotFound):
        return _error(404, str(exc))

    @app.exception_handler(ImportRejected)
    async def import_rejected_handler(request: Request, exc: ImportRejected):
        return _error(400, str(exc))

    @app.exception_handler(PathOutsideStorageRoot)
    async def path_denied_handler(request: Request, exc: PathOutsideStorageRoot):
        logging.getLogger(__name__).warning("Denied path %r", exc.relative)
        return _error(403, "Access denied")

    @app.exception_handler(MailNotConfigured)
    async def mail_not_configured_handler(request: Request, exc: MailNotConfigured):
        return _error(503, f"Gmail is not authorized: {exc}")

    @app.exception_handler(MailUpstreamError)
    async def mail_upstream_handler(request: Request, exc: MailUpstreamError):
        return _error(502, str(exc))

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logging.getLogger(__name__).exception(f"Unhandled error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
            media_type="application/json; charset=utf-8",
        )

    # Health check
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Mount API routes
    app.include_router(v1_router)

    return app


app = create_app()
