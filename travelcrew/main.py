"""
Travel Crew Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, the four resource
       routers and the status/health/files routes. Run with
       `uvicorn travelcrew.main:app`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │   /api/tours  /api/rentals  /api/packages           │
    │   /api/gallery  /api/health  /api/files  /          │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 │ NotFound→404 │ AssetStore→400/500│
    │   Database→500   │ unexpected→500                   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging → config check → document store + asset store built
               from Settings (unless injected) → optional table creation
    Shutdown:  asset store closed → database engine disposed
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from travelcrew import __version__
from travelcrew.config import Settings, settings as default_settings
from travelcrew.database import DocumentStore
from travelcrew.exceptions import (
    AssetStoreError,
    DatabaseError,
    NotFoundError,
    TravelCrewError,
    ValidationError,
)
from travelcrew.kinds import RESOURCE_KINDS
from travelcrew.middleware.logging import RequestLoggingMiddleware
from travelcrew.middleware.request_id import RequestIDMiddleware, request_id_var
from travelcrew.routes import files, health
from travelcrew.routes.resources import build_resource_router
from travelcrew.services.asset_base import AssetStore
from travelcrew.services.cloudinary_service import CloudinaryAssetStore
from travelcrew.services.local_asset_service import LocalAssetStore
from travelcrew.services.resource_service import ResourceService
from travelcrew.services.upload_service import ImageUploadValidator

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] travelcrew.services.resource_service: ...
    Output goes to stdout, which the hosting platform collects.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# External clients
# ══════════════════════════════════════════════════════════════════════════

def build_asset_store(config: Settings) -> AssetStore:
    if config.asset_backend == "local":
        return LocalAssetStore.from_settings(config)
    return CloudinaryAssetStore.from_settings(config)


def install_clients(app: FastAPI, store: DocumentStore, assets: AssetStore) -> None:
    """Attach the shared clients and one ResourceService per kind to app.state."""
    app.state.document_store = store
    app.state.asset_store = assets
    app.state.resource_services = {
        kind.name: ResourceService(kind, store, assets) for kind in RESOURCE_KINDS
    }


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Travel Crew Backend starting up...")

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Startup continues; /api/health reports the asset store as unavailable
        logger.error("Configuration error: %s", str(e))

    if getattr(app.state, "document_store", None) is None:
        install_clients(app, DocumentStore.from_settings(config), build_asset_store(config))

    if config.auto_create_tables:
        await app.state.document_store.create_all()
        logger.info("Document store tables ensured")

    logger.info("Asset backend: %s", type(app.state.asset_store).__name__)
    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Travel Crew Backend shutting down...")
    await app.state.asset_store.aclose()
    await app.state.document_store.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse format.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (malformed request)
        HTTPException           → its own status (bad multipart, unknown route)
        NotFoundError           → 404 Not Found
        AssetStoreError         → exc.status_code (400 create / 500 update)
        DatabaseError           → 500 (generic message)
        TravelCrewError (base)  → 500
        Exception (fallback)    → 500

    Internal details (stack traces, SQL, host responses) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning(
            "[%s] Validation error on %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Malformed multipart bodies and unknown routes
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(AssetStoreError)
    async def handle_asset_store_error(request: Request, exc: AssetStoreError):
        logger.error(
            "[%s] Asset store error on %s %s: %s | Context: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("asset_store_error", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error on %s %s: %s | Context: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
            ),
        )

    @app.exception_handler(TravelCrewError)
    async def handle_app_error(request: Request, exc: TravelCrewError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    document_store: Optional[DocumentStore] = None,
    asset_store: Optional[AssetStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:          Settings to use (defaults to the environment)
        document_store:  Pre-built store; tests inject one on a SQLite file
        asset_store:     Pre-built asset store; tests inject an in-memory fake

    When both clients are given they are installed immediately, so the app
    works without running the lifespan (e.g. under httpx.ASGITransport).
    """
    config = config or default_settings

    app = FastAPI(
        title="Yala Travel Crew API",
        description=(
            "Content backend for the travel site: tours, car rentals, packages "
            "and gallery items, each with a hosted image."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.upload_validator = ImageUploadValidator(config.max_image_size)
    app.state.document_store = None
    if document_store is not None and asset_store is not None:
        install_clients(app, document_store, asset_store)

    # ── Middleware (last added executes first) ────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(health.router)
    for kind in RESOURCE_KINDS:
        app.include_router(build_resource_router(kind))
    app.include_router(files.router)

    return app


app = create_app()
