"""
DSM Gateway — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn gateway.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────────┐ │
    │  │  Req ID  │→│   Logging   │→│ GZip │→│   CORS   │ │
    │  └──────────┘ └─────────────┘ └──────┘ └──────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────┐ ┌───────────┐ ┌──────────┐ ┌───────┐ │
    │  │ /usuarios │ │ /produtos │ │ /buckets │ │/health│ │
    │  └───────────┘ └───────────┘ └──────────┘ └───────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ DB/Storage→500│  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Build the SQLAlchemy engine and session factory (MySQL, products)
    4. Build the MongoDB client and select the database (users)
    5. Build the S3 client and BucketService (buckets)

    Shutdown:
    1. Dispose database engine (close all pooled connections)
    2. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pymongo import AsyncMongoClient

from gateway import __version__
from gateway.config import Settings, settings as default_settings
from gateway.database import (
    create_engine_from_settings,
    create_session_factory,
    dispose_engine,
)
from gateway.exceptions import (
    DatabaseError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from gateway.middleware.logging import RequestLoggingMiddleware
from gateway.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    current_request_id,
)
from gateway.request_log import log_error
from gateway.routes import buckets, health, products, users
from gateway.services.bucket_service import BucketService

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Erro interno"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(app_settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, app_settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Drivers log every round trip at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the three store handles on startup and release them on shutdown.

    Handles live on `app.state` and reach the handlers through
    gateway.dependencies. No store is contacted here: the Mongo client and
    the connection pool connect lazily, so the server starts even when a
    store is down and /health reports it.
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings)
    logger.info("=" * 60)
    logger.info("DSM Gateway starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    engine = create_engine_from_settings(app_settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info(
        "MySQL pool: %s (size=%d)",
        engine.url.render_as_string(hide_password=True),
        app_settings.db_pool_size,
    )

    mongo_client = AsyncMongoClient(app_settings.mongo_uri)
    app.state.mongo_client = mongo_client
    if app_settings.mongo_database:
        app.state.mongo_db = mongo_client[app_settings.mongo_database]
    else:
        app.state.mongo_db = mongo_client.get_default_database(default="dsm")
    logger.info(
        "MongoDB database: %s, collection: %s",
        app.state.mongo_db.name,
        app_settings.mongo_collection,
    )

    app.state.bucket_service = BucketService.from_settings(app_settings)
    logger.info(
        "Replication: %s -> %s",
        app_settings.replication_source_bucket,
        app_settings.replication_destination_bucket,
    )

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("API docs: http://%s:%d/swagger", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DSM Gateway shutting down...")
    await dispose_engine(engine)
    await mongo_client.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError     → 400 Bad Request
        NotFoundError       → 404 Not Found
        DatabaseError       → 500, static "Erro interno" (driver error logged only)
        StorageError        → 500, {"error", "details"} (details omitted on list)
        Exception (fallback)→ 500, static "Erro interno"

    The fallback runs in Starlette's ServerErrorMiddleware, outside
    RequestIDMiddleware, so it sets the X-Request-ID header itself.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        log_error(exc.message, request)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "request_id": current_request_id(request),
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = current_request_id(request)
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the caller; the chained driver error is logged."""
        log_error(exc.operation, request, exc.__cause__ or exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": current_request_id(request),
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """The storage API's error is part of the response contract when attached."""
        log_error(exc.message, request, exc.__cause__ or exc)
        content = {"error": exc.message}
        if exc.details is not None:
            content["details"] = exc.details
        content["request_id"] = current_request_id(request)
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = current_request_id(request)
        log_error("Unexpected error", request, exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": INTERNAL_ERROR,
                "request_id": rid,
            },
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration to build the stores from. Defaults to the
                      module-level settings read from the environment.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="DSM Gateway API",
        description=(
            "Gateway HTTP para três armazenamentos: usuários no MongoDB, "
            "produtos no MySQL e arquivos em buckets S3."
        ),
        version=__version__,
        docs_url="/swagger",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(buckets.router)
    app.include_router(health.router)

    return app


# uvicorn expects `gateway.main:app` to be importable
app = create_app()
