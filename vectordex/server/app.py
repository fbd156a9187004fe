"""
Main FastAPI application for vectordex.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, load_config
from .config import ServerConfig
from .routes import create_api_router
from .middleware import RequestLoggingMiddleware
from ..core.database import VectorDB
from ..core.exceptions import (
    VectorDBError,
    CollectionNotFoundError,
    CollectionExistsError,
    DimensionMismatchError,
    ValidationError,
    IndexNotBuiltError,
)
from ..utils.logging import get_logger, setup_logger

logger = get_logger("vectordex.server")


# Most specific class first
ERROR_STATUS_CODES = [
    (CollectionNotFoundError, 404),
    (CollectionExistsError, 409),
    (IndexNotBuiltError, 409),
    (DimensionMismatchError, 400),
    (ValidationError, 400),
]


def status_code_for(exc: VectorDBError) -> int:
    """HTTP status code for a database error."""
    for exc_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def open_database(config: ServerConfig, settings: Optional[Settings] = None) -> VectorDB:
    """
    Construct the database for a server run.

    Settings come from the YAML config; a snapshot path on the server
    config overrides the one in the settings. An existing snapshot is
    restored when the settings ask for it.
    """
    settings = settings or load_config(config.config_path)
    snapshot_path = config.snapshot_path or settings.storage_config.snapshot_path

    if (
        snapshot_path
        and settings.storage_config.load_on_startup
        and Path(snapshot_path).exists()
    ):
        return VectorDB.load(
            snapshot_path,
            index_type=settings.index_type,
            index_params=settings.index_params(),
        )

    return VectorDB(
        index_type=settings.index_type,
        index_params=settings.index_params(),
        snapshot_path=snapshot_path,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the database for the lifetime of the application."""
    config: ServerConfig = app.state.config

    logger.info("Starting vectordex server...")
    settings = load_config(config.config_path)
    owns_database = app.state.database is None
    if owns_database:
        app.state.database = open_database(config, settings)
    app.state.started_at = time.time()

    db: VectorDB = app.state.database
    logger.info(f"Database ready with {len(db)} collections")

    yield

    logger.info("Shutting down vectordex server...")
    if owns_database:
        if db.snapshot_path and settings.storage_config.save_on_shutdown:
            db.save()
        app.state.database = None
    logger.info("Server shutdown complete")


def create_app(
    config: Optional[ServerConfig] = None,
    database: Optional[VectorDB] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Server configuration (defaults to environment variables)
        database: Database to serve; when None the lifespan opens one
            from settings and closes it on shutdown

    Returns:
        FastAPI application instance
    """
    config = config or ServerConfig.from_env()
    setup_logger(level=config.log_level)

    app = FastAPI(
        title="vectordex API",
        description="""
# vectordex - In-process vector database

Collections of fixed-dimension vectors with an explicitly rebuilt
HNSW index and cosine-similarity queries.

## Workflow

1. Create a collection
2. Append vectors with their values
3. Rebuild the index
4. Query for similar vectors
        """,
        version="0.1.0",
        docs_url="/docs" if config.docs_enabled else None,
        redoc_url="/redoc" if config.docs_enabled else None,
        openapi_url="/openapi.json" if config.docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.database = database
    app.state.started_at = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(VectorDBError)
    async def database_exception_handler(request: Request, exc: VectorDBError):
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(f"Database error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": str(exc),
                "code": exc.code,
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "detail": str(exc) if config.log_level.upper() == "DEBUG" else None,
            },
        )

    app.include_router(create_api_router(), prefix=config.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": "vectordex",
            "version": "0.1.0",
            "docs": "/docs",
            "api": config.api_prefix,
        }

    return app


# Default app instance, configured from the environment
app = create_app()
