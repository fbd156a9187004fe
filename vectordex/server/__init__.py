"""
vectordex REST API Server.

A FastAPI host for the vector database.

Quick Start:
    >>> from vectordex.server import create_app, run_server
    >>>
    >>> app = create_app()
    >>> run_server(app, host="0.0.0.0", port=8000)

Or using command line:
    $ python -m vectordex.server --host 0.0.0.0 --port 8000

Or with uvicorn:
    $ uvicorn vectordex.server:app
"""

from .app import create_app, app, open_database
from .config import ServerConfig
from .models import (
    CreateCollectionRequest,
    CollectionResponse,
    CollectionListResponse,
    InsertRequest,
    InsertResponse,
    DocsResponse,
    BuildIndexResponse,
    QueryRequest,
    QueryResponse,
    SuccessResponse,
    ErrorResponse,
)

__all__ = [
    # App
    "create_app",
    "app",
    "open_database",
    "run_server",
    # Config
    "ServerConfig",
    # Models
    "CreateCollectionRequest",
    "CollectionResponse",
    "CollectionListResponse",
    "InsertRequest",
    "InsertResponse",
    "DocsResponse",
    "BuildIndexResponse",
    "QueryRequest",
    "QueryResponse",
    "SuccessResponse",
    "ErrorResponse",
]


def run_server(
    app=None,
    host: str = "0.0.0.0",
    port: int = 8000,
    log_level: str = "info",
):
    """
    Run the vectordex server.

    Args:
        app: FastAPI application (creates default if None)
        host: Host to bind to
        port: Port to bind to
        log_level: Logging level
    """
    import uvicorn

    if app is None:
        app = create_app()

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
    )
