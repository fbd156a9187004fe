"""
FastAPI dependencies for the vectordex server.

The database lives in ``app.state`` for the lifetime of the application;
handlers get it through ``get_database`` and never through a global.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Header, Request
from typing import Optional, Annotated
import time

from .config import ServerConfig
from ..core.database import VectorDB


def get_database(request: Request) -> VectorDB:
    """Dependency to get the application's database."""
    return request.app.state.database


def get_server_config(request: Request) -> ServerConfig:
    """Dependency to get the server configuration."""
    return request.app.state.config


def get_uptime(request: Request) -> float:
    """Dependency to get server uptime in seconds."""
    started_at = getattr(request.app.state, "started_at", None)
    if started_at is None:
        return 0.0
    return time.time() - started_at


async def verify_api_key(
    x_api_key: Annotated[Optional[str], Header()] = None,
    config: ServerConfig = Depends(get_server_config),
) -> bool:
    """
    Verify API key if authentication is enabled.
    """
    if config.api_key is None:
        # No authentication required
        return True

    if x_api_key is None:
        raise HTTPException(
            status_code=401,
            detail="API key required",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if x_api_key != config.api_key:
        raise HTTPException(
            status_code=403,
            detail="Invalid API key",
        )

    return True
