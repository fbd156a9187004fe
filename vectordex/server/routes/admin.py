"""
Admin and database management endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models import HealthResponse, SaveResponse, ErrorResponse
from ..dependencies import get_database, get_uptime, verify_api_key
from ...core.database import VectorDB

router = APIRouter()

_version = "0.1.0"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
def health_check(
    db: VectorDB = Depends(get_database),
    uptime: float = Depends(get_uptime),
):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=_version,
        uptime_seconds=uptime,
        collection_count=len(db),
    )


@router.get(
    "/info",
    summary="Database info",
)
def database_info(db: VectorDB = Depends(get_database)):
    """Get detailed information about the database."""
    return db.info()


@router.post(
    "/save",
    response_model=SaveResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Snapshot could not be written"},
    },
    summary="Save a snapshot",
    description="Write the database to its configured snapshot file.",
)
def save_database(
    db: VectorDB = Depends(get_database),
    _auth: bool = Depends(verify_api_key),
):
    """Persist the database to its snapshot file."""
    path = db.save()
    return SaveResponse(path=str(path), collection_count=len(db))
