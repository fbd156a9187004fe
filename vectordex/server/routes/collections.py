"""
Collection management endpoints.

Database errors propagate to the application's exception handler, which
turns them into error responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models import (
    CreateCollectionRequest,
    CollectionResponse,
    CollectionListResponse,
    SuccessResponse,
    ErrorResponse,
)
from ..dependencies import get_database, verify_api_key
from ...core.database import VectorDB

router = APIRouter()


def _collection_response(db: VectorDB, name: str) -> CollectionResponse:
    stats = db.collection_stats(name)
    return CollectionResponse(
        name=stats["name"],
        dimension=stats["dimension"],
        vector_count=stats["vector_count"],
        indexed_count=stats["indexed_count"],
        index_type=stats["index_type"],
        is_stale=stats["is_stale"],
        created_at=stats["created_at"],
        updated_at=stats["updated_at"],
        memory_usage_bytes=stats["memory_usage_bytes"],
    )


@router.post(
    "",
    response_model=CollectionResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid name or dimension"},
        409: {"model": ErrorResponse, "description": "Collection already exists"},
    },
    summary="Create a new collection",
)
def create_collection(
    request: CreateCollectionRequest,
    db: VectorDB = Depends(get_database),
    _auth: bool = Depends(verify_api_key),
):
    """Create a new, empty collection with a fixed dimension."""
    db.create_collection(request.name, request.dimension)
    return _collection_response(db, request.name)


@router.get(
    "",
    response_model=CollectionListResponse,
    summary="List all collections",
)
def list_collections(db: VectorDB = Depends(get_database)):
    """List all collection names."""
    names = db.list_collections()
    return CollectionListResponse(collections=names, total=len(names))


@router.get(
    "/{collection_name}",
    response_model=CollectionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="Get collection info",
)
def get_collection(
    collection_name: str,
    db: VectorDB = Depends(get_database),
):
    """Get collection information."""
    return _collection_response(db, collection_name)


@router.delete(
    "/{collection_name}",
    response_model=SuccessResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="Delete a collection",
)
def delete_collection(
    collection_name: str,
    db: VectorDB = Depends(get_database),
    _auth: bool = Depends(verify_api_key),
):
    """Delete a collection and all its vectors."""
    db.delete_collection(collection_name)
    return SuccessResponse(
        message=f"Collection '{collection_name}' deleted successfully"
    )
