"""
Vector endpoints: append and source listing.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models import InsertRequest, InsertResponse, DocsResponse, ErrorResponse
from ..config import ServerConfig
from ..dependencies import get_database, get_server_config, verify_api_key
from ...core.database import VectorDB
from ...core.exceptions import ValidationError

router = APIRouter()


@router.post(
    "/vectors",
    response_model=InsertResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Dimension mismatch or invalid vectors"},
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="Append vectors",
    description=(
        "Append vectors with their values. The index is not rebuilt; "
        "call the index endpoint to make them searchable."
    ),
)
def insert_vectors(
    collection_name: str,
    request: InsertRequest,
    db: VectorDB = Depends(get_database),
    config: ServerConfig = Depends(get_server_config),
    _auth: bool = Depends(verify_api_key),
):
    """Append a batch of vectors to a collection."""
    if len(request.vectors) > config.max_vectors_per_request:
        raise ValidationError(
            f"Too many vectors in one request: {len(request.vectors)} "
            f"(max {config.max_vectors_per_request})"
        )

    inserted = db.insert(
        collection_name,
        request.vectors,
        request.values,
        request.source_tag,
    )
    stats = db.collection_stats(collection_name)

    return InsertResponse(
        inserted=inserted,
        vector_count=stats["vector_count"],
        is_stale=stats["is_stale"],
    )


@router.get(
    "/docs",
    response_model=DocsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="List vector sources",
)
def get_docs(
    collection_name: str,
    db: VectorDB = Depends(get_database),
):
    """Source tag of every vector, in insertion order."""
    docs = db.get_docs(collection_name)
    return DocsResponse(docs=docs, total=len(docs))
