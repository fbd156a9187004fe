"""
Index and query endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
import time

from ..models import (
    BuildIndexResponse,
    QueryRequest,
    QueryResponse,
    QueryResult,
    ErrorResponse,
)
from ..dependencies import get_database, verify_api_key
from ...core.database import VectorDB

router = APIRouter()


@router.post(
    "/index",
    response_model=BuildIndexResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="Rebuild the index",
    description="Rebuild the collection's index from all its current vectors.",
)
def build_index(
    collection_name: str,
    db: VectorDB = Depends(get_database),
    _auth: bool = Depends(verify_api_key),
):
    """Rebuild a collection's index."""
    start = time.time()
    db.build_index(collection_name)
    took_ms = (time.time() - start) * 1000

    return BuildIndexResponse(
        indexed_count=db.collection_stats(collection_name)["indexed_count"],
        took_ms=took_ms,
    )


@router.post(
    "/query",
    response_model=QueryResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Dimension mismatch or invalid k"},
        404: {"model": ErrorResponse, "description": "Collection not found"},
        409: {"model": ErrorResponse, "description": "Index not built"},
    },
    summary="Query similar vectors",
    description="Return up to k values ranked by cosine similarity.",
)
def query(
    collection_name: str,
    request: QueryRequest,
    db: VectorDB = Depends(get_database),
):
    """k-NN query against the collection's index."""
    start = time.time()
    results = db.query(collection_name, request.vector, request.k, ef=request.ef)
    took_ms = (time.time() - start) * 1000

    return QueryResponse(
        results=[QueryResult(score=score, value=value) for score, value in results],
        total=len(results),
        took_ms=took_ms,
    )
