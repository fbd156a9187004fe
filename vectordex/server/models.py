"""
Pydantic models for API requests and responses.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional


# =============================================================================
# COMMON MODELS
# =============================================================================

class SuccessResponse(BaseModel):
    """Generic success response."""
    success: bool = True
    message: str = "Operation completed successfully"
    data: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None
    code: Optional[str] = None


# =============================================================================
# COLLECTION MODELS
# =============================================================================

class CreateCollectionRequest(BaseModel):
    """Request to create a new collection."""
    name: str
    # Range checks happen in the database so that dimension 0 gets its
    # own error code
    dimension: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "documents", "dimension": 384}
            ]
        }
    }


class CollectionResponse(BaseModel):
    """Collection information response."""
    name: str
    dimension: int
    vector_count: int
    indexed_count: Optional[int] = None
    index_type: str
    is_stale: bool = False
    created_at: Optional[float] = None
    updated_at: Optional[float] = None
    memory_usage_bytes: Optional[int] = None


class CollectionListResponse(BaseModel):
    """List of collection names."""
    collections: List[str]
    total: int


# =============================================================================
# VECTOR MODELS
# =============================================================================

class InsertRequest(BaseModel):
    """Request to append vectors to a collection."""
    vectors: List[List[float]]
    values: List[str]
    source_tag: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "vectors": [[10, 12, 4.5], [10, 11, 10.5]],
                    "values": ["red", "green"],
                    "source_tag": "colors.txt",
                }
            ]
        }
    }


class InsertResponse(BaseModel):
    """Result of an append."""
    success: bool = True
    inserted: int
    vector_count: int
    is_stale: bool


class DocsResponse(BaseModel):
    """Source tags of a collection's vectors, in insertion order."""
    docs: List[str]
    total: int


# =============================================================================
# INDEX & QUERY MODELS
# =============================================================================

class BuildIndexResponse(BaseModel):
    """Result of an index rebuild."""
    success: bool = True
    indexed_count: int
    took_ms: float


class QueryRequest(BaseModel):
    """k-NN query."""
    vector: List[float]
    k: int = Field(default=10)
    ef: Optional[int] = Field(default=None, ge=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"vector": [10, 12.5, 4.5], "k": 1}
            ]
        }
    }


class QueryResult(BaseModel):
    """A single ranked result."""
    score: float
    value: str


class QueryResponse(BaseModel):
    """Ranked results, most similar first."""
    results: List[QueryResult]
    total: int
    took_ms: float


# =============================================================================
# ADMIN MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    uptime_seconds: float
    collection_count: int


class SaveResponse(BaseModel):
    """Snapshot save response."""
    success: bool = True
    path: str
    collection_count: int
