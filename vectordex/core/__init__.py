"""
Core components for vectordex.
"""

from .vector import VectorPoint, MetadataEntry, validate_vector
from .collection import Collection, CollectionStats
from .database import VectorDB
from .exceptions import (
    VectorDBError,
    CollectionError,
    CollectionNotFoundError,
    CollectionExistsError,
    VectorError,
    DimensionMismatchError,
    ValidationError,
    InvalidDimensionError,
    IndexError,
    IndexNotBuiltError,
    StorageError,
    SerializationError,
)

__all__ = [
    # Vector
    "VectorPoint",
    "MetadataEntry",
    "validate_vector",
    # Collection
    "Collection",
    "CollectionStats",
    # Database
    "VectorDB",
    # Exceptions
    "VectorDBError",
    "CollectionError",
    "CollectionNotFoundError",
    "CollectionExistsError",
    "VectorError",
    "DimensionMismatchError",
    "ValidationError",
    "InvalidDimensionError",
    "IndexError",
    "IndexNotBuiltError",
    "StorageError",
    "SerializationError",
]
