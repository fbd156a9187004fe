"""
vectordex - An in-process, multi-collection vector database.

Example:
    >>> from vectordex import VectorDB
    >>>
    >>> db = VectorDB()
    >>> db.create_collection("docs", dimension=3)
    >>> db.insert("docs", [[10, 12, 4.5], [10, 11, 10.5]], ["red", "green"], "colors.txt")
    2
    >>>
    >>> # Appends are not searchable until the index is rebuilt
    >>> db.build_index("docs")
    >>> db.query("docs", [10, 12.5, 4.5], k=1)
    [(0.9997943..., 'red')]
"""

from .core import (
    # Main classes
    VectorDB,
    Collection,
    CollectionStats,
    VectorPoint,
    MetadataEntry,
    # Exceptions
    VectorDBError,
    CollectionNotFoundError,
    CollectionExistsError,
    DimensionMismatchError,
    ValidationError,
    InvalidDimensionError,
    IndexNotBuiltError,
    StorageError,
    SerializationError,
)

from .distance import (
    cosine_distance,
    cosine_similarity,
)

from .index import (
    BaseIndex,
    FlatIndex,
    HNSWIndex,
    IndexType,
    create_index,
)

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "VectorDB",
    "Collection",
    "CollectionStats",
    "VectorPoint",
    "MetadataEntry",
    # Exceptions
    "VectorDBError",
    "CollectionNotFoundError",
    "CollectionExistsError",
    "DimensionMismatchError",
    "ValidationError",
    "InvalidDimensionError",
    "IndexNotBuiltError",
    "StorageError",
    "SerializationError",
    # Distance functions
    "cosine_distance",
    "cosine_similarity",
    # Indices
    "BaseIndex",
    "FlatIndex",
    "HNSWIndex",
    "IndexType",
    "create_index",
]
