"""
Custom exceptions for vectordex.

Every exception carries a short machine-readable ``code`` that host
layers use to translate errors into their own transport representation.
"""


class VectorDBError(Exception):
    """Base exception for vectordex."""
    code = "VECTORDB_ERROR"


class CollectionError(VectorDBError):
    """Error related to collection operations."""
    code = "COLLECTION_ERROR"


class CollectionNotFoundError(CollectionError):
    """Collection does not exist."""
    code = "NOT_FOUND"


class CollectionExistsError(CollectionError):
    """Collection already exists."""
    code = "ALREADY_EXISTS"


class VectorError(VectorDBError):
    """Error related to vector operations."""
    code = "VECTOR_ERROR"


class DimensionMismatchError(VectorError):
    """
    Vector batch doesn't fit the collection.

    Raised when the number of vectors differs from the number of values,
    or when a vector's length differs from the collection dimension.
    """
    code = "DIMENSION_MISMATCH"


class ValidationError(VectorDBError):
    """Input validation error."""
    code = "VALIDATION_ERROR"


class InvalidDimensionError(ValidationError):
    """Collection dimension is not a positive integer."""
    code = "INVALID_DIMENSION"


class IndexError(VectorDBError):
    """Error related to index operations."""
    code = "INDEX_ERROR"


class IndexNotBuiltError(IndexError):
    """Query attempted on a collection that was never indexed."""
    code = "INDEX_NOT_BUILT"


class StorageError(VectorDBError):
    """Error related to snapshot storage."""
    code = "STORAGE_ERROR"


class SerializationError(StorageError):
    """Error during serialization/deserialization."""
    code = "SERIALIZATION_ERROR"
