"""
Index implementations for vectordex.

Every index is built in full from an ordered snapshot of vectors and
answers k-NN queries over it:

    index = SomeIndex.build(vectors, **params)
    results = index.search(query, k)

Available Indices:
    - HNSWIndex: HNSW graph index (fast approximate search, default)
    - FlatIndex: Brute-force exact search (100% recall)

Example:
    >>> from vectordex.index import create_index
    >>>
    >>> index = create_index("hnsw", vectors, M=16, ef_search=50)
    >>> results = index.search(query, k=5)
"""

from typing import Union

from numpy.typing import NDArray

from .base import (
    BaseIndex,
    IndexStats,
    SearchResult,
    IndexType,
)
from .flat import FlatIndex
from .hnsw import HNSWIndex, HNSWConfig

__all__ = [
    # Base
    "BaseIndex",
    "IndexStats",
    "SearchResult",
    "IndexType",
    # Implementations
    "FlatIndex",
    "HNSWIndex",
    "HNSWConfig",
    # Factory
    "create_index",
]


_INDEX_CLASSES = {
    IndexType.FLAT: FlatIndex,
    IndexType.HNSW: HNSWIndex,
}


def create_index(
    index_type: Union[str, IndexType],
    vectors: NDArray,
    **params,
) -> BaseIndex:
    """
    Factory function to build an index.

    Args:
        index_type: Type of index ("hnsw" or "flat")
        vectors: Vectors (n, dimension) in insertion order
        **params: Index-specific construction parameters

    Returns:
        Built index instance

    Example:
        >>> index = create_index("flat", vectors)
        >>> index = create_index("hnsw", vectors, M=32, ef_search=100)
    """
    try:
        cls = _INDEX_CLASSES[IndexType(index_type.lower())]
    except ValueError:
        raise ValueError(
            f"Unknown index type: {index_type}. Available: flat, hnsw"
        )

    if cls is FlatIndex:
        # Exact scan takes no construction parameters
        params = {}

    return cls.build(vectors, **params)
