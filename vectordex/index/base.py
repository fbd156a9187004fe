"""
Abstract base class for all index implementations.

An index is an immutable snapshot: it is built in one go from an ordered
set of vectors and answers k-NN queries over that snapshot. Identifiers
are the positions of the vectors in the build input, so a collection can
map them straight back to its metadata.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any
import time

import numpy as np
from numpy.typing import NDArray

from ..distance import as_float32, row_norms, similarity_from_distance


class IndexType(str, Enum):
    """Available index types."""
    FLAT = "flat"
    HNSW = "hnsw"


@dataclass
class IndexStats:
    """Statistics about a built index."""

    index_type: str
    dimension: int
    vector_count: int
    memory_bytes: int
    build_time_seconds: float = 0.0

    # Optional type-specific stats
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index_type": self.index_type,
            "dimension": self.dimension,
            "vector_count": self.vector_count,
            "memory_bytes": self.memory_bytes,
            "memory_mb": round(self.memory_bytes / (1024 * 1024), 2),
            "build_time_seconds": self.build_time_seconds,
            **self.extra,
        }


@dataclass
class SearchResult:
    """
    Result from an index search.

    Attributes:
        id: Position of the vector in the build input
        distance: Cosine distance from query
        score: Cosine similarity (1 - distance, higher = more similar)
    """

    id: int
    distance: float
    score: float = field(init=False)

    def __post_init__(self):
        self.score = similarity_from_distance(self.distance)

    def __repr__(self) -> str:
        return f"SearchResult(id={self.id}, score={self.score:.7f})"


class BaseIndex(ABC):
    """
    Abstract base class for vector indices.

    Subclasses implement ``_build`` and ``search``; callers construct
    indices with the ``build`` classmethod only.

    Thread Safety:
        A built index is never mutated, so concurrent searches are safe.
    """

    def __init__(self, vectors: NDArray, **kwargs):
        # Own a private copy so the snapshot can't change under the index
        vectors = np.array(vectors, dtype=np.float32)
        if vectors.ndim != 2:
            raise ValueError(
                f"Expected a 2-D array of vectors, got {vectors.ndim} dimensions"
            )

        self._vectors = vectors
        self._vectors.setflags(write=False)
        self._norms = row_norms(vectors)
        self._dimension = vectors.shape[1]
        self._build_time = 0.0

    @classmethod
    def build(cls, vectors: NDArray, **params) -> "BaseIndex":
        """
        Build an index over ``vectors`` (n, dimension).

        Args:
            vectors: Vectors in insertion order; row i gets identifier i
            **params: Index-specific construction parameters

        Returns:
            The built index
        """
        start = time.time()
        index = cls(vectors, **params)
        index._build()
        index._build_time = time.time() - start
        return index

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def dimension(self) -> int:
        """Vector dimension."""
        return self._dimension

    @property
    def size(self) -> int:
        """Number of vectors in the index."""
        return len(self._vectors)

    @property
    def build_time(self) -> float:
        """Seconds spent building the index."""
        return self._build_time

    @property
    @abstractmethod
    def index_type(self) -> IndexType:
        """Return the index type."""
        pass

    # =========================================================================
    # ABSTRACT METHODS
    # =========================================================================

    @abstractmethod
    def _build(self) -> None:
        """Construct the search structure over ``self._vectors``."""
        pass

    @abstractmethod
    def search(
        self,
        query: NDArray,
        k: int = 10,
        ef: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Search for k nearest neighbors.

        Args:
            query: Query vector
            k: Number of results
            ef: Search budget (ignored by exact indices)

        Returns:
            List of SearchResult, most similar first
        """
        pass

    @abstractmethod
    def stats(self) -> IndexStats:
        """Get index statistics."""
        pass

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _validate_query(self, query: NDArray) -> NDArray:
        """Validate query vector shape."""
        query = as_float32(query)

        if query.ndim != 1:
            raise ValueError(
                f"Query must be 1-dimensional, got {query.ndim} dimensions"
            )

        if len(query) != self._dimension:
            raise ValueError(
                f"Query dimension {len(query)} != index dimension {self._dimension}"
            )

        return query

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(dimension={self._dimension}, "
            f"size={self.size})"
        )
