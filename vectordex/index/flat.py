"""
Flat (Brute-Force) Index Implementation.

The Flat index performs exact nearest neighbor search by computing the
cosine distance to every vector. It provides 100% recall but has O(n)
search complexity.

Best for:
    - Small collections
    - When exact results are required
    - As a baseline for measuring HNSW recall
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from .base import BaseIndex, IndexStats, IndexType, SearchResult
from ..distance import query_cosine_distances


class FlatIndex(BaseIndex):
    """
    Flat (Brute-Force) Index.

    Example:
        >>> index = FlatIndex.build(vectors)
        >>> results = index.search(query, k=10)
        >>> for r in results:
        ...     print(f"{r.id}: {r.score:.4f}")
    """

    @property
    def index_type(self) -> IndexType:
        return IndexType.FLAT

    def _build(self) -> None:
        # The matrix and its norms are all a flat scan needs
        pass

    def search(
        self,
        query: NDArray,
        k: int = 10,
        ef: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Exact k-NN search.

        Ties are broken by identifier, so equal scores come back in
        insertion order.
        """
        if self.size == 0 or k < 1:
            return []

        query = self._validate_query(query)
        distances = query_cosine_distances(query, self._vectors, self._norms)

        # Stable sort keeps lower ids first among equal distances
        order = np.argsort(distances, kind="stable")[:k]

        return [
            SearchResult(id=int(i), distance=float(distances[i]))
            for i in order
        ]

    def stats(self) -> IndexStats:
        """Get index statistics."""
        return IndexStats(
            index_type=self.index_type.value,
            dimension=self._dimension,
            vector_count=self.size,
            memory_bytes=int(self._vectors.nbytes + self._norms.nbytes),
            build_time_seconds=self._build_time,
        )
