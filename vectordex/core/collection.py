"""
Collection class for managing vectors with metadata.

A Collection is a container for vectors of the same dimension. Vectors
are only ever appended; the search index is rebuilt explicitly with
``build_index`` and is left stale by appends until then.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .vector import MetadataEntry, VectorPoint, validate_vector
from .exceptions import (
    DimensionMismatchError,
    IndexNotBuiltError,
    ValidationError,
)
from ..index import BaseIndex, HNSWConfig, IndexType, create_index
from ..utils.validation import validate_dimension, validate_k
from ..utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class CollectionStats:
    """Statistics about a collection."""

    name: str
    dimension: int
    vector_count: int
    indexed_count: Optional[int]
    index_type: str
    is_stale: bool
    memory_usage_bytes: int
    created_at: float
    updated_at: float
    index_stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "dimension": self.dimension,
            "vector_count": self.vector_count,
            "indexed_count": self.indexed_count,
            "index_type": self.index_type,
            "is_stale": self.is_stale,
            "memory_usage_bytes": self.memory_usage_bytes,
            "memory_usage_mb": round(self.memory_usage_bytes / (1024 * 1024), 2),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "index_stats": self.index_stats,
        }


class Collection:
    """
    A named, fixed-dimension bucket of vectors, their metadata and its
    own search index.

    Collections are owned by a VectorDB, which validates input before
    handing it over.

    Example:
        >>> collection = Collection("docs", dimension=3)
        >>> points = collection.validate_batch([[10, 12, 4.5]], ["red"])
        >>> collection.append(points, ["red"], "colors.txt")
        >>> collection.build_index()
        >>> collection.query([10, 12.5, 4.5], k=1)
        [(0.9997943..., 'red')]

    Thread Safety:
        Appends and index swaps take the collection lock. The index is
        built outside the lock from a snapshot of the points, so queries
        keep using the previous index while a rebuild runs.
    """

    def __init__(
        self,
        name: str,
        dimension: int,
        index_type: str = IndexType.HNSW.value,
        index_params: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a collection.

        Args:
            name: Collection name
            dimension: Vector dimension (positive integer)
            index_type: Index strategy ("hnsw" or "flat")
            index_params: Construction parameters for the index
        """
        self._name = name
        self._dimension = validate_dimension(dimension)
        try:
            self._index_type = IndexType(index_type.lower())
        except ValueError:
            raise ValidationError(f"Unknown index type: {index_type}")

        self._index_params = dict(index_params or {})
        if self._index_type == IndexType.HNSW:
            try:
                HNSWConfig(**self._index_params)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid HNSW parameters: {e}")

        self._points: List[VectorPoint] = []
        self._metadata: List[MetadataEntry] = []

        self._index: Optional[BaseIndex] = None
        self._indexed_count: Optional[int] = None

        self._lock = threading.RLock()

        self._created_at = time.time()
        self._updated_at = self._created_at

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def index_type(self) -> str:
        return self._index_type.value

    @property
    def index_params(self) -> Dict[str, Any]:
        return dict(self._index_params)

    @property
    def has_index(self) -> bool:
        """Whether an index has been built at least once."""
        return self._index is not None

    @property
    def indexed_count(self) -> Optional[int]:
        """Number of points covered by the current index (None if unbuilt)."""
        return self._indexed_count

    @property
    def is_stale(self) -> bool:
        """Whether points were appended since the last build."""
        return self._indexed_count is not None and self._indexed_count < len(self)

    @property
    def points(self) -> Tuple[VectorPoint, ...]:
        with self._lock:
            return tuple(self._points)

    @property
    def metadata(self) -> Tuple[MetadataEntry, ...]:
        with self._lock:
            return tuple(self._metadata)

    # =========================================================================
    # APPEND
    # =========================================================================

    def validate_batch(
        self,
        vectors: Sequence[Any],
        values: Sequence[str],
    ) -> List[VectorPoint]:
        """
        Validate a batch of vectors and values without touching state.

        Returns:
            The vectors as VectorPoints

        Raises:
            DimensionMismatchError: If counts differ or a vector has the
                wrong length
            ValidationError: If a vector is not numeric/finite or a value
                is not a string
        """
        if isinstance(values, str):
            raise ValidationError(
                "Values must be a sequence of strings, not a string"
            )

        if len(vectors) != len(values):
            raise DimensionMismatchError(
                f"Number of vectors ({len(vectors)}) != "
                f"number of values ({len(values)})"
            )

        for i, value in enumerate(values):
            if not isinstance(value, str):
                raise ValidationError(
                    f"Value at position {i} must be a string, "
                    f"got {type(value).__name__}"
                )

        points = []
        for i, vector in enumerate(vectors):
            try:
                points.append(VectorPoint(validate_vector(vector, self._dimension)))
            except DimensionMismatchError as e:
                raise DimensionMismatchError(f"Vector at position {i}: {e}")

        return points

    def append(
        self,
        points: Sequence[VectorPoint],
        values: Sequence[str],
        tag: str,
    ) -> int:
        """
        Append validated points and their values, in order.

        Does not touch the index.

        Args:
            points: Points returned by ``validate_batch``
            values: One value per point
            tag: Source tag recorded for every point in the batch

        Returns:
            Number of points appended
        """
        entries = [MetadataEntry(value=value, source=tag) for value in values]

        with self._lock:
            self._points.extend(points)
            self._metadata.extend(entries)
            self._updated_at = time.time()

        return len(entries)

    # =========================================================================
    # INDEX
    # =========================================================================

    def _matrix(self, points: Sequence[VectorPoint]) -> NDArray:
        if not points:
            return np.zeros((0, self._dimension), dtype=np.float32)
        return np.stack([p.values for p in points])

    def _build_from(self, points: Sequence[VectorPoint]) -> BaseIndex:
        return create_index(
            self._index_type,
            self._matrix(points),
            **self._index_params,
        )

    def build_index(self) -> None:
        """
        Rebuild the index from every point currently stored.

        The new index replaces the old one in a single reference swap.
        """
        with self._lock:
            snapshot = list(self._points)

        index = self._build_from(snapshot)

        with self._lock:
            # A slower concurrent build over an older snapshot must not
            # replace a newer index
            if self._indexed_count is not None and self._indexed_count > len(snapshot):
                logger.debug(
                    f"Discarded index over {len(snapshot)} points for "
                    f"'{self._name}'; a newer one is installed"
                )
                return

            self._index = index
            self._indexed_count = len(snapshot)
            self._updated_at = time.time()

        logger.info(
            f"Built {self._index_type.value} index for '{self._name}' "
            f"over {len(snapshot)} points ({index.build_time:.3f}s)"
        )

    # =========================================================================
    # QUERY
    # =========================================================================

    def query(
        self,
        vector: Any,
        k: int,
        ef: Optional[int] = None,
    ) -> List[Tuple[float, str]]:
        """
        Find the k stored values most similar to ``vector``.

        Args:
            vector: Query vector of the collection's dimension
            k: Maximum number of results
            ef: Search budget override for approximate indices

        Returns:
            (score, value) pairs by non-increasing cosine similarity;
            equal scores keep insertion order

        Raises:
            IndexNotBuiltError: If build_index was never called
        """
        query = validate_vector(vector, self._dimension)
        k = validate_k(k)

        index = self._index
        if index is None:
            raise IndexNotBuiltError(
                f"Collection '{self._name}' has no index; call build_index first"
            )

        results = sorted(
            index.search(query, k=k, ef=ef),
            key=lambda r: (-r.score, r.id),
        )

        # Index ids are positions in an older-or-equal prefix of metadata
        metadata = self._metadata
        return [(r.score, metadata[r.id].value) for r in results]

    def get_docs(self) -> List[str]:
        """Source tag of every stored vector, in insertion order."""
        with self._lock:
            return [entry.source for entry in self._metadata]

    def values(self) -> List[str]:
        """Value of every stored vector, in insertion order."""
        with self._lock:
            return [entry.value for entry in self._metadata]

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def stats(self) -> CollectionStats:
        """Get collection statistics."""
        with self._lock:
            count = len(self._points)
            index = self._index

            vector_memory = count * self._dimension * 4
            metadata_memory = sum(
                len(entry.value) + len(entry.source) for entry in self._metadata
            )

            return CollectionStats(
                name=self._name,
                dimension=self._dimension,
                vector_count=count,
                indexed_count=self._indexed_count,
                index_type=self._index_type.value,
                is_stale=self.is_stale,
                memory_usage_bytes=vector_memory + metadata_memory,
                created_at=self._created_at,
                updated_at=self._updated_at,
                index_stats=index.stats().to_dict() if index else {},
            )

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the collection.

        Points are stored as raw float32 bytes in insertion order. The
        index itself is not stored; ``indexed_count`` records how many
        points it covered.
        """
        with self._lock:
            return {
                "name": self._name,
                "dimension": self._dimension,
                "index_type": self._index_type.value,
                "index_params": dict(self._index_params),
                "points": self._matrix(self._points).tobytes(),
                "values": [entry.value for entry in self._metadata],
                "sources": [entry.source for entry in self._metadata],
                "indexed_count": self._indexed_count,
                "created_at": self._created_at,
                "updated_at": self._updated_at,
            }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Collection":
        """
        Restore a collection serialized with ``to_dict``.

        A collection that had an index gets it rebuilt over the same
        prefix of points, which reproduces the same index and the same
        staleness.
        """
        collection = cls(
            name=data["name"],
            dimension=data["dimension"],
            index_type=data.get("index_type", IndexType.HNSW.value),
            index_params=data.get("index_params"),
        )

        matrix = np.frombuffer(data["points"], dtype=np.float32)
        matrix = matrix.reshape(-1, collection.dimension)
        values = list(data["values"])
        sources = list(data["sources"])

        if not len(matrix) == len(values) == len(sources):
            raise ValueError(
                f"Collection '{collection.name}' has {len(matrix)} points, "
                f"{len(values)} values and {len(sources)} sources"
            )

        collection._points = [VectorPoint(row) for row in matrix]
        collection._metadata = [
            MetadataEntry(value=value, source=source)
            for value, source in zip(values, sources)
        ]

        indexed_count = data.get("indexed_count")
        if indexed_count is not None:
            if (
                isinstance(indexed_count, bool)
                or not isinstance(indexed_count, int)
                or not 0 <= indexed_count <= len(collection._points)
            ):
                raise ValueError(
                    f"Collection '{collection.name}' has indexed_count "
                    f"{indexed_count!r} for {len(collection._points)} points"
                )

            collection._index = collection._build_from(
                collection._points[:indexed_count]
            )
            collection._indexed_count = indexed_count

        collection._created_at = data.get("created_at", collection._created_at)
        collection._updated_at = data.get("updated_at", collection._updated_at)

        return collection

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return (
            f"Collection(name='{self._name}', dimension={self._dimension}, "
            f"count={len(self)}, index_type='{self._index_type.value}')"
        )
