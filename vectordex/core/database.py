"""
VectorDB - Main database class managing multiple collections.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .collection import Collection
from .exceptions import (
    CollectionExistsError,
    CollectionNotFoundError,
    SerializationError,
    StorageError,
    ValidationError,
)
from ..index import IndexType
from ..storage import read_snapshot, write_snapshot
from ..utils.validation import validate_dimension, validate_name
from ..utils.logging import get_logger


logger = get_logger(__name__)


class VectorDB:
    """
    Main database class for vectordex.

    Owns the name -> Collection mapping and routes every operation to
    the right collection. Instances are constructed explicitly by the
    host and passed to whatever needs them.

    Example:
        >>> db = VectorDB()
        >>> db.create_collection("test", dimension=3)
        >>> db.insert(
        ...     "test",
        ...     [[10, 12, 4.5], [10, 11, 10.5], [10, 20.5, 15]],
        ...     ["red", "green", "blue"],
        ...     "colors.txt",
        ... )
        3
        >>> db.build_index("test")
        >>> db.query("test", [10, 12.5, 4.5], k=1)
        [(0.9997943..., 'red')]

    Thread Safety:
        The collection map is guarded by a lock; each collection guards
        its own points and index. ``build_index`` holds a lock only to
        snapshot the points and to swap the finished index in.
    """

    VERSION = "0.1.0"

    def __init__(
        self,
        index_type: str = IndexType.HNSW.value,
        index_params: Optional[Dict[str, Any]] = None,
        snapshot_path: Optional[str] = None,
    ):
        """
        Initialize VectorDB.

        Args:
            index_type: Index strategy for new collections ("hnsw" or "flat")
            index_params: Index construction parameters for new collections
            snapshot_path: Default file for ``save``/``load`` (None = in-memory only)
        """
        self._collections: Dict[str, Collection] = {}
        self._index_type = index_type
        self._index_params = dict(index_params or {})
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._lock = threading.RLock()

        self._created_at = time.time()
        self._updated_at = self._created_at

        logger.debug(
            f"VectorDB initialized (index_type={index_type}, "
            f"snapshot_path={self._snapshot_path})"
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "VectorDB":
        """
        Create a VectorDB from a ``config.Settings`` object.

        Index parameters come from ``settings.index_params()`` and the
        default snapshot file from ``settings.storage_config``.
        """
        return cls(
            index_type=settings.index_type,
            index_params=settings.index_params(),
            snapshot_path=settings.storage_config.snapshot_path,
        )

    @property
    def snapshot_path(self) -> Optional[Path]:
        """Default snapshot file for save (None = in-memory only)."""
        return self._snapshot_path

    # =========================================================================
    # COLLECTION MANAGEMENT
    # =========================================================================

    def create_collection(self, name: str, dimension: int) -> None:
        """
        Create a new, empty collection.

        Args:
            name: Collection name
            dimension: Vector dimension (positive integer)

        Raises:
            CollectionExistsError: If the name is taken
            InvalidDimensionError: If dimension is not a positive integer
            ValidationError: If the name is invalid
        """
        name = validate_name(name)
        dimension = validate_dimension(dimension)

        with self._lock:
            if name in self._collections:
                raise CollectionExistsError(f"Collection '{name}' already exists")

            self._collections[name] = Collection(
                name=name,
                dimension=dimension,
                index_type=self._index_type,
                index_params=self._index_params,
            )
            self._updated_at = time.time()

        logger.info(f"Created collection '{name}' with dimension {dimension}")

    def _get_collection(self, name: str) -> Collection:
        with self._lock:
            try:
                return self._collections[name]
            except KeyError:
                raise CollectionNotFoundError(f"Collection '{name}' not found")

    def delete_collection(self, name: str) -> None:
        """
        Delete a collection with all its vectors and its index.

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
        """
        with self._lock:
            if name not in self._collections:
                raise CollectionNotFoundError(f"Collection '{name}' not found")

            del self._collections[name]
            self._updated_at = time.time()

        logger.info(f"Deleted collection '{name}'")

    def list_collections(self) -> List[str]:
        """List all collection names."""
        with self._lock:
            return list(self._collections.keys())

    def has_collection(self, name: str) -> bool:
        """Check if collection exists."""
        return name in self._collections

    def collection_stats(self, name: str) -> Dict[str, Any]:
        """
        Get statistics for a collection.

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
        """
        return self._get_collection(name).stats().to_dict()

    # =========================================================================
    # VECTOR OPERATIONS
    # =========================================================================

    def append(
        self,
        name: str,
        vectors: Sequence[Sequence[float]],
        values: Sequence[str],
        source_tag: str,
    ) -> int:
        """
        Append vectors and their values to a collection.

        The whole batch is validated before anything is stored, so a
        failing call leaves the collection untouched. The index is not
        rebuilt; call ``build_index`` to make the new vectors searchable.

        Args:
            name: Collection name
            vectors: Vectors of the collection's dimension
            values: One value per vector
            source_tag: Source recorded for every vector of the batch

        Returns:
            Number of vectors appended

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
            DimensionMismatchError: If counts differ or a vector has the
                wrong length
            ValidationError: If a vector is not numeric/finite
        """
        collection = self._get_collection(name)

        if not isinstance(source_tag, str):
            raise ValidationError(
                f"Source tag must be a string, got {type(source_tag).__name__}"
            )

        points = collection.validate_batch(vectors, values)
        count = collection.append(points, values, source_tag)

        logger.debug(
            f"Inserted {count} vectors into collection '{name}' "
            f"from '{source_tag}'"
        )
        return count

    insert = append

    def build_index(self, name: str) -> None:
        """
        Rebuild a collection's index from all its current vectors.

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
        """
        self._get_collection(name).build_index()

    def query(
        self,
        name: str,
        vector: Sequence[float],
        k: int,
        ef: Optional[int] = None,
    ) -> List[Tuple[float, str]]:
        """
        Query a collection for the k most similar values.

        Args:
            name: Collection name
            vector: Query vector
            k: Maximum number of results
            ef: Search budget override for HNSW

        Returns:
            (score, value) pairs, most similar first

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
            DimensionMismatchError: If the vector has the wrong length
            IndexNotBuiltError: If the collection was never indexed
            ValidationError: If k is not a positive integer
        """
        collection = self._get_collection(name)
        results = collection.query(vector, k, ef=ef)

        logger.debug(
            f"Query on collection '{name}' returned {len(results)} results"
        )
        return results

    def get_docs(self, name: str) -> List[str]:
        """
        Source tag of every vector in a collection, in insertion order.

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
        """
        return self._get_collection(name).get_docs()

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _resolve_path(self, path: Optional[Union[str, Path]]) -> Path:
        resolved = Path(path) if path else self._snapshot_path
        if resolved is None:
            raise StorageError(
                "No snapshot path specified and no snapshot_path configured"
            )
        return resolved

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write every collection to a snapshot file.

        Args:
            path: Snapshot file (uses snapshot_path if not specified)

        Returns:
            The path written

        Raises:
            StorageError: If no path is known or the write fails
        """
        path = self._resolve_path(path)

        with self._lock:
            collections = [c.to_dict() for c in self._collections.values()]

        size = write_snapshot(path, collections)

        logger.info(
            f"Saved snapshot to {path} "
            f"({len(collections)} collections, {size} bytes)"
        )
        return path

    @classmethod
    def load(cls, path: Union[str, Path], **kwargs) -> "VectorDB":
        """
        Restore a database from a snapshot file.

        Collections that had an index get it rebuilt over the same points
        it covered when the snapshot was taken.

        Args:
            path: Snapshot file
            **kwargs: Additional arguments for the VectorDB constructor

        Raises:
            StorageError: If the file can't be read
            SerializationError: If the file is not a valid snapshot
        """
        kwargs.setdefault("snapshot_path", str(path))
        db = cls(**kwargs)

        for data in read_snapshot(path):
            try:
                collection = Collection.from_dict(data)
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise SerializationError(f"Invalid collection in snapshot: {e}")
            db._collections[collection.name] = collection

        logger.info(
            f"Loaded snapshot from {path} ({len(db._collections)} collections)"
        )
        return db

    # =========================================================================
    # DATABASE INFO
    # =========================================================================

    def info(self) -> Dict[str, Any]:
        """Get database information."""
        with self._lock:
            return {
                "version": self.VERSION,
                "index_type": self._index_type,
                "snapshot_path": str(self._snapshot_path) if self._snapshot_path else None,
                "collection_count": len(self._collections),
                "total_vectors": sum(len(c) for c in self._collections.values()),
                "created_at": self._created_at,
                "updated_at": self._updated_at,
                "collections": {
                    name: collection.stats().to_dict()
                    for name, collection in self._collections.items()
                },
            }

    def __repr__(self) -> str:
        return f"VectorDB(collections={len(self._collections)})"

    # =========================================================================
    # CONTEXT MANAGER & CLEANUP
    # =========================================================================

    def close(self) -> None:
        """Close the database, saving a snapshot if snapshot_path is set."""
        if self._snapshot_path:
            self.save()
        logger.info("VectorDB closed")

    def __enter__(self) -> "VectorDB":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __contains__(self, name: str) -> bool:
        return self.has_collection(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_collections())

    def __len__(self) -> int:
        return len(self._collections)
