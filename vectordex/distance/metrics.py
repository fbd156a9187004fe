"""
Cosine distance and similarity implementations.

All arithmetic is carried out in float32, the storage precision of
vectors, so scores are reproducible to float32 tolerance.
Distance functions return smaller values for more similar vectors.
"""

from __future__ import annotations

import numpy as np
from typing import Optional
from numpy.typing import NDArray


# Type aliases
Vector = NDArray[np.float32]
VectorBatch = NDArray[np.float32]

# Norm products below this count as zero vectors
NORM_EPS = np.float32(1e-30)


def as_float32(vector) -> Vector:
    """Return ``vector`` as a float32 array without copying when possible."""
    return np.asarray(vector, dtype=np.float32)


# =============================================================================
# SINGLE VECTOR FUNCTIONS
# =============================================================================

def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Compute cosine similarity between two vectors.

    Formula: (a · b) / (||a|| * ||b||)

    A zero vector has no direction; its similarity to anything is 0.

    Returns:
        Cosine similarity in range [-1, 1] (larger = more similar)

    Example:
        >>> cosine_similarity(np.array([1.0, 0.0]), np.array([1.0, 0.0]))
        1.0
    """
    a = as_float32(a)
    b = as_float32(b)

    dot = np.dot(a, b)
    denominator = np.float32(np.linalg.norm(a)) * np.float32(np.linalg.norm(b))
    if denominator < NORM_EPS:
        return 0.0

    return float(np.float32(dot / denominator))


def cosine_distance(a: Vector, b: Vector) -> float:
    """
    Compute cosine distance between two vectors.

    Formula: 1 - cosine_similarity(a, b)

    Returns:
        Cosine distance in range [0, 2] (smaller = more similar)
    """
    return float(np.float32(1.0) - np.float32(cosine_similarity(a, b)))


def similarity_from_distance(distance: float) -> float:
    """Convert a cosine distance back into a similarity score."""
    return float(np.float32(1.0) - np.float32(distance))


# =============================================================================
# BATCH FUNCTIONS
# =============================================================================

def row_norms(vectors: VectorBatch) -> NDArray[np.float32]:
    """L2 norm of every row, in float32."""
    vectors = as_float32(vectors)
    if vectors.size == 0:
        return np.zeros(len(vectors), dtype=np.float32)
    return np.linalg.norm(vectors, axis=1).astype(np.float32)


def query_cosine_distances(
    query: Vector,
    vectors: VectorBatch,
    norms: Optional[NDArray[np.float32]] = None,
) -> NDArray[np.float32]:
    """
    Cosine distance from one query to every row of ``vectors``.

    Args:
        query: Query vector (dimension,)
        vectors: Matrix (n, dimension)
        norms: Precomputed row norms of ``vectors`` (optional)

    Returns:
        Array of n float32 distances
    """
    query = as_float32(query)
    vectors = as_float32(vectors)

    if len(vectors) == 0:
        return np.zeros(0, dtype=np.float32)

    if norms is None:
        norms = row_norms(vectors)

    dots = vectors @ query
    denominators = norms * np.float32(np.linalg.norm(query))

    similarities = np.zeros(len(vectors), dtype=np.float32)
    valid = denominators >= NORM_EPS
    similarities[valid] = dots[valid] / denominators[valid]

    return (np.float32(1.0) - similarities).astype(np.float32)
