"""
Distance metrics for vector similarity search.

vectordex ranks by cosine similarity only, computed at float32
precision.

Example:
    >>> from vectordex.distance import cosine_similarity
    >>> import numpy as np
    >>>
    >>> cosine_similarity(np.array([10, 12.5, 4.5]), np.array([10, 12, 4.5]))
    0.9997943...
"""

from .metrics import (
    NORM_EPS,
    as_float32,
    cosine_similarity,
    cosine_distance,
    similarity_from_distance,
    row_norms,
    query_cosine_distances,
)

__all__ = [
    "NORM_EPS",
    "as_float32",
    "cosine_similarity",
    "cosine_distance",
    "similarity_from_distance",
    "row_norms",
    "query_cosine_distances",
]
