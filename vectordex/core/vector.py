"""
Vector point and metadata entry definitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .exceptions import DimensionMismatchError, ValidationError


def validate_vector(vector: Any, dimension: Optional[int] = None) -> NDArray:
    """
    Convert ``vector`` to a 1-D float32 array and check it.

    Args:
        vector: Sequence of numbers or numpy array
        dimension: Expected length (optional)

    Returns:
        float32 array

    Raises:
        ValidationError: If the vector is not numeric or has NaN/Inf values
        DimensionMismatchError: If the vector is not 1-D or has the wrong length
    """
    try:
        array = np.asarray(vector, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Vector must be a sequence of numbers: {e}")

    if array.ndim != 1:
        raise DimensionMismatchError(
            f"Vector must be 1-dimensional, got {array.ndim} dimensions"
        )

    if dimension is not None and len(array) != dimension:
        raise DimensionMismatchError(
            f"Vector dimension {len(array)} doesn't match "
            f"collection dimension {dimension}"
        )

    if not np.isfinite(array).all():
        raise ValidationError("Vector contains NaN or Inf values")

    return array


@dataclass(frozen=True, eq=False)
class VectorPoint:
    """
    A fixed-length float32 vector.

    The underlying array is a private read-only copy, so a point can't be
    changed after it is created.

    Example:
        >>> point = VectorPoint.from_sequence([10, 12, 4.5], dimension=3)
        >>> point.dimension
        3
    """

    values: NDArray[np.float32]

    def __post_init__(self):
        array = np.array(self.values, dtype=np.float32)
        array.setflags(write=False)
        object.__setattr__(self, "values", array)

    @classmethod
    def from_sequence(
        cls,
        values: Sequence[float],
        dimension: Optional[int] = None,
    ) -> "VectorPoint":
        """Validate ``values`` and wrap them in a VectorPoint."""
        return cls(validate_vector(values, dimension))

    @property
    def dimension(self) -> int:
        return len(self.values)

    def to_list(self) -> list:
        return self.values.tolist()

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VectorPoint):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    def __hash__(self) -> int:
        return hash(self.values.tobytes())

    def __repr__(self) -> str:
        return f"VectorPoint({self.values.tolist()})"


@dataclass(frozen=True)
class MetadataEntry:
    """
    The value stored with a vector and the source it came from.

    Attributes:
        value: Opaque string returned by queries
        source: Tag of the document or file the vector was inserted from
    """

    value: str
    source: str
