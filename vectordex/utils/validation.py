"""
Input validation utilities.
"""

from numbers import Integral
from typing import Any, Optional

from ..core.exceptions import ValidationError, InvalidDimensionError


# Maximum limits
MAX_NAME_LENGTH = 256
MAX_DIMENSION = 65536


def validate_name(name: Any) -> str:
    """
    Validate a collection name.

    Any non-empty printable string up to MAX_NAME_LENGTH characters is a
    valid name.

    Args:
        name: The name to validate

    Returns:
        The validated name

    Raises:
        ValidationError: If name is invalid
    """
    if not isinstance(name, str):
        raise ValidationError(
            f"Collection name must be a string, got {type(name).__name__}"
        )

    if not name:
        raise ValidationError("Collection name cannot be empty")

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Collection name too long: {len(name)} characters "
            f"(max {MAX_NAME_LENGTH})"
        )

    if not name.isprintable():
        raise ValidationError(
            f"Invalid collection name {name!r}: control characters are not allowed"
        )

    return name


def validate_dimension(dimension: Any, max_dim: int = MAX_DIMENSION) -> int:
    """
    Validate a collection dimension.

    Args:
        dimension: The dimension to validate
        max_dim: Maximum allowed dimension

    Returns:
        The validated dimension

    Raises:
        InvalidDimensionError: If dimension is not a positive integer
    """
    # bool is an int subclass; True is not a dimension
    if isinstance(dimension, bool) or not isinstance(dimension, int):
        raise InvalidDimensionError(
            f"Dimension must be an integer, got {type(dimension).__name__}"
        )

    if dimension < 1:
        raise InvalidDimensionError(
            f"Dimension must be >= 1, got {dimension}"
        )

    if dimension > max_dim:
        raise InvalidDimensionError(
            f"Dimension too large: {dimension} (max {max_dim})"
        )

    return dimension


def validate_k(k: Any, max_k: Optional[int] = None) -> int:
    """
    Validate k (number of results).

    Numpy integers are accepted. There is no upper bound unless
    ``max_k`` is given; a k above the number of points simply returns
    every point.

    Returns:
        k as a plain int

    Raises:
        ValidationError: If k is not an integer >= 1 (or exceeds max_k)
    """
    if isinstance(k, bool) or not isinstance(k, Integral):
        raise ValidationError(f"k must be an integer, got {type(k).__name__}")

    k = int(k)

    if k < 1:
        raise ValidationError(f"k must be at least 1, got {k}")

    if max_k is not None and k > max_k:
        raise ValidationError(f"k too large: {k} (max {max_k})")

    return k
