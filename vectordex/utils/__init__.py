"""
Utility functions for vectordex.
"""

from .validation import (
    validate_name,
    validate_dimension,
    validate_k,
)
from .logging import setup_logger, get_logger

__all__ = [
    "validate_name",
    "validate_dimension",
    "validate_k",
    "setup_logger",
    "get_logger",
]
