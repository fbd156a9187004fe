"""
Pytest fixtures for vectordex tests.
"""

import pytest
import numpy as np
import tempfile
import shutil

from vectordex import VectorDB


COLOR_VECTORS = [[10, 12, 4.5], [10, 11, 10.5], [10, 20.5, 15]]
COLOR_VALUES = ["red", "green", "blue"]


@pytest.fixture
def dimension() -> int:
    """Default dimension for random test vectors."""
    return 16


@pytest.fixture
def random_vectors(dimension: int) -> np.ndarray:
    """Generate seeded random vectors (300 vectors)."""
    rng = np.random.default_rng(42)
    return rng.standard_normal((300, dimension)).astype(np.float32)


@pytest.fixture
def random_queries(dimension: int) -> np.ndarray:
    """Generate seeded random query vectors (20 vectors)."""
    rng = np.random.default_rng(7)
    return rng.standard_normal((20, dimension)).astype(np.float32)


@pytest.fixture
def temp_dir():
    """Create temporary directory."""
    path = tempfile.mkdtemp(prefix="vectordex_test_")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def db() -> VectorDB:
    """Empty in-memory database."""
    return VectorDB()


@pytest.fixture
def colors_db(db: VectorDB) -> VectorDB:
    """Database with an indexed 3-d "test" collection of colors."""
    db.create_collection("test", dimension=3)
    db.insert("test", COLOR_VECTORS, COLOR_VALUES, "colors.txt")
    db.build_index("test")
    return db
