"""
Integration tests for vectordex query behavior.

Drives a database end to end: batched appends, rebuilds, queries against
both index types, and snapshot restarts.
"""

import pytest
import numpy as np
import tempfile
import shutil
from pathlib import Path

from vectordex import VectorDB
from vectordex.core.exceptions import IndexNotBuiltError


@pytest.fixture
def temp_db_path():
    """Create a temporary directory for database storage."""
    path = tempfile.mkdtemp(prefix="vectordex_query_test_")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def dataset():
    """Seeded vectors with one value per vector."""
    rng = np.random.default_rng(123)
    vectors = rng.standard_normal((400, 24)).astype(np.float32)
    values = [f"doc_{i:04d}" for i in range(len(vectors))]
    return vectors, values


def _load(db, name, vectors, values, batch_size=100):
    for start in range(0, len(vectors), batch_size):
        end = start + batch_size
        db.insert(name, vectors[start:end], values[start:end], f"batch_{start // batch_size}")


class TestEndToEnd:
    """Full append/build/query cycles."""

    def test_hnsw_agrees_with_flat(self, dataset):
        """The approximate index mostly returns the exact top-k."""
        vectors, values = dataset
        hnsw_db = VectorDB(index_params={"M": 16, "ef_construction": 100})
        flat_db = VectorDB(index_type="flat")

        for db in (hnsw_db, flat_db):
            db.create_collection("docs", dimension=vectors.shape[1])
            _load(db, "docs", vectors, values)
            db.build_index("docs")

        rng = np.random.default_rng(9)
        queries = rng.standard_normal((25, vectors.shape[1])).astype(np.float32)

        hits = 0
        for query in queries:
            approx = {value for _, value in hnsw_db.query("docs", query, k=10, ef=100)}
            exact = {value for _, value in flat_db.query("docs", query, k=10)}
            hits += len(approx & exact)

        assert hits / (10 * len(queries)) >= 0.9

    def test_appended_vectors_found_after_rebuild(self, dataset):
        """New vectors are invisible until the next build, then found."""
        vectors, values = dataset
        db = VectorDB()
        db.create_collection("docs", dimension=vectors.shape[1])
        _load(db, "docs", vectors[:200], values[:200])
        db.build_index("docs")

        _load(db, "docs", vectors[200:], values[200:])

        before = [value for _, value in db.query("docs", vectors[350], k=1)]
        db.build_index("docs")
        after = db.query("docs", vectors[350], k=1, ef=200)

        assert before != ["doc_0350"]
        assert after[0][1] == "doc_0350"
        assert after[0][0] == pytest.approx(1.0, abs=1e-5)

    def test_docs_follow_batches(self, dataset):
        """Source tags come back per vector in insertion order."""
        vectors, values = dataset
        db = VectorDB()
        db.create_collection("docs", dimension=vectors.shape[1])
        _load(db, "docs", vectors, values)

        docs = db.get_docs("docs")

        assert len(docs) == len(vectors)
        assert docs[0] == "batch_0"
        assert docs[-1] == "batch_3"
        assert docs == sorted(docs)

    def test_collections_are_independent(self, dataset):
        """Building one collection leaves another untouched."""
        vectors, values = dataset
        db = VectorDB(index_type="flat")
        db.create_collection("a", dimension=vectors.shape[1])
        db.create_collection("b", dimension=3)
        _load(db, "a", vectors[:50], values[:50])
        db.insert("b", [[1, 2, 3]], ["only"], "b.txt")

        db.build_index("a")

        assert len(db.query("a", vectors[0], k=3)) == 3
        with pytest.raises(IndexNotBuiltError):
            db.query("b", [1, 2, 3], k=1)


class TestRestart:
    """Snapshot restart behavior."""

    def test_restart_reproduces_results(self, dataset, temp_db_path):
        """A reloaded database answers exactly like the original."""
        vectors, values = dataset
        path = Path(temp_db_path) / "db.snapshot"

        with VectorDB(snapshot_path=str(path), index_params={"ef_construction": 64}) as db:
            db.create_collection("docs", dimension=vectors.shape[1])
            _load(db, "docs", vectors[:300], values[:300])
            db.build_index("docs")
            _load(db, "docs", vectors[300:], values[300:])
            expected = [db.query("docs", v, k=5) for v in vectors[:10]]

        restored = VectorDB.load(path)
        stats = restored.collection_stats("docs")

        assert stats["vector_count"] == 400
        assert stats["indexed_count"] == 300
        assert stats["is_stale"] is True
        assert [restored.query("docs", v, k=5) for v in vectors[:10]] == expected
