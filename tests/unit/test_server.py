"""
Tests for vectordex REST API server.
"""

import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from vectordex import VectorDB
from vectordex.server.app import create_app, status_code_for
from vectordex.server.config import ServerConfig
from vectordex.core.exceptions import (
    CollectionExistsError,
    CollectionNotFoundError,
    DimensionMismatchError,
    IndexNotBuiltError,
    InvalidDimensionError,
    StorageError,
    ValidationError,
)


COLORS = {
    "vectors": [[10, 12, 4.5], [10, 11, 10.5], [10, 20.5, 15]],
    "values": ["red", "green", "blue"],
    "source_tag": "colors.txt",
}


@pytest.fixture
def database():
    """Database injected into the app."""
    return VectorDB()


@pytest.fixture
def client(database):
    """Create test client."""
    config = ServerConfig(docs_enabled=True, api_key=None)
    app = create_app(config, database=database)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def colors(client):
    """Client with an indexed "test" collection."""
    client.post("/api/v1/collections", json={"name": "test", "dimension": 3})
    client.post("/api/v1/collections/test/vectors", json=COLORS)
    client.post("/api/v1/collections/test/index")
    return client


class TestErrorMapping:
    """Error kind to status code."""

    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (CollectionNotFoundError("x"), 404),
            (CollectionExistsError("x"), 409),
            (IndexNotBuiltError("x"), 409),
            (DimensionMismatchError("x"), 400),
            (ValidationError("x"), 400),
            (InvalidDimensionError("x"), 400),
            (StorageError("x"), 500),
        ],
    )
    def test_status_code_for(self, exc, status_code):
        assert status_code_for(exc) == status_code


class TestHealthEndpoint:
    """Health endpoint tests."""

    def test_health(self, client):
        """Test health check."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["collection_count"] == 0
        assert "version" in data
        assert "X-Response-Time" in response.headers

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["api"] == "/api/v1"

    def test_info(self, colors):
        response = colors.get("/api/v1/info")

        assert response.status_code == 200
        assert response.json()["total_vectors"] == 3


class TestCollectionEndpoints:
    """Collection endpoint tests."""

    def test_create_collection(self, client, database):
        """Test creating a collection."""
        response = client.post(
            "/api/v1/collections",
            json={"name": "test_collection", "dimension": 128},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "test_collection"
        assert data["dimension"] == 128
        assert data["vector_count"] == 0
        assert "test_collection" in database

    def test_create_duplicate_collection(self, client):
        """Test creating duplicate collection."""
        client.post("/api/v1/collections", json={"name": "test", "dimension": 64})

        response = client.post(
            "/api/v1/collections", json={"name": "test", "dimension": 64}
        )

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "Collection 'test' already exists",
            "code": "ALREADY_EXISTS",
        }

    def test_create_zero_dimension(self, client):
        """Dimension 0 is rejected with its own code."""
        response = client.post(
            "/api/v1/collections", json={"name": "test", "dimension": 0}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DIMENSION"

    def test_create_invalid_name(self, client):
        response = client.post(
            "/api/v1/collections", json={"name": "", "dimension": 3}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_list_collections(self, client):
        """Test listing collections."""
        client.post("/api/v1/collections", json={"name": "a", "dimension": 3})
        client.post("/api/v1/collections", json={"name": "b", "dimension": 3})

        response = client.get("/api/v1/collections")

        assert response.status_code == 200
        data = response.json()
        assert set(data["collections"]) == {"a", "b"}
        assert data["total"] == 2

    def test_get_collection(self, colors):
        response = colors.get("/api/v1/collections/test")

        assert response.status_code == 200
        data = response.json()
        assert data["vector_count"] == 3
        assert data["indexed_count"] == 3
        assert data["is_stale"] is False

    def test_get_collection_not_found(self, client):
        response = client.get("/api/v1/collections/nonexistent")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_delete_collection(self, colors):
        """Test deleting a collection."""
        response = colors.delete("/api/v1/collections/test")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert colors.get("/api/v1/collections/test").status_code == 404

    def test_delete_not_found(self, client):
        response = client.delete("/api/v1/collections/nonexistent")

        assert response.status_code == 404


class TestVectorEndpoints:
    """Append and docs endpoint tests."""

    def test_insert(self, client):
        client.post("/api/v1/collections", json={"name": "test", "dimension": 3})

        response = client.post("/api/v1/collections/test/vectors", json=COLORS)

        assert response.status_code == 201
        data = response.json()
        assert data["inserted"] == 3
        assert data["vector_count"] == 3
        assert data["is_stale"] is False

    def test_insert_marks_stale(self, colors):
        response = colors.post(
            "/api/v1/collections/test/vectors",
            json={"vectors": [[10, 30, 40.5]], "values": ["happy"]},
        )

        assert response.json()["is_stale"] is True

    def test_insert_wrong_dimension(self, colors):
        response = colors.post(
            "/api/v1/collections/test/vectors",
            json={"vectors": [[1, 2]], "values": ["short"]},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "DIMENSION_MISMATCH"
        assert colors.get("/api/v1/collections/test").json()["vector_count"] == 3

    def test_insert_count_mismatch(self, colors):
        response = colors.post(
            "/api/v1/collections/test/vectors",
            json={"vectors": [[1, 2, 3]], "values": []},
        )

        assert response.status_code == 400

    def test_insert_not_found(self, client):
        response = client.post("/api/v1/collections/missing/vectors", json=COLORS)

        assert response.status_code == 404

    def test_insert_too_many(self, database):
        config = ServerConfig(max_vectors_per_request=2)
        database.create_collection("test", dimension=3)

        with TestClient(create_app(config, database=database)) as client:
            response = client.post("/api/v1/collections/test/vectors", json=COLORS)

        assert response.status_code == 400
        assert len(database.get_docs("test")) == 0

    def test_get_docs(self, colors):
        response = colors.get("/api/v1/collections/test/docs")

        assert response.status_code == 200
        assert response.json() == {"docs": ["colors.txt"] * 3, "total": 3}


class TestSearchEndpoints:
    """Index and query endpoint tests."""

    def test_build_index(self, client):
        client.post("/api/v1/collections", json={"name": "test", "dimension": 3})
        client.post("/api/v1/collections/test/vectors", json=COLORS)

        response = client.post("/api/v1/collections/test/index")

        assert response.status_code == 200
        assert response.json()["indexed_count"] == 3

    def test_build_index_not_found(self, client):
        assert client.post("/api/v1/collections/missing/index").status_code == 404

    def test_query(self, colors):
        """Test the single-build scenario over HTTP."""
        response = colors.post(
            "/api/v1/collections/test/query",
            json={"vector": [10, 12.5, 4.5], "k": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["results"][0]["value"] == "red"
        assert data["results"][0]["score"] == pytest.approx(0.9997943, abs=1e-6)

    def test_query_after_rebuild(self, colors):
        """Test the append-and-rebuild scenario over HTTP."""
        colors.post(
            "/api/v1/collections/test/vectors",
            json={
                "vectors": [[10, 12, 16.5], [10, 30, 40.5]],
                "values": ["yellow", "happy"],
                "source_tag": "more.txt",
            },
        )
        colors.post("/api/v1/collections/test/index")

        response = colors.post(
            "/api/v1/collections/test/query",
            json={"vector": [10, 30.5, 35.5], "k": 1},
        )

        result = response.json()["results"][0]
        assert result["value"] == "happy"
        assert result["score"] == pytest.approx(0.9973914, abs=1e-6)

    def test_query_before_build(self, client):
        client.post("/api/v1/collections", json={"name": "test", "dimension": 3})
        client.post("/api/v1/collections/test/vectors", json=COLORS)

        response = client.post(
            "/api/v1/collections/test/query", json={"vector": [1, 2, 3], "k": 1}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INDEX_NOT_BUILT"

    def test_query_wrong_dimension(self, colors):
        response = colors.post(
            "/api/v1/collections/test/query", json={"vector": [1, 2], "k": 1}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "DIMENSION_MISMATCH"

    def test_query_invalid_k(self, colors):
        response = colors.post(
            "/api/v1/collections/test/query", json={"vector": [1, 2, 3], "k": 0}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_query_not_found(self, client):
        response = client.post(
            "/api/v1/collections/missing/query", json={"vector": [1, 2, 3]}
        )

        assert response.status_code == 404


class TestAuthentication:
    """API key tests."""

    @pytest.fixture
    def secured(self):
        config = ServerConfig(api_key="secret")

        with TestClient(create_app(config, database=VectorDB())) as client:
            yield client

    def test_missing_key(self, secured):
        response = secured.post(
            "/api/v1/collections", json={"name": "test", "dimension": 3}
        )

        assert response.status_code == 401

    def test_wrong_key(self, secured):
        response = secured.post(
            "/api/v1/collections",
            json={"name": "test", "dimension": 3},
            headers={"X-API-Key": "wrong"},
        )

        assert response.status_code == 403

    def test_valid_key(self, secured):
        response = secured.post(
            "/api/v1/collections",
            json={"name": "test", "dimension": 3},
            headers={"X-API-Key": "secret"},
        )

        assert response.status_code == 201

    def test_reads_are_open(self, secured):
        assert secured.get("/api/v1/collections").status_code == 200


class TestSnapshotLifecycle:
    """The app owns a database opened from its snapshot."""

    def test_save_endpoint_without_path(self, client):
        response = client.post("/api/v1/save")

        assert response.status_code == 500
        assert response.json()["code"] == "STORAGE_ERROR"

    def test_restart_restores(self, temp_dir):
        """Data written before shutdown is served after restart."""
        config = ServerConfig(
            snapshot_path=str(Path(temp_dir) / "db.snapshot"),
            config_path=str(Path(temp_dir) / "missing.yaml"),
        )

        with TestClient(create_app(config)) as client:
            client.post("/api/v1/collections", json={"name": "test", "dimension": 3})
            client.post("/api/v1/collections/test/vectors", json=COLORS)
            client.post("/api/v1/collections/test/index")

        assert Path(config.snapshot_path).exists()

        with TestClient(create_app(config)) as client:
            response = client.post(
                "/api/v1/collections/test/query",
                json={"vector": [10, 12.5, 4.5], "k": 1},
            )
            docs = client.get("/api/v1/collections/test/docs").json()["docs"]

        assert response.status_code == 200
        assert response.json()["results"][0]["value"] == "red"
        assert docs == ["colors.txt"] * 3

    def test_save_endpoint(self, temp_dir):
        config = ServerConfig(
            snapshot_path=str(Path(temp_dir) / "db.snapshot"),
            config_path=str(Path(temp_dir) / "missing.yaml"),
        )

        with TestClient(create_app(config)) as client:
            client.post("/api/v1/collections", json={"name": "test", "dimension": 3})
            response = client.post("/api/v1/save")

            assert response.status_code == 200
            assert response.json()["collection_count"] == 1
            assert Path(response.json()["path"]).exists()
