"""
Unit tests for snapshot serialization.
"""

import pytest
import msgpack
import numpy as np
from pathlib import Path

from vectordex import VectorDB
from vectordex.core.collection import Collection
from vectordex.core.exceptions import SerializationError, StorageError
from vectordex.storage import (
    FORMAT_VERSION,
    MAGIC,
    pack_snapshot,
    read_snapshot,
    unpack_snapshot,
    write_snapshot,
)


@pytest.fixture
def collection():
    """Indexed collection with two points appended after the build."""
    collection = Collection("colors", dimension=3)
    vectors = [[10, 12, 4.5], [10, 11, 10.5], [10, 20.5, 15]]
    values = ["red", "green", "blue"]
    collection.append(collection.validate_batch(vectors, values), values, "a.txt")
    collection.build_index()

    vectors = [[10, 12, 16.5], [10, 30, 40.5]]
    values = ["yellow", "happy"]
    collection.append(collection.validate_batch(vectors, values), values, "b.txt")
    return collection


class TestSnapshotCodec:
    """pack/unpack tests."""

    def test_round_trip(self, collection):
        """Serialized collections come back unchanged."""
        data = collection.to_dict()

        restored = unpack_snapshot(pack_snapshot([data]))

        assert len(restored) == 1
        assert restored[0]["name"] == "colors"
        assert restored[0]["points"] == data["points"]
        assert restored[0]["values"] == data["values"]
        assert restored[0]["sources"] == data["sources"]
        assert restored[0]["indexed_count"] == 3

    def test_points_are_float32_bytes(self, collection):
        """Points travel as raw float32 bytes."""
        data = collection.to_dict()

        matrix = np.frombuffer(data["points"], dtype=np.float32).reshape(-1, 3)

        assert matrix.shape == (5, 3)
        assert matrix[4].tolist() == [10.0, 30.0, 40.5]

    def test_header(self):
        """The document carries magic and version."""
        document = msgpack.unpackb(pack_snapshot([]), raw=False)

        assert document["magic"] == MAGIC
        assert document["format_version"] == FORMAT_VERSION
        assert document["collections"] == []

    def test_bad_magic(self):
        """Test rejection of foreign documents."""
        data = msgpack.packb({"magic": "OTHER", "format_version": 1, "collections": []})

        with pytest.raises(SerializationError, match="Not a vectordex snapshot"):
            unpack_snapshot(data)

    def test_bad_version(self):
        """Test rejection of unknown format versions."""
        data = msgpack.packb(
            {"magic": MAGIC, "format_version": FORMAT_VERSION + 1, "collections": []}
        )

        with pytest.raises(SerializationError, match="Unsupported"):
            unpack_snapshot(data)

    def test_missing_collections(self):
        """Test rejection of documents without a collection list."""
        data = msgpack.packb({"magic": MAGIC, "format_version": FORMAT_VERSION})

        with pytest.raises(SerializationError):
            unpack_snapshot(data)

    def test_garbage(self):
        """Test rejection of non-msgpack bytes."""
        with pytest.raises(SerializationError):
            unpack_snapshot(b"\xc1\xc1 definitely not a snapshot")

    def test_unencodable(self):
        """Test rejection of data msgpack can't encode."""
        with pytest.raises(SerializationError):
            pack_snapshot([{"name": object()}])


class TestSnapshotFiles:
    """write/read tests."""

    def test_write_and_read(self, collection, temp_dir):
        """Test a file round trip."""
        path = Path(temp_dir) / "nested" / "db.snapshot"

        size = write_snapshot(path, [collection.to_dict()])

        assert path.exists()
        assert path.stat().st_size == size
        assert not path.with_name("db.snapshot.tmp").exists()
        assert read_snapshot(path)[0]["values"] == collection.values()

    def test_overwrite(self, collection, temp_dir):
        """A second write replaces the first."""
        path = Path(temp_dir) / "db.snapshot"
        write_snapshot(path, [collection.to_dict()])
        write_snapshot(path, [])

        assert read_snapshot(path) == []

    def test_read_missing(self, temp_dir):
        """Test reading a file that doesn't exist."""
        with pytest.raises(StorageError):
            read_snapshot(Path(temp_dir) / "missing.snapshot")

    def test_write_unwritable(self, temp_dir):
        """Test write failures."""
        blocker = Path(temp_dir) / "file.txt"
        blocker.write_text("not a directory")

        with pytest.raises(StorageError):
            write_snapshot(blocker / "db.snapshot", [])


class TestCollectionRestore:
    """Collection.from_dict and VectorDB.load tests."""

    def test_restores_staleness(self, collection):
        """The rebuilt index covers the same prefix of points."""
        restored = Collection.from_dict(collection.to_dict())

        assert len(restored) == 5
        assert restored.indexed_count == 3
        assert restored.is_stale is True
        assert restored.get_docs() == ["a.txt"] * 3 + ["b.txt"] * 2
        assert restored.query([10, 30.5, 35.5], k=5) == collection.query(
            [10, 30.5, 35.5], k=5
        )

    def test_restores_unbuilt(self):
        """A collection without an index stays without one."""
        collection = Collection("empty", dimension=4, index_type="flat")

        restored = Collection.from_dict(collection.to_dict())

        assert restored.has_index is False
        assert restored.index_type == "flat"
        assert len(restored) == 0

    def test_misaligned_lengths(self, collection):
        """Points and metadata must line up."""
        data = collection.to_dict()
        data["values"] = data["values"][:-1]

        with pytest.raises(ValueError):
            Collection.from_dict(data)

    def test_load_invalid_collection(self, temp_dir):
        """Broken collections surface as SerializationError."""
        path = Path(temp_dir) / "db.snapshot"
        write_snapshot(path, [{"name": "broken"}])

        with pytest.raises(SerializationError):
            VectorDB.load(path)

    @pytest.mark.parametrize("dimension", [0, -2, "3"])
    def test_load_invalid_dimension(self, temp_dir, dimension):
        """A stored dimension that fails validation is a broken snapshot."""
        path = Path(temp_dir) / "db.snapshot"
        write_snapshot(path, [{
            "name": "bad",
            "dimension": dimension,
            "points": b"",
            "values": [],
            "sources": [],
        }])

        with pytest.raises(SerializationError):
            VectorDB.load(path)

    @pytest.mark.parametrize("indexed_count", [6, -1, 2.0, True])
    def test_invalid_indexed_count(self, collection, indexed_count):
        """indexed_count must be an int within the stored points."""
        data = collection.to_dict()
        data["indexed_count"] = indexed_count

        with pytest.raises(ValueError, match="indexed_count"):
            Collection.from_dict(data)

    def test_load_indexed_count_too_large(self, collection, temp_dir):
        """An index over more points than stored is a broken snapshot."""
        data = collection.to_dict()
        data["indexed_count"] = len(collection) + 1
        path = Path(temp_dir) / "db.snapshot"
        write_snapshot(path, [data])

        with pytest.raises(SerializationError):
            VectorDB.load(path)

    def test_load_keeps_order(self, temp_dir):
        """Collections come back in the order they were created."""
        path = Path(temp_dir) / "db.snapshot"
        db = VectorDB(index_type="flat")
        for name in ["c", "a", "b"]:
            db.create_collection(name, dimension=2)
        db.save(path)

        assert VectorDB.load(path).list_collections() == ["c", "a", "b"]
