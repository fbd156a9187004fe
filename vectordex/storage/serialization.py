"""
Snapshot serialization for vectordex.

A snapshot is a single msgpack document holding every collection in
insertion order:

    {
        "magic": "VECTORDEX",
        "format_version": 1,
        "created_at": <unix time>,
        "collections": [<Collection.to_dict()>, ...],
    }

Point matrices travel as raw little-endian float32 bytes.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Dict, List, Union

import msgpack

from ..core.exceptions import SerializationError, StorageError
from ..utils.logging import get_logger


logger = get_logger(__name__)

MAGIC = "VECTORDEX"
FORMAT_VERSION = 1


def pack_snapshot(collections: List[Dict[str, Any]]) -> bytes:
    """
    Encode serialized collections into snapshot bytes.

    Args:
        collections: Output of ``Collection.to_dict`` for each collection

    Raises:
        SerializationError: If a collection holds unencodable data
    """
    document = {
        "magic": MAGIC,
        "format_version": FORMAT_VERSION,
        "created_at": time.time(),
        "collections": collections,
    }

    try:
        return msgpack.packb(document, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise SerializationError(f"Failed to encode snapshot: {e}")


def unpack_snapshot(data: bytes) -> List[Dict[str, Any]]:
    """
    Decode snapshot bytes back into serialized collections.

    Raises:
        SerializationError: If the bytes are not a vectordex snapshot
    """
    try:
        document = msgpack.unpackb(data, raw=False)
    except (msgpack.UnpackException, ValueError, TypeError) as e:
        raise SerializationError(f"Failed to decode snapshot: {e}")

    if not isinstance(document, dict) or document.get("magic") != MAGIC:
        raise SerializationError("Not a vectordex snapshot")

    version = document.get("format_version")
    if version != FORMAT_VERSION:
        raise SerializationError(
            f"Unsupported snapshot format version: {version} "
            f"(expected {FORMAT_VERSION})"
        )

    collections = document.get("collections")
    if not isinstance(collections, list):
        raise SerializationError("Snapshot has no collection list")

    return collections


def write_snapshot(path: Union[str, Path], collections: List[Dict[str, Any]]) -> int:
    """
    Write a snapshot file.

    The file is written next to its destination and renamed over it, so
    a crash mid-write leaves the previous snapshot intact.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    data = pack_snapshot(collections)
    tmp_path = path.with_name(path.name + ".tmp")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        raise StorageError(f"Failed to write snapshot {path}: {e}")

    logger.debug(f"Wrote snapshot {path} ({len(data)} bytes)")
    return len(data)


def read_snapshot(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a snapshot file.

    Raises:
        StorageError: If the file can't be read
        SerializationError: If its content is not a valid snapshot
    """
    path = Path(path)

    if not path.exists():
        raise StorageError(f"Snapshot does not exist: {path}")

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise StorageError(f"Failed to read snapshot {path}: {e}")

    return unpack_snapshot(data)
