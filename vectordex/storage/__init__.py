"""
Snapshot storage for vectordex.

Example:
    >>> from vectordex.storage import write_snapshot, read_snapshot
    >>>
    >>> write_snapshot("./data/db.snapshot", [c.to_dict() for c in collections])
    >>> restored = read_snapshot("./data/db.snapshot")
"""

from .serialization import (
    MAGIC,
    FORMAT_VERSION,
    pack_snapshot,
    unpack_snapshot,
    write_snapshot,
    read_snapshot,
)

__all__ = [
    "MAGIC",
    "FORMAT_VERSION",
    "pack_snapshot",
    "unpack_snapshot",
    "write_snapshot",
    "read_snapshot",
]
