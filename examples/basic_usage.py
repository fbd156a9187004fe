"""
Basic usage example for vectordex.
"""

import tempfile
from pathlib import Path

from vectordex import VectorDB, IndexNotBuiltError


def main():
    print("=" * 60)
    print("vectordex Basic Usage Example")
    print("=" * 60)

    # 1. Create database
    print("\n1. Creating database...")
    db = VectorDB()

    # 2. Create collection
    print("2. Creating collection...")
    db.create_collection("test", dimension=3)
    print(f"   Collections: {db.list_collections()}")

    # 3. Append vectors
    print("\n3. Appending vectors...")
    count = db.insert(
        "test",
        [[10, 12, 4.5], [10, 11, 10.5], [10, 20.5, 15]],
        ["red", "green", "blue"],
        "colors.txt",
    )
    print(f"   Appended {count} vectors")

    try:
        db.query("test", [10, 12.5, 4.5], k=1)
    except IndexNotBuiltError as e:
        print(f"   Query before build: {e}")

    # 4. Build and query
    print("\n4. Building index and querying...")
    db.build_index("test")
    for score, value in db.query("test", [10, 12.5, 4.5], k=3):
        print(f"   {value}: {score:.7f}")

    # 5. Append more, rebuild
    print("\n5. Appending more vectors and rebuilding...")
    db.insert(
        "test",
        [[10, 12, 16.5], [10, 30, 40.5]],
        ["yellow", "happy"],
        "more_colors.txt",
    )
    print(f"   Stale: {db.collection_stats('test')['is_stale']}")
    db.build_index("test")
    score, value = db.query("test", [10, 30.5, 35.5], k=1)[0]
    print(f"   Best match: {value} ({score:.7f})")
    print(f"   Sources: {db.get_docs('test')}")

    # 6. Snapshot round trip
    print("\n6. Saving and restoring a snapshot...")
    with tempfile.TemporaryDirectory() as tmpdir:
        path = db.save(Path(tmpdir) / "colors.snapshot")
        restored = VectorDB.load(path)
        print(f"   Restored: {restored.info()['total_vectors']} vectors")
        print(f"   Same answer: {restored.query('test', [10, 30.5, 35.5], k=1)}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
