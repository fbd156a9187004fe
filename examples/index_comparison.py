"""
Compare Flat vs HNSW index build time, query speed and recall.
"""

import numpy as np
import time
from vectordex.index import FlatIndex, HNSWIndex


def run_benchmark():
    print("=" * 70)
    print("Index Comparison: Flat vs HNSW")
    print("=" * 70)

    configs = [
        {"n_vectors": 1000, "dimension": 64},
        {"n_vectors": 5000, "dimension": 64},
    ]

    n_queries = 100
    k = 10

    for config in configs:
        n_vectors = config["n_vectors"]
        dimension = config["dimension"]

        print(f"\n{'='*70}")
        print(f"Dataset: {n_vectors:,} vectors, {dimension} dimensions")
        print("=" * 70)

        rng = np.random.default_rng(42)
        vectors = rng.standard_normal((n_vectors, dimension)).astype(np.float32)
        queries = rng.standard_normal((n_queries, dimension)).astype(np.float32)

        # =====================================================
        # Flat index
        # =====================================================
        print("\n[Flat Index]")
        flat = FlatIndex.build(vectors)
        print(f"  Build: {flat.build_time:.3f}s")

        start = time.time()
        flat_results = [flat.search(q, k=k) for q in queries]
        elapsed = time.time() - start
        print(f"  Search: {n_queries / elapsed:.0f} QPS ({elapsed / n_queries * 1000:.2f}ms/query)")

        # =====================================================
        # HNSW index
        # =====================================================
        print("\n[HNSW Index (M=16, ef_construction=200)]")
        hnsw = HNSWIndex.build(vectors, M=16, ef_construction=200, seed=42)
        print(f"  Build: {hnsw.build_time:.3f}s")

        for ef in (10, 50, 100):
            start = time.time()
            hnsw_results = [hnsw.search(q, k=k, ef=ef) for q in queries]
            elapsed = time.time() - start

            hits = sum(
                len({r.id for r in approx} & {r.id for r in exact})
                for approx, exact in zip(hnsw_results, flat_results)
            )
            recall = hits / (k * n_queries)
            print(
                f"  ef={ef:<4} {n_queries / elapsed:.0f} QPS, "
                f"recall@{k}: {recall:.3f}"
            )


if __name__ == "__main__":
    run_benchmark()
