"""
HNSW (Hierarchical Navigable Small World) Index Implementation.

HNSW is a graph-based approximate nearest neighbor algorithm that
provides logarithmic search complexity with high recall.

The graph is built in one pass over the input vectors, in order, with a
seeded random generator for level assignment. The same input and the
same parameters therefore always produce the same graph and the same
search results.

Reference:
    Malkov, Y. A., & Yashunin, D. A. (2018).
    "Efficient and robust approximate nearest neighbor search using
    Hierarchical Navigable Small World graphs."
    https://arxiv.org/abs/1603.09320
"""

from __future__ import annotations

import heapq
import math
import random
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Any, Tuple, Set, NamedTuple

import numpy as np
from numpy.typing import NDArray

from .base import BaseIndex, IndexStats, IndexType, SearchResult
from ..distance import NORM_EPS


# Hard cap on node levels
MAX_LEVEL = 16


class Neighbor(NamedTuple):
    """A neighbor with its distance."""
    distance: float
    id: int


@dataclass
class HNSWConfig:
    """Construction and search parameters for HNSW."""

    # Maximum number of connections per node (except layer 0)
    M: int = 16

    # Maximum connections at layer 0 (typically 2*M)
    M_max0: Optional[int] = None

    # Size of dynamic candidate list during construction
    ef_construction: int = 200

    # Size of dynamic candidate list during search
    ef_search: int = 50

    # Level generation multiplier (1/ln(M))
    ml: Optional[float] = None

    # Random seed for level assignment
    seed: int = 42

    # Whether to extend candidates with their neighbors when selecting
    extend_candidates: bool = False

    # Whether to keep pruned connections
    keep_pruned_connections: bool = True

    def __post_init__(self):
        if self.M < 2:
            raise ValueError(f"M must be >= 2, got {self.M}")

        if self.ef_construction < 1 or self.ef_search < 1:
            raise ValueError("ef_construction and ef_search must be >= 1")

        if self.M_max0 is None:
            self.M_max0 = self.M * 2

        if self.ml is None:
            self.ml = 1.0 / math.log(self.M)


class HNSWNode:
    """A node in the HNSW graph: its top layer and per-layer neighbors."""

    __slots__ = ['id', 'layer', 'neighbors']

    def __init__(self, id: int, layer: int):
        self.id = id
        self.layer = layer
        # neighbors[level] = list of neighbor ids
        self.neighbors: Dict[int, List[int]] = {l: [] for l in range(layer + 1)}

    def get_neighbors(self, level: int) -> List[int]:
        """Get neighbors at a specific level."""
        return self.neighbors.get(level, [])

    def add_neighbor(self, level: int, neighbor_id: int) -> None:
        """Add a neighbor at a specific level."""
        if level not in self.neighbors:
            self.neighbors[level] = []
        if neighbor_id not in self.neighbors[level]:
            self.neighbors[level].append(neighbor_id)

    def set_neighbors(self, level: int, neighbors: List[int]) -> None:
        """Set all neighbors at a specific level."""
        self.neighbors[level] = neighbors


class HNSWIndex(BaseIndex):
    """
    HNSW (Hierarchical Navigable Small World) Index.

    Example:
        >>> index = HNSWIndex.build(vectors, M=16, ef_construction=200)
        >>> results = index.search(query, k=10)
        >>>
        >>> # Trade speed for recall at query time
        >>> results = index.search(query, k=10, ef=200)

    Parameters:
        M: Max connections per node (default: 16)
            - Higher M = better recall, more memory, slower construction
        ef_construction: Construction beam width (default: 200)
            - Higher = better graph quality, slower construction
        ef_search: Default search beam width (default: 50)
            - Higher = better recall, slower search
            - When ef >= number of vectors the whole graph is explored
        seed: Seed for level assignment (default: 42)

    Complexity:
        - Construction: O(n * log(n) * M * ef_construction)
        - Search: O(log(n) * ef_search)
        - Memory: O(n * M)
    """

    def __init__(self, vectors: NDArray, **params):
        super().__init__(vectors)

        self.config = HNSWConfig(**params)

        # Graph structure
        self._nodes: List[HNSWNode] = []
        self._entry_point: Optional[int] = None
        self._max_level: int = -1

        self._rng = random.Random(self.config.seed)
        self._n_distance_computations = 0

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def index_type(self) -> IndexType:
        return IndexType.HNSW

    @property
    def entry_point(self) -> Optional[int]:
        """Current entry point id."""
        return self._entry_point

    @property
    def max_level(self) -> int:
        """Current maximum level in the graph."""
        return self._max_level

    # =========================================================================
    # CORE ALGORITHMS
    # =========================================================================

    def _random_level(self) -> int:
        """
        Draw a level for a new node.

        level = floor(-ln(U) * ml) with U uniform in (0, 1].
        """
        u = 1.0 - self._rng.random()
        return min(int(-math.log(u) * self.config.ml), MAX_LEVEL)

    def _distances(
        self,
        query: NDArray,
        query_norm: np.float32,
        ids: List[int],
    ) -> NDArray:
        """Cosine distances from a query to the given nodes, in float32."""
        self._n_distance_computations += len(ids)

        dots = self._vectors[ids] @ query
        denominators = self._norms[ids] * query_norm

        similarities = np.zeros(len(ids), dtype=np.float32)
        valid = denominators >= NORM_EPS
        similarities[valid] = dots[valid] / denominators[valid]

        return np.float32(1.0) - similarities

    def _node_distances(self, node_id: int, ids: List[int]) -> NDArray:
        """Cosine distances from one stored node to other nodes."""
        return self._distances(self._vectors[node_id], self._norms[node_id], ids)

    def _search_layer(
        self,
        query: NDArray,
        query_norm: np.float32,
        entry_points: List[int],
        ef: int,
        level: int,
    ) -> List[Neighbor]:
        """
        Search a single layer of the graph.

        Implements Algorithm 2 from the HNSW paper.

        Returns:
            Up to ef neighbors sorted by (distance, id)
        """
        visited: Set[int] = set(entry_points)

        # Candidates: min-heap by distance
        candidates: List[Tuple[float, int]] = []

        # Results: max-heap by distance; among equal distances the
        # highest id is evicted first
        results: List[Tuple[float, int]] = []

        distances = self._distances(query, query_norm, entry_points)
        for ep, dist in zip(entry_points, distances):
            dist = float(dist)
            heapq.heappush(candidates, (dist, ep))
            heapq.heappush(results, (-dist, -ep))

        while candidates:
            dist_c, current = heapq.heappop(candidates)

            # Stop if closest candidate is further than furthest result
            if dist_c > -results[0][0]:
                break

            unvisited = [
                n for n in self._nodes[current].get_neighbors(level)
                if n not in visited
            ]
            if not unvisited:
                continue

            visited.update(unvisited)
            distances = self._distances(query, query_norm, unvisited)

            for neighbor_id, dist_n in zip(unvisited, distances):
                dist_n = float(dist_n)
                dist_f = -results[0][0]

                if dist_n < dist_f or len(results) < ef:
                    heapq.heappush(candidates, (dist_n, neighbor_id))
                    heapq.heappush(results, (-dist_n, -neighbor_id))

                    if len(results) > ef:
                        heapq.heappop(results)

        return sorted(Neighbor(-d, -id) for d, id in results)

    def _select_neighbors_heuristic(
        self,
        node_id: int,
        candidates: List[Neighbor],
        M: int,
        level: int,
        extend_candidates: bool = False,
        keep_pruned: bool = True,
    ) -> List[int]:
        """
        Heuristic neighbor selection (Algorithm 4).

        Prefers neighbors that are closer to the node than to any
        neighbor already selected, which keeps the graph navigable.
        """
        if len(candidates) <= M:
            return [n.id for n in candidates]

        if extend_candidates:
            extended: Dict[int, float] = {n.id: n.distance for n in candidates}

            for neighbor in candidates:
                new_ids = [
                    nn_id for nn_id in self._nodes[neighbor.id].get_neighbors(level)
                    if nn_id not in extended and nn_id != node_id
                ]
                if not new_ids:
                    continue
                for nn_id, dist in zip(new_ids, self._node_distances(node_id, new_ids)):
                    extended[nn_id] = float(dist)

            candidates = sorted(Neighbor(d, id) for id, d in extended.items())

        selected: List[int] = []
        pruned: List[Neighbor] = []

        for candidate in candidates:
            if len(selected) >= M:
                break

            if selected:
                to_selected = self._node_distances(candidate.id, selected)
                if bool((to_selected < candidate.distance).any()):
                    pruned.append(candidate)
                    continue

            selected.append(candidate.id)

        if keep_pruned and len(selected) < M:
            for p in pruned:
                if len(selected) >= M:
                    break
                selected.append(p.id)

        return selected

    def _connect_neighbors(
        self,
        node_id: int,
        neighbors: List[int],
        level: int,
    ) -> None:
        """
        Connect a node to its neighbors (bidirectional).

        Neighbor lists that overflow are pruned with the heuristic.
        """
        M_max = self.config.M_max0 if level == 0 else self.config.M

        self._nodes[node_id].set_neighbors(level, neighbors[:M_max])

        for neighbor_id in neighbors:
            neighbor = self._nodes[neighbor_id]
            neighbor_neighbors = neighbor.get_neighbors(level)

            if node_id in neighbor_neighbors:
                continue

            if len(neighbor_neighbors) < M_max:
                neighbor.add_neighbor(level, node_id)
                continue

            ids = neighbor_neighbors + [node_id]
            distances = self._node_distances(neighbor_id, ids)
            candidates = sorted(
                Neighbor(float(d), id) for id, d in zip(ids, distances)
            )

            neighbor.set_neighbors(
                level,
                self._select_neighbors_heuristic(
                    neighbor_id, candidates, M_max, level,
                    extend_candidates=False, keep_pruned=True,
                ),
            )

    def _insert(self, node_id: int) -> None:
        """
        Insert the vector at row ``node_id`` into the graph.

        Implements Algorithm 1 from the HNSW paper.
        """
        level = self._random_level()
        self._nodes.append(HNSWNode(node_id, level))

        if self._entry_point is None:
            self._entry_point = node_id
            self._max_level = level
            return

        query = self._vectors[node_id]
        query_norm = self._norms[node_id]
        current_ep = self._entry_point

        # Greedy descent through the layers above the node's level
        for lc in range(self._max_level, level, -1):
            neighbors = self._search_layer(query, query_norm, [current_ep], 1, lc)
            if neighbors:
                current_ep = neighbors[0].id

        for lc in range(min(level, self._max_level), -1, -1):
            neighbors = self._search_layer(
                query, query_norm, [current_ep], self.config.ef_construction, lc
            )

            M = self.config.M_max0 if lc == 0 else self.config.M
            selected = self._select_neighbors_heuristic(
                node_id, neighbors, M, lc,
                extend_candidates=self.config.extend_candidates,
                keep_pruned=self.config.keep_pruned_connections,
            )
            self._connect_neighbors(node_id, selected, lc)

            if neighbors:
                current_ep = neighbors[0].id

        if level > self._max_level:
            self._entry_point = node_id
            self._max_level = level

    def _build(self) -> None:
        for node_id in range(self.size):
            self._insert(node_id)

    # =========================================================================
    # SEARCH
    # =========================================================================

    def search(
        self,
        query: NDArray,
        k: int = 10,
        ef: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Search for k nearest neighbors.

        Implements Algorithm 5 from the HNSW paper.

        Args:
            query: Query vector
            k: Number of results
            ef: Override ef_search (never below k)

        Returns:
            List of SearchResult, most similar first
        """
        if self.size == 0 or k < 1:
            return []

        query = self._validate_query(query)
        query_norm = np.float32(np.linalg.norm(query))

        ef = max(ef or self.config.ef_search, k)

        current_ep = self._entry_point
        for level in range(self._max_level, 0, -1):
            neighbors = self._search_layer(query, query_norm, [current_ep], 1, level)
            if neighbors:
                current_ep = neighbors[0].id

        candidates = self._search_layer(query, query_norm, [current_ep], ef, 0)

        return [
            SearchResult(id=neighbor.id, distance=neighbor.distance)
            for neighbor in candidates[:k]
        ]

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def stats(self) -> IndexStats:
        """Get index statistics."""
        level_counts: Dict[int, int] = defaultdict(int)
        total_connections = 0

        for node in self._nodes:
            level_counts[node.layer] += 1
            for level in range(node.layer + 1):
                total_connections += len(node.get_neighbors(level))

        # Rough estimate for graph structure: ~50 bytes per connection
        graph_memory = total_connections * 50

        return IndexStats(
            index_type=self.index_type.value,
            dimension=self._dimension,
            vector_count=self.size,
            memory_bytes=int(self._vectors.nbytes + graph_memory),
            build_time_seconds=self._build_time,
            extra={
                "M": self.config.M,
                "M_max0": self.config.M_max0,
                "ef_construction": self.config.ef_construction,
                "ef_search": self.config.ef_search,
                "seed": self.config.seed,
                "max_level": self._max_level,
                "entry_point": self._entry_point,
                "level_distribution": dict(level_counts),
                "total_connections": total_connections,
                "avg_connections": total_connections / max(1, self.size),
                "distance_computations": self._n_distance_computations,
            },
        )

    # =========================================================================
    # UTILITIES
    # =========================================================================

    def get_neighbors(self, id: int, level: int = 0) -> List[int]:
        """
        Get neighbors of a node at a specific level.

        Returns:
            List of neighbor ids (empty if the id is unknown)
        """
        if not 0 <= id < len(self._nodes):
            return []
        return list(self._nodes[id].get_neighbors(level))

    def get_node_level(self, id: int) -> int:
        """Top level of a node (-1 if not found)."""
        if not 0 <= id < len(self._nodes):
            return -1
        return self._nodes[id].layer

    def graph_signature(self) -> Dict[str, Any]:
        """
        Plain description of the graph: entry point, max level and every
        node's per-level neighbor lists. Two builds from the same input
        and parameters produce equal signatures.
        """
        return {
            "entry_point": self._entry_point,
            "max_level": self._max_level,
            "nodes": [
                {level: list(ids) for level, ids in node.neighbors.items()}
                for node in self._nodes
            ],
        }
