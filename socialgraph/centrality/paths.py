"""Single-source shortest paths by breadth-first search on an unweighted graph."""

from collections import deque
from dataclasses import dataclass

import numpy as np

from socialgraph.graph.types import Graph


@dataclass(frozen=True)
class ShortestPathTree:
    """BFS shortest-path structure rooted at one source.

    order lists reached nodes in non-decreasing distance, which is the order
    Brandes' dependency accumulation walks backwards.
    """

    source: int
    order: list[int]  # reached nodes in BFS order, source first
    sigma: np.ndarray  # float64 (n,), number of shortest paths from source
    distance: np.ndarray  # int64 (n,), -1 where unreachable
    predecessors: list[list[int]]  # predecessors on shortest paths


def shortest_path_tree(graph: Graph, source: int) -> ShortestPathTree:
    """Count shortest paths from source to every reachable node.

    Args:
        graph: Graph to search.
        source: Root node id.

    Returns:
        ShortestPathTree with path counts, distances and predecessor lists.
    """
    n = graph.node_count()
    if not 0 <= source < n:
        raise KeyError(f"Unknown node id {source}")
    indptr = graph.adjacency.indptr
    indices = graph.adjacency.indices

    sigma = np.zeros(n, dtype=np.float64)
    distance = np.full(n, -1, dtype=np.int64)
    predecessors: list[list[int]] = [[] for _ in range(n)]
    order: list[int] = []

    sigma[source] = 1.0
    distance[source] = 0
    queue = deque([source])
    while queue:
        v = queue.popleft()
        order.append(v)
        next_dist = distance[v] + 1
        for w in indices[indptr[v]:indptr[v + 1]].tolist():
            if distance[w] < 0:
                distance[w] = next_dist
                queue.append(w)
            if distance[w] == next_dist:
                sigma[w] += sigma[v]
                predecessors[w].append(v)

    return ShortestPathTree(
        source=source,
        order=order,
        sigma=sigma,
        distance=distance,
        predecessors=predecessors,
    )
