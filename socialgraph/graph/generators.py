"""Deterministic and random graph families.

The random families sample undirected graphs by independent Bernoulli draws
over the upper triangle of an edge probability matrix, then mirror them.
"""

from itertools import combinations

import numpy as np

from socialgraph.graph.build import build_graph
from socialgraph.graph.types import Graph


def empty_graph(n: int) -> Graph:
    return build_graph(n, [])


def complete_graph(n: int) -> Graph:
    return build_graph(n, combinations(range(n), 2))


def path_graph(n: int) -> Graph:
    return build_graph(n, [(i, i + 1) for i in range(n - 1)])


def star_graph(n_leaves: int) -> Graph:
    """Node 0 is the center, nodes 1..n_leaves are leaves."""
    return build_graph(n_leaves + 1, [(0, leaf) for leaf in range(1, n_leaves + 1)])


def clique_pair_graph(clique_size: int) -> Graph:
    """Two disjoint cliques joined by a single bridge edge.

    Nodes 0..clique_size-1 form the first clique, the rest the second.
    The bridge joins node clique_size-1 to node clique_size.
    """
    first = range(clique_size)
    second = range(clique_size, 2 * clique_size)
    edges = list(combinations(first, 2)) + list(combinations(second, 2))
    edges.append((clique_size - 1, clique_size))
    return build_graph(2 * clique_size, edges)


def build_probability_matrix(
    sizes: list[int], p_in: float, p_out: float
) -> np.ndarray:
    """Build the planted-partition edge probability matrix.

    P[i,j] = p_in if i and j share a block, p_out otherwise, with a zero
    diagonal.

    Args:
        sizes: Number of nodes per block; blocks are contiguous id ranges.
        p_in: Within-block edge probability.
        p_out: Between-block edge probability.

    Returns:
        Probability matrix of shape (n, n) with values in [0, 1].
    """
    K = len(sizes)
    blocks = np.repeat(np.arange(K), sizes)

    omega = np.full((K, K), p_out, dtype=np.float64)
    np.fill_diagonal(omega, p_in)

    P = omega[blocks][:, blocks]
    np.fill_diagonal(P, 0.0)
    return P


def sample_undirected(P: np.ndarray, rng: np.random.Generator) -> Graph:
    """Sample an undirected graph with independent Bernoulli(P[i,j]) edges, i < j."""
    n = P.shape[0]
    rows, cols = np.triu_indices(n, k=1)
    draws = rng.random(len(rows)) < P[rows, cols]
    return build_graph(n, zip(rows[draws].tolist(), cols[draws].tolist()))


def erdos_renyi_graph(n: int, p: float, rng: np.random.Generator) -> Graph:
    """G(n, p) random graph."""
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    P = np.full((n, n), p, dtype=np.float64)
    np.fill_diagonal(P, 0.0)
    return sample_undirected(P, rng)


def planted_partition_graph(
    sizes: list[int], p_in: float, p_out: float, rng: np.random.Generator
) -> tuple[Graph, np.ndarray]:
    """Sample a planted-partition SBM graph.

    Returns:
        (graph, block_assignments) where block_assignments maps node -> block.
    """
    for name, p in (("p_in", p_in), ("p_out", p_out)):
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"{name} must be in [0, 1], got {p}")
    P = build_probability_matrix(sizes, p_in, p_out)
    blocks = np.repeat(np.arange(len(sizes)), sizes)
    return sample_undirected(P, rng), blocks
