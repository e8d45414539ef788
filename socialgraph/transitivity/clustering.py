"""Local clustering coefficients and global transitivity.

Triangle counts come from the sparse product (A @ A) * A: its row sums count
each triangle through a node twice.
"""

import logging

import numpy as np

from socialgraph.graph.types import Graph
from socialgraph.results.types import NodeVector

log = logging.getLogger(__name__)


def triangle_counts(graph: Graph) -> np.ndarray:
    """Number of triangles through each node, int64 array of shape (n,)."""
    adj = graph.adjacency
    closed = (adj @ adj).multiply(adj)
    twice = np.asarray(closed.sum(axis=1)).ravel()
    return np.rint(twice / 2.0).astype(np.int64)


def connected_triples(graph: Graph) -> np.ndarray:
    """Number of neighbor pairs centered on each node, C(d, 2)."""
    d = graph.degrees()
    return d * (d - 1) // 2


def local_clustering(graph: Graph) -> NodeVector:
    """Fraction of each node's neighbor pairs that are themselves adjacent.

    Nodes with degree < 2 are undefined and carry an UndefinedMetricWarning;
    summaries treat them as 0.
    """
    triangles = triangle_counts(graph).astype(np.float64)
    triples = connected_triples(graph).astype(np.float64)
    scores = np.full(graph.node_count(), np.nan, dtype=np.float64)
    defined = triples > 0
    scores[defined] = triangles[defined] / triples[defined]
    return NodeVector.from_raw("local_clustering", scores, "degree < 2")


def global_clustering(graph: Graph) -> float:
    """Closed triplets over all connected triplets (3 x triangles / triples).

    Nodes with degree < 2 center no triplets and add nothing to either count.
    A graph without connected triplets has transitivity 0.
    """
    triples = int(connected_triples(graph).sum())
    if triples == 0:
        return 0.0
    # Summed per-node counts see each triangle three times
    closed = int(triangle_counts(graph).sum())
    value = closed / triples
    log.debug("Transitivity: %d closed of %d triplets", closed, triples)
    return value


def average_clustering(graph: Graph) -> float:
    """Mean local clustering with undefined nodes counted as 0."""
    return local_clustering(graph).summary()["mean"]
