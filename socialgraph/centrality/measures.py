"""Degree, betweenness and closeness centrality.

Betweenness follows Brandes (2001): one BFS per source counts shortest paths,
then dependencies are accumulated in reverse BFS order. Closeness uses the
reachable-subset normalization, so nodes in small components are compared on
the peers they can actually reach.
"""

import logging

import numpy as np

from socialgraph.centrality.paths import shortest_path_tree
from socialgraph.graph.types import Graph
from socialgraph.results.types import NodeVector

log = logging.getLogger(__name__)


def degree(graph: Graph) -> NodeVector:
    """Number of incident edges per node, as float."""
    return NodeVector(metric="degree", raw=graph.degrees().astype(np.float64))


def betweenness(graph: Graph, normalized: bool = False) -> NodeVector:
    """Shortest-path betweenness over unordered node pairs.

    Args:
        graph: Graph to analyze.
        normalized: Divide by the (n-1)(n-2)/2 pairs not involving the node.

    Returns:
        NodeVector of non-negative scores. Disconnected pairs contribute 0.
    """
    n = graph.node_count()
    scores = np.zeros(n, dtype=np.float64)

    for s in range(n):
        tree = shortest_path_tree(graph, s)
        delta = np.zeros(n, dtype=np.float64)
        for w in reversed(tree.order):
            coeff = (1.0 + delta[w]) / tree.sigma[w]
            for v in tree.predecessors[w]:
                delta[v] += tree.sigma[v] * coeff
            if w != s:
                scores[w] += delta[w]

    # Each unordered pair was counted once from each endpoint
    scores /= 2.0

    if normalized and n > 2:
        scores /= (n - 1) * (n - 2) / 2.0

    log.debug("Betweenness: %d sources, max score %.4g", n, scores.max(initial=0.0))
    return NodeVector(metric="betweenness", raw=scores)


def closeness(graph: Graph) -> NodeVector:
    """Reachable count divided by total distance to the reachable nodes.

    Nodes that reach no other node are undefined (NaN in ``raw``) and carry
    an UndefinedMetricWarning; they read as 0 through the vector accessors.
    """
    n = graph.node_count()
    scores = np.full(n, np.nan, dtype=np.float64)

    for v in range(n):
        distance = shortest_path_tree(graph, v).distance
        reached = distance > 0
        n_reached = int(reached.sum())
        if n_reached:
            scores[v] = n_reached / float(distance[reached].sum())

    return NodeVector.from_raw("closeness", scores, "no reachable peers")
