"""Centrality engine: degree, shortest-path betweenness and closeness."""

from socialgraph.centrality.measures import betweenness, closeness, degree
from socialgraph.centrality.paths import ShortestPathTree, shortest_path_tree

__all__ = [
    "ShortestPathTree",
    "betweenness",
    "closeness",
    "degree",
    "shortest_path_tree",
]
